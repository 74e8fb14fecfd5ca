import logging
from dataclasses import dataclass

from clipboard import ClipboardUnavailable
from clipboard_codec import ClipboardCodec
from editor_context import EditorContext
from key_event import ARROWS, KeyEvent
from row_schema import FIELDS
from selection_model import Cell


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ClipboardOutcome:
    ok: bool
    message: str = ""
    rows: int = 0
    cols: int = 0


class NullFocus:
    def focus(self, row_index, field):
        pass

    def select_all(self):
        pass

    def caret_to_end(self):
        pass


class NavigationController:
    """Keyboard, pointer and clipboard intents over the grid.

    Owns the single commit path: every discrete mutation of the row
    collection ends in exactly one ``HistoryManager.record`` call. Typing
    inside a cell updates the store live; the edit becomes undoable when it
    is committed.
    """

    def __init__(
        self,
        store,
        history,
        selection,
        clipboard,
        focus=None,
        set_status_cb=None,
        codec=None,
    ):
        self.ctx = EditorContext(
            store=store,
            history=history,
            selection=selection,
            _set_status=set_status_cb or (lambda *_: None),
        )
        self.clipboard = clipboard
        self.focus_target = focus or NullFocus()
        self.codec = codec or ClipboardCodec()

    # ---------- shortcuts ----------
    @property
    def store(self):
        return self.ctx.store

    @property
    def history(self):
        return self.ctx.history

    @property
    def selection(self):
        return self.ctx.selection

    @property
    def editing(self) -> bool:
        return self.ctx.editing

    def _set_status(self, msg, seconds=2):
        self.ctx._set_status(msg, seconds)

    def _commit(self):
        self.history.record(self.store.snapshot())

    def _focus_active(self):
        cell = self.selection.active_cell
        self.focus_target.focus(cell.row, cell.field)

    def _edit_value(self) -> str:
        value = self.store.get(self.ctx.edit_row_id, self.ctx.edit_field)
        return "" if value is None else value

    # ---------- key dispatch ----------
    def handle_key(self, event: KeyEvent) -> bool:
        if self.ctx.composing:
            return False

        key = event.key

        if event.ctrl:
            lowered = key.lower()
            if lowered == "z":
                if event.shift:
                    self.redo()
                else:
                    self.undo()
                return True
            if lowered == "y":
                self.redo()
                return True
            if lowered == "c":
                self.copy()
                return True
            if lowered == "v":
                self.paste()
                return True
            if lowered == "a":
                self.toggle_all_checked()
                return True
            if key == " ":
                self.toggle_row_checked()
                return True
            if lowered == "d":
                self.delete_rows()
                return True
            return False

        if key in ARROWS:
            if event.shift:
                self.extend(key)
            elif self.editing:
                self._arrow_while_editing(key)
            else:
                self.move(key)
            return True

        if key == "Enter":
            self.enter(shift=event.shift)
            return True
        if key == "Tab":
            self.tab(shift=event.shift)
            return True
        if key == "Escape":
            self.escape()
            return True
        if key == "F2":
            self.begin_edit()
            return True

        if key in ("Backspace", "Delete"):
            if self.editing:
                if key == "Backspace":
                    self.delete_backward()
                else:
                    self.delete_forward()
            else:
                self.clear_range()
            return True

        if key in ("Home", "End"):
            if self.editing:
                self.ctx.edit_caret = 0 if key == "Home" else len(self._edit_value())
            return True

        if event.printable:
            if self.editing:
                self.insert_text(key)
            else:
                self.begin_edit(replace_with=key)
            return True

        return False

    # ---------- navigation ----------
    def _step(self, cell: Cell, key: str) -> Cell:
        dr, dc = ARROWS[key]
        last_row = max(0, len(self.store) - 1)
        row = min(max(0, cell.row + dr), last_row)
        col = min(max(0, cell.col + dc), len(FIELDS) - 1)
        return Cell(row, FIELDS[col])

    def move(self, key: str):
        target = self._step(self.selection.active_cell, key)
        self.selection.set_active_cell(target)
        self._focus_active()

    def extend(self, key: str):
        target = self._step(self.selection.focus, key)
        self.selection.extend_range(target)

    def _arrow_while_editing(self, key: str):
        value = self._edit_value()
        caret = self.ctx.edit_caret
        if key == "ArrowLeft":
            at_boundary = caret <= 0
        elif key == "ArrowUp":
            at_boundary = caret <= 0
        else:
            at_boundary = caret >= len(value)

        if at_boundary:
            self.commit_edit()
            self.move(key)
            return

        if key == "ArrowLeft":
            self.ctx.edit_caret = caret - 1
        elif key == "ArrowRight":
            self.ctx.edit_caret = caret + 1
        elif key == "ArrowUp":
            self.ctx.edit_caret = 0
        else:
            self.ctx.edit_caret = len(value)

    def enter(self, shift: bool = False):
        cell = self.selection.active_cell
        last_row = len(self.store) - 1
        if not shift and cell.row >= last_row and cell.field == FIELDS[-1]:
            self.add_row()
            return
        self.commit_edit()
        if shift:
            self.selection.set_active_cell(Cell(max(0, cell.row - 1), cell.field))
            self._focus_active()
            return
        self.selection.set_active_cell(Cell(min(cell.row + 1, max(0, last_row)), cell.field))
        self._focus_active()

    def tab(self, shift: bool = False):
        self.commit_edit()
        cell = self.selection.active_cell
        width = len(FIELDS)
        flat = cell.row * width + cell.col + (-1 if shift else 1)
        if flat < 0 or flat >= len(self.store) * width:
            return
        self.selection.set_active_cell(Cell(flat // width, FIELDS[flat % width]))
        self._focus_active()
        self.focus_target.select_all()

    def escape(self):
        if self.editing:
            self.cancel_edit()
            return
        self.selection.set_active_cell(self.selection.active_cell)

    # ---------- editing ----------
    def begin_edit(self, replace_with: str | None = None) -> bool:
        if self.editing or self.selection.dragging:
            return False
        cell = self.selection.active_cell
        row_id = self.store.row_id_at(cell.row)
        if row_id is None:
            return False
        self.selection.set_active_cell(cell)
        original = self.store.value(cell.row, cell.field)
        self.ctx.mode = "editing"
        self.ctx.edit_row_id = row_id
        self.ctx.edit_field = cell.field
        self.ctx.edit_original = original
        if replace_with is not None:
            self.store.update(row_id, cell.field, replace_with)
            self.ctx.edit_caret = len(replace_with)
        else:
            self.ctx.edit_caret = len(original)
        return True

    def _replace_edit_text(self, value: str, caret: int):
        if not self.store.update(self.ctx.edit_row_id, self.ctx.edit_field, value):
            # row vanished underneath the edit
            self.ctx.clear_edit()
            return
        self.ctx.edit_caret = caret

    def insert_text(self, text: str):
        if not self.editing or not text:
            return
        value = self._edit_value()
        caret = min(self.ctx.edit_caret, len(value))
        self._replace_edit_text(value[:caret] + text + value[caret:], caret + len(text))

    def delete_backward(self):
        value = self._edit_value()
        caret = min(self.ctx.edit_caret, len(value))
        if caret == 0:
            return
        self._replace_edit_text(value[: caret - 1] + value[caret:], caret - 1)

    def delete_forward(self):
        value = self._edit_value()
        caret = min(self.ctx.edit_caret, len(value))
        if caret >= len(value):
            return
        self._replace_edit_text(value[:caret] + value[caret + 1 :], caret)

    def _fold_edit(self):
        # the live value is already in the store; the caller records it
        if self.editing:
            self.ctx.clear_edit()

    def commit_edit(self) -> bool:
        if not self.editing:
            return False
        current = self.store.get(self.ctx.edit_row_id, self.ctx.edit_field)
        changed = current is not None and current != self.ctx.edit_original
        self.ctx.clear_edit()
        if changed:
            self._commit()
        return changed

    def cancel_edit(self):
        if not self.editing:
            return
        self.store.update(self.ctx.edit_row_id, self.ctx.edit_field, self.ctx.edit_original)
        self.ctx.clear_edit()

    # ---------- IME composition ----------
    def composition_start(self):
        if not self.editing:
            self.begin_edit()
        self.ctx.composing = True

    def composition_end(self, text: str = ""):
        self.ctx.composing = False
        if text:
            if not self.editing:
                self.begin_edit(replace_with="")
            self.insert_text(text)

    # ---------- pointer ----------
    def pointer_down(self, cell: Cell, shift: bool = False):
        self.commit_edit()
        if shift:
            self.selection.extend_range(cell)
            return
        self.selection.begin_drag(cell)
        self._focus_active()

    def pointer_drag(self, cell: Cell):
        self.selection.drag_to(cell)

    def pointer_up(self):
        self.selection.end_drag()

    def pointer_double(self, cell: Cell):
        self.commit_edit()
        self.selection.end_drag()
        self.selection.set_active_cell(cell)
        self.begin_edit()

    # ---------- history ----------
    def _apply_snapshot(self, snapshot):
        self.store.replace_all(snapshot, keep_selected=True)
        self._sync_checked()
        self.selection.clamp()
        self._drop_stale_pending_focus()
        self._focus_active()
        self.focus_target.caret_to_end()

    def undo(self) -> bool:
        self.commit_edit()
        snapshot = self.history.undo()
        if snapshot is None:
            self._set_status("Nothing to undo", 2)
            return False
        self._apply_snapshot(snapshot)
        remaining = self.history.undo_depth
        self._set_status(f"Undone ({remaining} more)" if remaining else "Undone", 2)
        return True

    def redo(self) -> bool:
        self.commit_edit()
        snapshot = self.history.redo()
        if snapshot is None:
            self._set_status("Nothing to redo", 2)
            return False
        self._apply_snapshot(snapshot)
        remaining = self.history.redo_depth
        self._set_status(f"Redone ({remaining} more)" if remaining else "Redone", 2)
        return True

    # ---------- rows ----------
    def add_row(self) -> str:
        self._fold_edit()
        new_id = self.store.append()
        self._commit()
        index = self.store.index_of(new_id)
        self.selection.set_active_cell(Cell(index, FIELDS[0]))
        self.ctx.pending_focus = (new_id, FIELDS[0])
        return new_id

    def delete_rows(self, ids=None) -> int:
        if ids is None:
            ids = self.selection.checked_ids()
            if not ids:
                row_id = self.store.row_id_at(self.selection.active_cell.row)
                ids = [row_id] if row_id is not None else []
        if not ids:
            return 0
        removed = self.store.remove(ids)
        if removed == 0:
            return 0
        self._fold_edit()
        if len(self.store) == 0:
            self.store.append()
        self._commit()
        self.selection.clamp()
        self._drop_stale_pending_focus()
        self._focus_active()
        self._set_status(f"Deleted {removed} row{'s' if removed != 1 else ''}", 2)
        return removed

    def clear_range(self) -> int:
        cleared = 0
        for cell in self.selection.cells():
            row_id = self.store.row_id_at(cell.row)
            if row_id is None or self.store.value(cell.row, cell.field) == "":
                continue
            if self.store.update(row_id, cell.field, ""):
                cleared += 1
        if cleared:
            self._commit()
            self._set_status(f"Cleared {cleared} cell{'s' if cleared != 1 else ''}", 2)
        return cleared

    def toggle_row_checked(self):
        row_id = self.store.row_id_at(self.selection.active_cell.row)
        if row_id is None:
            return None
        flag = self.selection.toggle_row_checked(row_id)
        self._sync_checked()
        return flag

    def toggle_all_checked(self):
        flag = self.selection.toggle_all_checked()
        self._sync_checked()
        return flag

    def _sync_checked(self):
        # checked flags ride along in snapshots but are not undo steps
        present = self.history.present.copy(deep=True)
        present["selected"] = present["id"].isin(set(self.store.selected_ids()))
        self.history.replace_present(present)

    # ---------- clipboard ----------
    def copy(self) -> ClipboardOutcome:
        rect = self.selection.normalized_rect()
        text = self.codec.encode(self.store.matrix(), rect)
        try:
            self.clipboard.write_text(text)
        except ClipboardUnavailable as exc:
            self._set_status("Copy failed", 3)
            return ClipboardOutcome(False, str(exc))
        r0, r1, c0, c1 = rect
        rows, cols = r1 - r0 + 1, c1 - c0 + 1
        self._set_status("Cell copied" if rows * cols == 1 else f"Copied {rows}x{cols}", 2)
        return ClipboardOutcome(True, rows=rows, cols=cols)

    def paste(self) -> ClipboardOutcome:
        try:
            text = self.clipboard.read_text()
        except ClipboardUnavailable as exc:
            self._set_status("Paste failed", 3)
            return ClipboardOutcome(False, str(exc))

        if self.editing and "\t" not in text and "\n" not in text.rstrip("\r\n"):
            self.insert_text(text.rstrip("\r\n"))
            return ClipboardOutcome(True, rows=1, cols=1)

        matrix = self.codec.decode(text)
        if not matrix:
            self._set_status("Nothing to paste", 2)
            return ClipboardOutcome(False, "empty clipboard")

        self._fold_edit()
        start = self.selection.active_cell
        if self.store.row_id_at(start.row) is None:
            logger.debug("paste target row %d is stale", start.row)
            self.selection.clamp()
            start = self.selection.active_cell
        cols = min(len(matrix[0]), len(FIELDS) - start.col)

        shortfall = start.row + len(matrix) - len(self.store)
        for _ in range(max(0, shortfall)):
            self.store.append()

        for i, values in enumerate(matrix):
            row_id = self.store.row_id_at(start.row + i)
            for j in range(cols):
                self.store.update(row_id, FIELDS[start.col + j], values[j])

        self._commit()
        self.selection.set_active_cell(start)
        self.selection.extend_range(Cell(start.row + len(matrix) - 1, FIELDS[start.col + cols - 1]))
        self._set_status(f"Pasted {len(matrix)}x{cols}", 2)
        return ClipboardOutcome(True, rows=len(matrix), cols=cols)

    # ---------- render rendezvous ----------
    def _drop_stale_pending_focus(self):
        pending = self.ctx.pending_focus
        if pending and self.store.index_of(pending[0]) is None:
            self.ctx.pending_focus = None

    def notify_rendered(self, row_ids) -> bool:
        """Called by the presentation layer after it has drawn ``row_ids``."""
        pending = self.ctx.pending_focus
        if not pending:
            return False
        row_id, field = pending
        if row_id not in set(row_ids):
            return False
        self.ctx.pending_focus = None
        index = self.store.index_of(row_id)
        if index is None:
            return False
        self.focus_target.focus(index, field)
        return True
