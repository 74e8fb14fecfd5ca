from typing import NamedTuple

from row_schema import FIELDS


class Cell(NamedTuple):
    row: int
    field: str

    @property
    def col(self) -> int:
        return FIELDS.index(self.field)


class SelectionModel:
    """Active cell, rectangular range and checked rows for a RecordStore.

    The active cell is the range anchor. Only ``set_active_cell`` moves the
    anchor; shift navigation and drags move the focus end.
    """

    def __init__(self, store):
        self.store = store
        self.anchor = Cell(0, FIELDS[0])
        self.focus = self.anchor
        self.dragging = False

    # ---------- cell range ----------
    @property
    def active_cell(self) -> Cell:
        return self.anchor

    @property
    def has_range(self) -> bool:
        return self.anchor != self.focus

    def set_active_cell(self, cell: Cell):
        self.anchor = cell
        self.focus = cell

    def extend_range(self, cell: Cell):
        self.focus = cell

    def normalized_rect(self):
        r0, r1 = sorted((self.anchor.row, self.focus.row))
        c0, c1 = sorted((self.anchor.col, self.focus.col))
        return (r0, r1, c0, c1)

    def contains(self, row: int, field: str) -> bool:
        r0, r1, c0, c1 = self.normalized_rect()
        return r0 <= row <= r1 and c0 <= FIELDS.index(field) <= c1

    def cells(self):
        r0, r1, c0, c1 = self.normalized_rect()
        for r in range(r0, r1 + 1):
            for c in range(c0, c1 + 1):
                yield Cell(r, FIELDS[c])

    def clamp(self):
        """Collapse onto the active cell, pulled back inside the grid."""
        last = max(0, len(self.store) - 1)
        cell = self.anchor
        self.set_active_cell(Cell(min(max(0, cell.row), last), cell.field))
        self.dragging = False

    # ---------- drag gesture ----------
    def begin_drag(self, cell: Cell):
        self.set_active_cell(cell)
        self.dragging = True

    def drag_to(self, cell: Cell):
        if self.dragging:
            self.extend_range(cell)

    def end_drag(self):
        self.dragging = False

    # ---------- checked rows ----------
    def checked_ids(self) -> list:
        return self.store.selected_ids()

    def is_checked(self, row_id) -> bool:
        return row_id in set(self.store.selected_ids())

    def toggle_row_checked(self, row_id) -> bool:
        flag = not self.is_checked(row_id)
        if not self.store.set_selected(row_id, flag):
            return False
        return flag

    def toggle_all_checked(self) -> bool:
        ids = self.store.ids()
        flag = len(self.store.selected_ids()) < len(ids)
        self.store.set_selected_many(ids, flag)
        return flag

    def __repr__(self) -> str:
        return f"SelectionModel(anchor={tuple(self.anchor)}, focus={tuple(self.focus)})"
