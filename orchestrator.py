import curses
import logging
import time

from grid_pane import GridPane
from key_event import from_curses
from navigation import NavigationController
from screen_layout import ScreenLayout
from status_bar import render_status


logger = logging.getLogger(__name__)

EXIT_KEYS = (17,)  # Ctrl+Q


class Orchestrator:
    def __init__(self, stdscr, store, history, selection, clipboard, persistence):
        self.stdscr = stdscr
        curses.curs_set(0)
        curses.raw()
        self.stdscr.nodelay(False)
        self.stdscr.timeout(100)
        self.stdscr.keypad(True)
        try:
            curses.mousemask(curses.ALL_MOUSE_EVENTS | curses.REPORT_MOUSE_POSITION)
        except curses.error:
            pass

        self.store = store
        self.persistence = persistence
        self.layout = ScreenLayout(stdscr)
        self.grid = GridPane(store, selection)

        # ---- status ----
        self.status_msg = None
        self.status_msg_until = 0

        self.controller = NavigationController(
            store,
            history,
            selection,
            clipboard,
            focus=self.grid,
            set_status_cb=self._set_status,
        )
        self._last_click = (0.0, None)

    # ---------------- helpers ----------------

    def _set_status(self, msg, seconds=3):
        self.status_msg = msg
        self.status_msg_until = time.time() + seconds

    def _status_context(self):
        ctx = self.controller.ctx
        sel = self.controller.selection
        r0, r1, c0, c1 = sel.normalized_rect()
        return {
            "status_msg": self.status_msg,
            "status_until": self.status_msg_until,
            "mode": ctx.mode,
            "composing": ctx.composing,
            "active_cell": tuple(sel.active_cell),
            "range_size": (r1 - r0 + 1, c1 - c0 + 1),
            "total_rows": len(self.store),
            "checked": len(sel.checked_ids()),
            "undo_depth": self.controller.history.undo_depth,
            "redo_depth": self.controller.history.redo_depth,
        }

    # ---------------- UI ----------------

    def redraw(self):
        ctx = self.controller.ctx
        editing = (ctx.edit_row_id, ctx.edit_field, ctx.edit_caret) if ctx.editing else None
        rendered = self.grid.draw(self.layout.table_win, editing=editing)
        # new rows become focusable only once they are on screen
        self.controller.notify_rendered(rendered)

        sw = self.layout.status_win
        sw.erase()
        _, w = sw.getmaxyx()
        try:
            sw.addnstr(0, 0, render_status(self._status_context(), w), w)
        except curses.error:
            pass
        sw.refresh()
        self.layout.draw_hints()

    # ---------------- input ----------------

    def _read_key(self):
        try:
            ch = self.stdscr.get_wch()
        except curses.error:
            return None
        if ch in (27, "\x1b"):
            # ESC prefix means Alt+<key> when another key is already queued
            self.stdscr.nodelay(True)
            try:
                nxt = self.stdscr.get_wch()
            except curses.error:
                nxt = None
            finally:
                self.stdscr.nodelay(False)
                self.stdscr.timeout(100)
            if nxt is not None:
                return ("alt", nxt)
        return ch

    def _handle_mouse(self):
        try:
            _, x, y, _, bstate = curses.getmouse()
        except curses.error:
            return
        cell = self.grid.cell_at(y, x)
        if cell is None:
            if bstate & curses.BUTTON1_RELEASED:
                self.controller.pointer_up()
            return
        if bstate & curses.BUTTON1_DOUBLE_CLICKED:
            self.controller.pointer_double(cell)
        elif bstate & curses.BUTTON1_PRESSED:
            self.controller.pointer_down(cell, shift=bool(bstate & curses.BUTTON_SHIFT))
        elif bstate & curses.BUTTON1_RELEASED:
            self.controller.pointer_drag(cell)
            self.controller.pointer_up()
        elif bstate & curses.BUTTON1_CLICKED:
            self.controller.pointer_down(cell, shift=bool(bstate & curses.BUTTON_SHIFT))
            self.controller.pointer_up()
        elif bstate & curses.REPORT_MOUSE_POSITION:
            self.controller.pointer_drag(cell)

    # ---------------- main loop ----------------

    def run(self):
        self.stdscr.clear()
        self.stdscr.refresh()
        self.redraw()

        try:
            while True:
                ch = self._read_key()
                self.persistence.poll()

                if ch is None:
                    self.redraw()
                    continue

                if ch in EXIT_KEYS or ch == "\x11":
                    break

                if ch == curses.KEY_MOUSE:
                    self._handle_mouse()
                    self.redraw()
                    continue

                if ch == curses.KEY_RESIZE:
                    self.layout = ScreenLayout(self.stdscr)
                    self.redraw()
                    continue

                if isinstance(ch, tuple):
                    event = from_curses(ch[1], alt=True)
                else:
                    event = from_curses(ch)
                if event is not None:
                    self.controller.handle_key(event)

                self.redraw()
        finally:
            self.controller.commit_edit()
            self.persistence.flush()
