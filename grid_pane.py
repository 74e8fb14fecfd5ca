import curses

from row_schema import FIELDS
from selection_model import Cell


class GridPane:
    PAIR_CELL_ACTIVE = 1
    PAIR_CELL_EDIT = 2
    PAIR_CELL_TEXT = 6
    MAX_COL_WIDTH = 40
    MIN_COL_WIDTH = 6
    HEADER_Y = 1
    BASE_Y = 2

    def __init__(self, store, selection):
        self.store = store
        self.selection = selection
        try:
            curses.start_color()
            curses.use_default_colors()
            curses.init_pair(self.PAIR_CELL_ACTIVE, -1, curses.COLOR_WHITE)
            curses.init_pair(self.PAIR_CELL_TEXT, curses.COLOR_WHITE, -1)
            curses.init_pair(self.PAIR_CELL_EDIT, curses.COLOR_BLACK, curses.COLOR_WHITE)
        except curses.error:
            pass

        self.row_offset = 0
        self.col_offset = 0

        # focus collaborator state
        self.focused: Cell | None = None
        self.select_all_active = False
        self.caret_at_end = False

        self.rendered_row_ids: list[str] = []
        self._col_spans: list[tuple[int, int, int]] = []  # (x, width, col)
        self._row_ys: list[tuple[int, int]] = []  # (y, row index)

    # ---------- focus collaborator ----------
    def focus(self, row_index, field):
        if row_index < 0 or row_index >= len(self.store) or field not in FIELDS:
            return
        self.focused = Cell(row_index, field)
        self.select_all_active = False
        self.caret_at_end = False
        if row_index < self.row_offset:
            self.row_offset = row_index

    def select_all(self):
        if self.focused is not None:
            self.select_all_active = True

    def caret_to_end(self):
        if self.focused is not None:
            self.caret_at_end = True
            self.select_all_active = False

    # ---------- geometry ----------
    def get_col_width(self, col_idx):
        if col_idx < 0 or col_idx >= len(FIELDS):
            return self.MAX_COL_WIDTH
        field = FIELDS[col_idx]
        max_len = len(field)
        for v in self.store.df[field]:
            max_len = max(max_len, len(v))
        return max(self.MIN_COL_WIDTH, min(self.MAX_COL_WIDTH, max_len + 2))

    def row_label_width(self):
        # "[x] " check marker + row number
        return 4 + max(3, len(str(len(self.store))))

    def visible_cols(self, avail_w):
        cols = []
        used = 0
        for c in range(self.col_offset, len(FIELDS)):
            cw = self.get_col_width(c)
            if used + cw + 1 > avail_w and cols:
                break
            cols.append(c)
            used += cw + 1
        return cols

    def adjust_viewport(self, h, w):
        active = self.selection.active_cell
        body_h = max(1, h - self.BASE_Y - 1)
        if active.row < self.row_offset:
            self.row_offset = active.row
        elif active.row >= self.row_offset + body_h:
            self.row_offset = active.row - body_h + 1
        self.row_offset = max(0, min(self.row_offset, max(0, len(self.store) - 1)))

        avail_w = max(10, w - self.row_label_width() - 1)
        if active.col < self.col_offset:
            self.col_offset = active.col
        while active.col not in self.visible_cols(avail_w) and self.col_offset < active.col:
            self.col_offset += 1
        self.col_offset = max(0, self.col_offset)

    def cell_at(self, y, x):
        row = None
        for line_y, r in self._row_ys:
            if line_y == y:
                row = r
                break
        if row is None:
            return None
        for start, width, c in self._col_spans:
            if start <= x < start + width:
                return Cell(row, FIELDS[c])
        return None

    # ---------- rendering ----------
    def draw(self, win, editing=None, active=True):
        """Draw the grid and return the ids of the rows that were rendered.

        ``editing`` is ``(row_id, field, caret)`` while a cell is being edited.
        """
        win.erase()
        try:
            win.bkgd(" ", curses.color_pair(self.PAIR_CELL_TEXT))
        except curses.error:
            pass
        h, w = win.getmaxyx()
        self.adjust_viewport(h, w)

        label_w = self.row_label_width()
        avail_w = max(10, w - label_w - 1)
        cols = self.visible_cols(avail_w)

        self._col_spans = []
        x = label_w + 1
        for c in cols:
            cw = min(self.get_col_width(c), max(1, w - x - 1))
            self._col_spans.append((x, cw, c))
            try:
                win.addnstr(self.HEADER_Y, x, FIELDS[c][:cw].ljust(cw), cw, curses.A_BOLD)
            except curses.error:
                pass
            x += cw + 1

        self._row_ys = []
        self.rendered_row_ids = []
        active_cell = self.selection.active_cell
        checked = set(self.store.selected_ids())
        y = self.BASE_Y
        for r in range(self.row_offset, len(self.store)):
            if y >= h - 1:
                break
            row_id = self.store.row_id_at(r)
            mark = "[x]" if row_id in checked else "[ ]"
            try:
                win.addnstr(y, 0, f"{mark} {str(r).rjust(label_w - 4)}", label_w)
            except curses.error:
                pass
            for start, cw, c in self._col_spans:
                field = FIELDS[c]
                text = self.store.value(r, field)
                attr = curses.color_pair(self.PAIR_CELL_TEXT)
                is_active = active and r == active_cell.row and field == active_cell.field
                is_editing = editing is not None and editing[0] == row_id and editing[1] == field
                if is_editing:
                    caret = min(editing[2], len(text))
                    # keep the caret inside the cell window
                    start_ch = max(0, caret - cw + 1)
                    text = text[start_ch:]
                    attr = curses.color_pair(self.PAIR_CELL_EDIT)
                elif is_active:
                    attr = attr | curses.A_REVERSE
                elif self.selection.has_range and self.selection.contains(r, field):
                    attr = attr | curses.A_STANDOUT
                try:
                    win.addnstr(y, start, text[:cw].ljust(cw), cw, attr)
                except curses.error:
                    pass
            self._row_ys.append((y, r))
            self.rendered_row_ids.append(row_id)
            y += 1

        try:
            win.hline(h - 1, 0, " ", w)
        except curses.error:
            pass

        win.refresh()
        return list(self.rendered_row_ids)
