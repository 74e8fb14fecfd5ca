import curses


KEY_HINTS = (
    "^Z undo  ^Y redo  ^C copy  ^V paste  ^Space check  ^A all  ^D delete  F2 edit  ^Q quit"
)


class ScreenLayout:
    """Table window over a status line, with a key-hint line when there is room."""

    MIN_TABLE_H = 3

    def __init__(self, stdscr):
        self.stdscr = stdscr
        self.H, self.W = stdscr.getmaxyx()
        self.W = max(1, self.W)

        self.status_h = 1
        self.hint_h = 1 if self.H >= self.MIN_TABLE_H + 2 else 0
        self.table_h = max(1, self.H - self.status_h - self.hint_h)

        self.table_win = curses.newwin(self.table_h, self.W, 0, 0)
        self.table_win.leaveok(True)

        self.status_win = curses.newwin(self.status_h, self.W, min(self.table_h, max(0, self.H - 1)), 0)
        self.status_win.leaveok(True)

        self.hint_win = None
        if self.hint_h:
            self.hint_win = curses.newwin(self.hint_h, self.W, self.table_h + self.status_h, 0)
            self.hint_win.leaveok(True)

    def draw_hints(self):
        if self.hint_win is None:
            return
        self.hint_win.erase()
        try:
            self.hint_win.addnstr(0, 0, KEY_HINTS, self.W - 1, curses.A_DIM)
        except curses.error:
            pass
        self.hint_win.refresh()
