import curses
from dataclasses import dataclass


ARROWS = {"ArrowUp": (-1, 0), "ArrowDown": (1, 0), "ArrowLeft": (0, -1), "ArrowRight": (0, 1)}


@dataclass(frozen=True)
class KeyEvent:
    key: str
    shift: bool = False
    ctrl: bool = False
    alt: bool = False

    @property
    def printable(self) -> bool:
        return len(self.key) == 1 and not self.ctrl and not self.alt and self.key.isprintable()


_CURSES_KEYS = {
    curses.KEY_UP: KeyEvent("ArrowUp"),
    curses.KEY_DOWN: KeyEvent("ArrowDown"),
    curses.KEY_LEFT: KeyEvent("ArrowLeft"),
    curses.KEY_RIGHT: KeyEvent("ArrowRight"),
    curses.KEY_SR: KeyEvent("ArrowUp", shift=True),
    curses.KEY_SF: KeyEvent("ArrowDown", shift=True),
    curses.KEY_SLEFT: KeyEvent("ArrowLeft", shift=True),
    curses.KEY_SRIGHT: KeyEvent("ArrowRight", shift=True),
    curses.KEY_HOME: KeyEvent("Home"),
    curses.KEY_END: KeyEvent("End"),
    curses.KEY_DC: KeyEvent("Delete"),
    curses.KEY_BACKSPACE: KeyEvent("Backspace"),
    curses.KEY_BTAB: KeyEvent("Tab", shift=True),
    curses.KEY_ENTER: KeyEvent("Enter"),
    curses.KEY_F2: KeyEvent("F2"),
    0: KeyEvent(" ", ctrl=True),  # Ctrl+Space
    1: KeyEvent("a", ctrl=True),
    3: KeyEvent("c", ctrl=True),
    4: KeyEvent("d", ctrl=True),
    9: KeyEvent("Tab"),
    10: KeyEvent("Enter"),
    13: KeyEvent("Enter"),
    22: KeyEvent("v", ctrl=True),
    25: KeyEvent("y", ctrl=True),
    26: KeyEvent("z", ctrl=True),
    27: KeyEvent("Escape"),
    127: KeyEvent("Backspace"),
    8: KeyEvent("Backspace"),
}


def from_curses(ch, alt: bool = False):
    """Translate a curses key code (or wide char from get_wch) into a KeyEvent."""
    if isinstance(ch, str):
        if len(ch) != 1:
            return None
        code = ord(ch)
        if code in (10, 13) and alt:
            return KeyEvent("Enter", shift=True)
        if code in _CURSES_KEYS:
            return _CURSES_KEYS[code]
        return KeyEvent(ch, alt=alt)
    if ch in (10, 13) and alt:
        return KeyEvent("Enter", shift=True)
    if ch in _CURSES_KEYS:
        return _CURSES_KEYS[ch]
    # get_wch returns text as str; unmapped ints are function keys
    return None
