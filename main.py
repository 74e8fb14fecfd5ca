import sys
import os
import curses
import logging
from importlib.metadata import PackageNotFoundError, version

# Make ESC snappy
os.environ.setdefault("ESCDELAY", "25")

import config_paths
from clipboard import CommandClipboard
from history_manager import HistoryManager
from orchestrator import Orchestrator
from persistence import ProfileStorage, RowPersistence
from record_store import RecordStore
from row_schema import default_rows
from selection_model import SelectionModel

try:
    __version__ = version("utmgrid")
except PackageNotFoundError:
    __version__ = "0.0.0"


USAGE = (
    "utmgrid - terminal editor for campaign-tracking (UTM) parameter rows\n\n"
    "Usage:\n  utmgrid\n  utmgrid --reset\n  utmgrid -v\n\n"
    "Keys: arrows/Tab/Enter navigate, F2 or typing edits, Esc cancels,\n"
    "Ctrl+Z/Ctrl+Y undo/redo, Ctrl+C/Ctrl+V copy/paste, Ctrl+Space check row,\n"
    "Ctrl+A check all, Ctrl+D delete rows, Ctrl+Q quit\n"
)


def setup_logging(cfg):
    config_paths.ensure_config_dirs()
    logging.basicConfig(
        filename=config_paths.LOG_PATH,
        level=getattr(logging, cfg.get("LOG_LEVEL", "WARNING"), logging.WARNING),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )


def build_persistence(cfg):
    storage = ProfileStorage(config_paths.STORAGE_DIR)
    return RowPersistence(storage, delay=cfg["PERSIST_DEBOUNCE_MS"] / 1000.0)


def load_store(persistence):
    rows = persistence.load()
    return RecordStore(rows if rows else default_rows())


def main(argv=None):
    args = sys.argv[1:] if argv is None else list(argv)

    if "-v" in args or "-V" in args:
        print(__version__)
        return 0

    if "-h" in args or "--help" in args:
        print(USAGE)
        return 0

    cfg = config_paths.load_config()
    setup_logging(cfg)
    persistence = build_persistence(cfg)

    if "--reset" in args:
        persistence.clear()
        print("Stored rows cleared.")
        return 0

    if args:
        print(USAGE, file=sys.stderr)
        return 2

    store = load_store(persistence)
    history = HistoryManager(store.snapshot(), max_history=cfg["MAX_HISTORY"])
    selection = SelectionModel(store)
    clipboard = CommandClipboard(
        cfg["CLIPBOARD_COPY_COMMAND"], cfg["CLIPBOARD_PASTE_COMMAND"]
    )
    persistence.attach(store)

    def curses_main(stdscr):
        Orchestrator(stdscr, store, history, selection, clipboard, persistence).run()

    curses.wrapper(curses_main)
    return 0


if __name__ == "__main__":
    sys.exit(main())
