import os

HOME = os.path.expanduser("~")
XDG_CONFIG_HOME = os.environ.get("XDG_CONFIG_HOME")
CONFIG_HOME = XDG_CONFIG_HOME if XDG_CONFIG_HOME else os.path.join(HOME, ".config")
CONFIG_DIR = os.path.join(CONFIG_HOME, "utmgrid")
STORAGE_DIR = os.path.join(CONFIG_DIR, "storage")
LOG_PATH = os.path.join(CONFIG_DIR, "utmgrid.log")
CONFIG_JSON = os.path.join(CONFIG_DIR, "config.json")

# default settings
MAX_HISTORY_DEFAULT = 50
PERSIST_DEBOUNCE_MS_DEFAULT = 500
CLIPBOARD_COPY_COMMAND_DEFAULT = ["wl-copy"]
CLIPBOARD_PASTE_COMMAND_DEFAULT = ["wl-paste", "--no-newline"]
LOG_LEVEL_DEFAULT = "WARNING"
LOG_LEVELS = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}


def ensure_config_dirs():
    os.makedirs(CONFIG_DIR, exist_ok=True)
    os.makedirs(STORAGE_DIR, exist_ok=True)


def _command(value):
    if isinstance(value, list) and value and all(isinstance(item, str) for item in value):
        return list(value)
    return None


def load_config():
    cfg = {
        "MAX_HISTORY": MAX_HISTORY_DEFAULT,
        "PERSIST_DEBOUNCE_MS": PERSIST_DEBOUNCE_MS_DEFAULT,
        "CLIPBOARD_COPY_COMMAND": list(CLIPBOARD_COPY_COMMAND_DEFAULT),
        "CLIPBOARD_PASTE_COMMAND": list(CLIPBOARD_PASTE_COMMAND_DEFAULT),
        "LOG_LEVEL": LOG_LEVEL_DEFAULT,
    }

    if os.path.exists(CONFIG_JSON):
        try:
            import json

            with open(CONFIG_JSON, "r", encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, ValueError):
            return cfg
        if not isinstance(data, dict):
            return cfg

        max_history = data.get("max_history")
        if isinstance(max_history, int) and not isinstance(max_history, bool) and max_history >= 1:
            cfg["MAX_HISTORY"] = max_history

        delay = data.get("persist_debounce_ms")
        if isinstance(delay, (int, float)) and not isinstance(delay, bool) and delay >= 0:
            cfg["PERSIST_DEBOUNCE_MS"] = delay

        copy_cmd = _command(data.get("clipboard_copy_command"))
        if copy_cmd:
            cfg["CLIPBOARD_COPY_COMMAND"] = copy_cmd
        paste_cmd = _command(data.get("clipboard_paste_command"))
        if paste_cmd:
            cfg["CLIPBOARD_PASTE_COMMAND"] = paste_cmd

        level = data.get("log_level")
        if isinstance(level, str) and level.upper() in LOG_LEVELS:
            cfg["LOG_LEVEL"] = level.upper()

    return cfg
