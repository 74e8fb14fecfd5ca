import json
import logging
import os
import time

from row_schema import Row, ValidationError


logger = logging.getLogger(__name__)

ROWS_KEY = "rows"
PERSIST_DELAY_DEFAULT = 0.5


# ---------- storage backends ----------
class ProfileStorage:
    """Key/value text storage, one file per key inside the profile directory."""

    def __init__(self, directory: str):
        self.directory = directory

    def _path(self, key: str) -> str:
        safe = "".join(ch if ch.isalnum() or ch in "-_" else "_" for ch in key)
        return os.path.join(self.directory, f"{safe}.json")

    def get(self, key: str) -> str | None:
        path = self._path(key)
        if not os.path.exists(path):
            return None
        try:
            with open(path, "r", encoding="utf-8") as f:
                return f.read()
        except (OSError, UnicodeDecodeError) as exc:
            logger.warning("could not read %s: %s", path, exc)
            return None

    def set(self, key: str, text: str) -> None:
        os.makedirs(self.directory, exist_ok=True)
        path = self._path(key)
        tmp_path = path + ".tmp"
        with open(tmp_path, "w", encoding="utf-8") as f:
            f.write(text)
        os.replace(tmp_path, path)

    def remove(self, key: str) -> None:
        try:
            os.remove(self._path(key))
        except FileNotFoundError:
            pass


class MemoryStorage:
    def __init__(self):
        self.data: dict[str, str] = {}
        self.writes = 0

    def get(self, key: str) -> str | None:
        return self.data.get(key)

    def set(self, key: str, text: str) -> None:
        self.writes += 1
        self.data[key] = text

    def remove(self, key: str) -> None:
        self.data.pop(key, None)


# ---------- serialization ----------
def serialize_rows(rows) -> str:
    return json.dumps([row.to_mapping() for row in rows], ensure_ascii=False)


def deserialize_rows(text: str) -> list[Row]:
    try:
        data = json.loads(text)
    except (TypeError, json.JSONDecodeError) as exc:
        raise ValidationError(f"Stored rows are not valid JSON: {exc}") from exc
    if not isinstance(data, list):
        raise ValidationError("Stored rows must be a list")
    rows = [Row.from_mapping(item) for item in data]
    if len({row.id for row in rows}) != len(rows):
        raise ValidationError("Stored rows contain duplicate ids")
    return rows


# ---------- debounce ----------
class Debouncer:
    """Cancellable delayed call, re-armed on every ``arm``.

    Runs on the caller's thread: the owner polls it from its event loop, so
    the callback never races with the code that armed it.
    """

    def __init__(self, callback, delay: float = PERSIST_DELAY_DEFAULT, clock=time.monotonic):
        self.callback = callback
        self.delay = delay
        self.clock = clock
        self.deadline: float | None = None

    @property
    def pending(self) -> bool:
        return self.deadline is not None

    def arm(self):
        self.deadline = self.clock() + self.delay

    def cancel(self):
        self.deadline = None

    def poll(self) -> bool:
        if self.deadline is None or self.clock() < self.deadline:
            return False
        self.deadline = None
        self.callback()
        return True

    def flush(self) -> bool:
        if self.deadline is None:
            return False
        self.deadline = None
        self.callback()
        return True


class RowPersistence:
    """Writes the RecordStore rows to storage after a quiet window."""

    def __init__(self, storage, key: str = ROWS_KEY, delay: float = PERSIST_DELAY_DEFAULT, clock=time.monotonic):
        self.storage = storage
        self.key = key
        self.store = None
        self.debouncer = Debouncer(self._write, delay=delay, clock=clock)

    def load(self) -> list[Row] | None:
        text = self.storage.get(self.key)
        if text is None:
            return None
        try:
            return deserialize_rows(text)
        except ValidationError as exc:
            logger.warning("ignoring stored rows: %s", exc)
            return None

    def attach(self, store):
        self.store = store
        store.subscribe(self._on_change)

    def detach(self):
        if self.store is not None:
            self.store.unsubscribe(self._on_change)
        self.debouncer.cancel()
        self.store = None

    def _on_change(self, _reason):
        self.debouncer.arm()

    def _write(self):
        if self.store is None:
            return
        try:
            self.storage.set(self.key, serialize_rows(self.store.rows()))
        except OSError as exc:
            logger.warning("could not persist rows: %s", exc)

    def poll(self) -> bool:
        return self.debouncer.poll()

    def flush(self) -> bool:
        return self.debouncer.flush()

    def clear(self):
        self.debouncer.cancel()
        self.storage.remove(self.key)
