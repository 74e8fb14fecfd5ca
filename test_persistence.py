import json

import pytest

from persistence import (
    Debouncer,
    MemoryStorage,
    ProfileStorage,
    ROWS_KEY,
    RowPersistence,
    deserialize_rows,
    serialize_rows,
)
from record_store import RecordStore
from row_schema import Row, ValidationError


class FakeClock:
    def __init__(self):
        self.now = 0.0

    def __call__(self):
        return self.now

    def advance(self, seconds):
        self.now += seconds


def _attached(rows=None, delay=0.5):
    clock = FakeClock()
    storage = MemoryStorage()
    persistence = RowPersistence(storage, delay=delay, clock=clock)
    store = RecordStore(rows if rows is not None else [Row(id="r0")])
    persistence.attach(store)
    return persistence, storage, store, clock


def test_burst_of_edits_is_written_once_with_last_value():
    persistence, storage, store, clock = _attached()
    for i in range(5):
        store.update("r0", "campaign", f"v{i}")
        clock.advance(0.02)
        assert not persistence.poll()

    clock.advance(0.5)
    assert persistence.poll()
    assert storage.writes == 1
    stored = json.loads(storage.data[ROWS_KEY])
    assert stored[0]["fields"]["campaign"] == "v4"

    clock.advance(5)
    assert not persistence.poll()
    assert storage.writes == 1


def test_flush_writes_pending_change_immediately():
    persistence, storage, store, _ = _attached()
    store.append(Row(id="r1"))
    assert persistence.flush()
    assert storage.writes == 1
    assert not persistence.flush()


def test_detach_cancels_pending_write():
    persistence, storage, store, clock = _attached()
    store.update("r0", "source", "x")
    persistence.detach()
    clock.advance(1)
    assert not persistence.poll()
    assert storage.writes == 0


def test_load_round_trip():
    persistence, storage, store, _ = _attached(
        [Row(id="a", fields={"source": "news"}, selected=True), Row(id="b")]
    )
    store.update("b", "term", "shoes")
    persistence.flush()

    rows = RowPersistence(storage).load()
    assert [r.id for r in rows] == ["a", "b"]
    assert rows[0].selected is True
    assert rows[0].fields["source"] == "news"
    assert rows[1].fields["term"] == "shoes"


@pytest.mark.parametrize(
    "text",
    [
        "not json",
        '{"id": "a"}',
        '[{"fields": {}}]',
        '[{"id": "a"}, {"id": "a"}]',
        '[{"id": "a", "fields": {"source": ["x"]}}]',
    ],
)
def test_malformed_storage_is_treated_as_absent(text):
    storage = MemoryStorage()
    storage.set(ROWS_KEY, text)
    assert RowPersistence(storage).load() is None


def test_missing_storage_loads_none():
    assert RowPersistence(MemoryStorage()).load() is None


def test_deserialize_accepts_flat_rows():
    rows = deserialize_rows('[{"id": "a", "baseUrl": "https://x.test", "medium": "email"}]')
    assert rows[0].fields["baseUrl"] == "https://x.test"
    assert rows[0].fields["content"] == ""


def test_deserialize_rejects_non_list():
    with pytest.raises(ValidationError):
        deserialize_rows('{"rows": []}')


def test_serialize_is_json_list():
    data = json.loads(serialize_rows([Row(id="a")]))
    assert data == [
        {
            "id": "a",
            "fields": {
                "baseUrl": "",
                "source": "",
                "medium": "",
                "campaign": "",
                "term": "",
                "content": "",
            },
            "selected": False,
        }
    ]


def test_debouncer_rearms_on_each_call():
    clock = FakeClock()
    calls = []
    deb = Debouncer(lambda: calls.append(clock()), delay=1.0, clock=clock)
    deb.arm()
    clock.advance(0.5)
    deb.arm()
    clock.advance(0.75)
    assert not deb.poll()
    clock.advance(0.25)
    assert deb.poll()
    assert calls == [1.5]
    assert not deb.pending


def test_profile_storage_on_disk(tmp_path):
    storage = ProfileStorage(str(tmp_path / "storage"))
    assert storage.get(ROWS_KEY) is None
    storage.set(ROWS_KEY, "[]")
    assert storage.get(ROWS_KEY) == "[]"
    assert not list((tmp_path / "storage").glob("*.tmp"))
    storage.remove(ROWS_KEY)
    assert storage.get(ROWS_KEY) is None
    storage.remove(ROWS_KEY)


def test_clear_drops_stored_rows():
    persistence, storage, store, _ = _attached()
    store.update("r0", "source", "x")
    persistence.flush()
    persistence.clear()
    assert ROWS_KEY not in storage.data


def test_undecodable_profile_file_is_treated_as_absent(tmp_path):
    storage = ProfileStorage(str(tmp_path))
    storage.set(ROWS_KEY, "[]")
    path = next(tmp_path.glob("*.json"))
    path.write_bytes(b"\xff\xfe garbage")

    assert storage.get(ROWS_KEY) is None
    assert RowPersistence(storage).load() is None
