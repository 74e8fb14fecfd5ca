import pytest

import config_paths
import main
from persistence import MemoryStorage, ProfileStorage, ROWS_KEY, RowPersistence


@pytest.fixture
def profile(tmp_path, monkeypatch):
    cfg_dir = tmp_path / "utmgrid"
    monkeypatch.setattr(config_paths, "CONFIG_DIR", str(cfg_dir))
    monkeypatch.setattr(config_paths, "STORAGE_DIR", str(cfg_dir / "storage"))
    monkeypatch.setattr(config_paths, "LOG_PATH", str(cfg_dir / "utmgrid.log"))
    monkeypatch.setattr(config_paths, "CONFIG_JSON", str(cfg_dir / "config.json"))
    return cfg_dir


def test_version_flag(capsys):
    assert main.main(["-v"]) == 0
    assert capsys.readouterr().out.strip() == main.__version__


def test_help_flag(capsys):
    assert main.main(["--help"]) == 0
    assert "Usage" in capsys.readouterr().out


def test_unknown_argument_prints_usage(profile, capsys):
    assert main.main(["--bogus"]) == 2
    assert "Usage" in capsys.readouterr().err


def test_reset_clears_stored_rows(profile, capsys):
    storage = ProfileStorage(config_paths.STORAGE_DIR)
    storage.set(ROWS_KEY, '[{"id": "a"}]')

    assert main.main(["--reset"]) == 0

    assert storage.get(ROWS_KEY) is None
    assert "cleared" in capsys.readouterr().out


def test_load_store_falls_back_to_one_blank_row():
    storage = MemoryStorage()
    store = main.load_store(RowPersistence(storage))
    assert len(store) == 1
    assert store.matrix() == [[""] * 6]

    storage.set(ROWS_KEY, '[{"id": "a", "fields": {"source": "news"}}, {"id": "b"}]')
    store = main.load_store(RowPersistence(storage))
    assert store.ids() == ["a", "b"]
    assert store.value(0, "source") == "news"


def test_build_persistence_uses_configured_delay(profile):
    persistence = main.build_persistence({"PERSIST_DEBOUNCE_MS": 250})
    assert persistence.debouncer.delay == 0.25
    assert isinstance(persistence.storage, ProfileStorage)
