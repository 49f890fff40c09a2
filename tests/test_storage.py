import pytest

from tracker.storage import JsonFileStore, MemoryStore, StoreError


def test_memory_store_missing_key_is_none():
    assert MemoryStore().load("financial-goals") is None


def test_memory_store_save_and_load():
    store = MemoryStore()
    assert store.save("financial-goals", "[]") is True
    assert store.load("financial-goals") == "[]"


def test_file_store_missing_key_is_none(tmp_path):
    assert JsonFileStore(tmp_path).load("financial-transactions") is None


def test_file_store_round_trip_creates_directory(tmp_path):
    store = JsonFileStore(tmp_path / "nested" / "data")
    text = '[{"id": "t1", "description": "Pão de queijo"}]'

    assert store.save("financial-transactions", text) is True
    assert store.load("financial-transactions") == text
    assert (tmp_path / "nested" / "data" / "financial-transactions.json").exists()
    assert not (tmp_path / "nested" / "data" / "financial-transactions.json.tmp").exists()


def test_file_store_save_failure_returns_false(tmp_path):
    blocker = tmp_path / "blocker"
    blocker.write_text("not a directory", encoding="utf-8")
    store = JsonFileStore(blocker / "data")

    assert store.save("financial-goals", "[]") is False


def test_file_store_rejects_path_like_keys(tmp_path):
    store = JsonFileStore(tmp_path)
    with pytest.raises(StoreError):
        store.load("../secrets")


def test_file_store_uses_configured_directory(monkeypatch, tmp_path):
    from tracker import config

    monkeypatch.setattr(config, "DATA_DIR", tmp_path)
    store = JsonFileStore()
    assert store.directory == tmp_path


def test_file_store_unreadable_file_raises_and_is_kept_aside(tmp_path):
    store = JsonFileStore(tmp_path)
    target = tmp_path / "financial-goals.json"
    target.write_bytes(b"\xff\xfe\x00broken")

    with pytest.raises(StoreError):
        store.load("financial-goals")

    assert (tmp_path / "financial-goals.json.unreadable").read_bytes() == b"\xff\xfe\x00broken"
    assert not target.exists()
