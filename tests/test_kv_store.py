import tempfile
from pathlib import Path
from unittest.mock import patch

from core.kv_store import JsonFileKeyValueStore, MemoryKeyValueStore


def test_memory_store_get_set():
    kv = MemoryKeyValueStore()
    assert kv.get("items") is None
    kv.set("items", "[]")
    assert kv.get("items") == "[]"


def test_file_store_round_trip_and_missing_key():
    with tempfile.TemporaryDirectory() as td:
        kv = JsonFileKeyValueStore(Path(td) / "data")
        assert kv.get("quickpaste.items") is None
        kv.set("quickpaste.items", '[{"id": "1"}]')
        assert kv.get("quickpaste.items") == '[{"id": "1"}]'
        assert kv.path_for("quickpaste.items").name == "quickpaste.items.json"
        # no temp files left behind
        assert [p.name for p in kv.root.iterdir()] == ["quickpaste.items.json"]


def test_file_store_keeps_old_blob_when_replace_fails():
    with tempfile.TemporaryDirectory() as td:
        kv = JsonFileKeyValueStore(Path(td))
        kv.set("items", "old")
        with patch("core.kv_store.os.replace", side_effect=OSError("disk full")):
            try:
                kv.set("items", "new")
            except OSError:
                pass
            else:
                raise AssertionError("expected OSError")
        assert kv.get("items") == "old"
        assert [p.name for p in Path(td).iterdir()] == ["items.json"]
