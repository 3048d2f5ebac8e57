import json
import tempfile
from pathlib import Path

from core.errors import FormatError
from core.models import Entry
from core.snapshot_manager import SnapshotManager


def test_export_list_and_read_back():
    with tempfile.TemporaryDirectory() as td:
        base = Path(td)
        manager = SnapshotManager(base / "backups")
        entries = [Entry(id="1", title="A", trigger="a", data="alpha")]

        res = manager.export_to_file(entries)
        assert res["status"] == "success"
        path = Path(res["path"])
        assert path.exists()
        assert path.name.startswith("quickpaste-backup-")
        payload = json.loads(path.read_text(encoding="utf-8"))
        assert payload["version"] == "1.0"
        assert payload["data"][0]["data"] == "alpha"

        # same-day export does not overwrite the first file
        second = manager.export_to_file(entries)
        assert second["path"] != res["path"]

        items = manager.list_snapshots()
        assert {item["name"] for item in items} == {path.name, Path(second["path"]).name}
        assert all(item["meta"]["count"] == 1 for item in items)

        assert manager.read_snapshot(path.name) == entries
        assert manager.read_snapshot(str(path)) == entries


def test_export_to_explicit_target():
    with tempfile.TemporaryDirectory() as td:
        manager = SnapshotManager(Path(td) / "backups")
        target = Path(td) / "elsewhere" / "mine.json"
        res = manager.export_to_file([], target)
        assert res["status"] == "success"
        assert json.loads(target.read_text(encoding="utf-8"))["data"] == []


def test_read_missing_or_malformed_snapshot():
    with tempfile.TemporaryDirectory() as td:
        manager = SnapshotManager(Path(td))
        (Path(td) / "bad.json").write_text('{"version": "1.0"}', encoding="utf-8")
        for name in ("missing.json", "bad.json"):
            try:
                manager.read_snapshot(name)
            except FormatError:
                continue
            raise AssertionError(f"expected FormatError for {name}")
        listed = {item["name"]: item["meta"] for item in manager.list_snapshots()}
        assert listed["bad.json"]["count"] == 0
