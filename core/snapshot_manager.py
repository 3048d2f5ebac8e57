from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

import yaml

from core.codec import dumps_snapshot, export_snapshot, loads_snapshot, snapshot_filename
from core.errors import FormatError
from core.models import Entry

SNAPSHOT_SUFFIXES = (".json", ".yml", ".yaml")


class SnapshotManager:
    """Snapshot files on disk: export, listing and reading back for restore."""

    def __init__(self, backup_root: Path) -> None:
        self.backup_root = Path(backup_root)
        self.backup_root.mkdir(parents=True, exist_ok=True)

    def _default_target(self) -> Path:
        target = self.backup_root / snapshot_filename()
        counter = 2
        while target.exists():
            target = target.with_name(f"{Path(snapshot_filename()).stem}-{counter}.json")
            counter += 1
        return target

    def export_to_file(self, entries: List[Entry], target: Optional[Union[str, Path]] = None) -> Dict[str, Any]:
        path = Path(target) if target else self._default_target()
        snapshot = export_snapshot(entries)
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_text(dumps_snapshot(snapshot), encoding="utf-8")
        except OSError as exc:
            return {"status": "error", "detail": str(exc)}
        print(f"[INFO] Exported {len(snapshot['data'])} entries to {path}", flush=True)
        return {
            "status": "success",
            "detail": f"Exported {len(snapshot['data'])} entries",
            "path": str(path),
            "timestamp": snapshot["timestamp"],
        }

    def list_snapshots(self) -> List[Dict[str, Any]]:
        items = []
        files = [p for p in self.backup_root.iterdir() if p.is_file() and p.suffix.lower() in SNAPSHOT_SUFFIXES]
        for child in sorted(files, key=lambda p: p.stat().st_mtime, reverse=True):
            meta: Dict[str, Any] = {}
            try:
                text = child.read_text(encoding="utf-8")
                raw = yaml.safe_load(text) if child.suffix.lower() != ".json" else json.loads(text)
                if isinstance(raw, dict):
                    meta = {
                        "version": raw.get("version", ""),
                        "timestamp": raw.get("timestamp", ""),
                        "count": len(raw.get("data") or []),
                    }
                elif isinstance(raw, list):
                    meta = {"version": "", "timestamp": "", "count": len(raw)}
            except (OSError, ValueError, yaml.YAMLError, TypeError):
                meta = {}
            items.append({"name": child.name, "path": str(child), "meta": meta})
        return items

    def resolve(self, path_or_name: Union[str, Path]) -> Path:
        path = Path(path_or_name)
        if not path.is_absolute() and not path.exists():
            path = self.backup_root / path
        return path

    def read_snapshot(self, path_or_name: Union[str, Path]) -> List[Entry]:
        path = self.resolve(path_or_name)
        if not path.exists() or not path.is_file():
            raise FormatError(f"Snapshot file not found: {path}")
        return loads_snapshot(path.read_text(encoding="utf-8"), suffix=path.suffix or ".json")
