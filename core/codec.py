"""Snapshot export/import for backup and restore of the entry collection."""

from __future__ import annotations

import json
from collections.abc import Mapping
from datetime import date, datetime, timezone
from typing import Any, Dict, Iterable, List, Optional, Union

import yaml

from core.errors import FormatError
from core.models import Entry

SNAPSHOT_VERSION = "1.0"
FILENAME_PREFIX = "quickpaste-backup"


def export_snapshot(entries: Iterable[Entry], now: Optional[datetime] = None) -> Dict[str, Any]:
    moment = now or datetime.now(timezone.utc)
    return {
        "version": SNAPSHOT_VERSION,
        "timestamp": moment.isoformat(),
        "data": [entry.to_dict() for entry in entries],
    }


def import_snapshot(raw: Any) -> List[Entry]:
    """Normalize a snapshot object or a bare entry list into entries.

    Records are taken as-is: empty titles/triggers and duplicate ids are not
    rejected here.
    """
    if isinstance(raw, Mapping):
        records = raw.get("data")
        if not isinstance(records, (list, tuple)):
            raise FormatError("Snapshot object has no 'data' list")
    elif isinstance(raw, (list, tuple)):
        records = raw
    else:
        raise FormatError(f"Unsupported snapshot shape: {type(raw).__name__}")

    entries: List[Entry] = []
    for position, record in enumerate(records):
        if not isinstance(record, Mapping):
            raise FormatError(f"Snapshot record {position} is not an object")
        entries.append(Entry.from_dict(record))
    return entries


def dumps_snapshot(snapshot: Dict[str, Any]) -> str:
    return json.dumps(snapshot, indent=2, ensure_ascii=False)


def loads_snapshot(text: str, suffix: str = ".json") -> List[Entry]:
    try:
        if suffix.lower() in (".yml", ".yaml"):
            raw = yaml.safe_load(text)
        else:
            raw = json.loads(text)
    except (ValueError, yaml.YAMLError) as exc:
        raise FormatError(f"Snapshot is not valid {suffix.lstrip('.') or 'json'}: {exc}") from exc
    return import_snapshot(raw)


def snapshot_filename(moment: Optional[Union[date, datetime]] = None) -> str:
    day = moment or datetime.now(timezone.utc)
    return f"{FILENAME_PREFIX}-{day.strftime('%Y-%m-%d')}.json"
