from __future__ import annotations

import json
import uuid
from typing import Any, Callable, List, Optional

from core.errors import NotFoundError, PersistenceCorruptionError
from core.kv_store import KeyValueStore
from core.models import Entry, EntryDraft

DEFAULT_KEY = "quickpaste.items"


class ItemStore:
    """Durable, ordered collection of launcher entries.

    The collection is read once from the key-value store and kept in memory;
    every mutation rewrites the whole collection.
    """

    def __init__(
        self,
        kv: KeyValueStore,
        key: str = DEFAULT_KEY,
        id_factory: Optional[Callable[[], str]] = None,
    ) -> None:
        self._kv = kv
        self._key = key
        self._id_factory = id_factory or (lambda: uuid.uuid4().hex)
        self._entries: List[Entry] = []
        self._loaded = False

    @property
    def key(self) -> str:
        return self._key

    def load(self) -> List[Entry]:
        raw = self._kv.get(self._key)
        if raw is None:
            entries: List[Entry] = []
        else:
            entries = self._decode(raw)
        self._entries = entries
        self._loaded = True
        return list(entries)

    def _decode(self, raw: str) -> List[Entry]:
        try:
            data = json.loads(raw)
        except ValueError as exc:
            raise PersistenceCorruptionError(self._key, str(exc)) from exc
        if not isinstance(data, list):
            raise PersistenceCorruptionError(self._key, "expected a JSON array")
        if not all(isinstance(item, dict) for item in data):
            raise PersistenceCorruptionError(self._key, "expected an array of objects")
        return [Entry.from_dict(item) for item in data]

    def _ensure_loaded(self) -> None:
        if not self._loaded:
            self.load()

    def list_entries(self) -> List[Entry]:
        self._ensure_loaded()
        return list(self._entries)

    def get_entry(self, entry_id: str) -> Optional[Entry]:
        self._ensure_loaded()
        for entry in self._entries:
            if entry.id == entry_id:
                return entry
        return None

    def _index_of(self, entry_id: str) -> int:
        for index, entry in enumerate(self._entries):
            if entry.id == entry_id:
                return index
        return -1

    def replace(self, entries: List[Entry]) -> None:
        new_entries = list(entries)
        payload: List[Any] = [entry.to_dict() for entry in new_entries]
        # write first; the cache only moves once the blob is on disk
        self._kv.set(self._key, json.dumps(payload, ensure_ascii=False))
        self._entries = new_entries
        self._loaded = True

    def _fresh_id(self) -> str:
        taken = {entry.id for entry in self._entries}
        candidate = self._id_factory()
        while candidate in taken:
            candidate = self._id_factory()
        return candidate

    def add(self, draft: EntryDraft) -> Entry:
        draft.validate()
        self._ensure_loaded()
        entry = draft.to_entry(self._fresh_id())
        self.replace(self._entries + [entry])
        return entry

    def update(self, entry_id: str, draft: EntryDraft) -> Entry:
        self._ensure_loaded()
        index = self._index_of(entry_id)
        if index < 0:
            raise NotFoundError(entry_id)
        draft.validate()
        updated = draft.to_entry(entry_id)
        entries = list(self._entries)
        entries[index] = updated
        self.replace(entries)
        return updated

    def remove(self, entry_id: str) -> None:
        self._ensure_loaded()
        if self._index_of(entry_id) < 0:
            return
        self.replace([entry for entry in self._entries if entry.id != entry_id])

    def clear(self) -> None:
        self._ensure_loaded()
        self.replace([])

    def import_entries(self, entries: List[Entry]) -> int:
        """Replace the whole collection with imported entries."""
        self.replace(entries)
        print(f"[INFO] Restored {len(entries)} entries into '{self._key}'", flush=True)
        return len(entries)
