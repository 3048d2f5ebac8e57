from __future__ import annotations

from typing import List, Optional


class QuickPasteError(Exception):
    """Base class for errors surfaced to the GUI layer."""


class ValidationError(QuickPasteError):
    def __init__(self, fields: List[str]) -> None:
        self.fields = list(fields)
        super().__init__(f"Required field(s) missing: {', '.join(self.fields)}")


class NotFoundError(QuickPasteError):
    def __init__(self, entry_id: str) -> None:
        self.entry_id = entry_id
        super().__init__(f"Entry '{entry_id}' not found")


class FormatError(QuickPasteError):
    """Import payload or snapshot file has an unsupported shape."""


class PersistenceCorruptionError(QuickPasteError):
    def __init__(self, key: str, reason: Optional[str] = None) -> None:
        self.key = key
        detail = f"Stored collection '{key}' is corrupt"
        if reason:
            detail = f"{detail}: {reason}"
        super().__init__(detail)
