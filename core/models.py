from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import Any, Dict, List, Mapping

from core.errors import ValidationError

REQUIRED_FIELDS = ("title", "trigger")


def _text(value: Any) -> str:
    if value is None:
        return ""
    return value if isinstance(value, str) else str(value)


@dataclass
class Entry:
    """A single trigger -> payload record."""

    id: str
    title: str
    trigger: str
    subtitle: str = ""
    data: str = ""

    def to_dict(self) -> Dict[str, str]:
        return {
            "id": self.id,
            "title": self.title,
            "subtitle": self.subtitle,
            "trigger": self.trigger,
            "data": self.data,
        }

    @classmethod
    def from_dict(cls, raw: Mapping[str, Any]) -> "Entry":
        return cls(
            id=_text(raw.get("id")),
            title=_text(raw.get("title")),
            trigger=_text(raw.get("trigger")),
            subtitle=_text(raw.get("subtitle")),
            data=_text(raw.get("data")),
        )


@dataclass
class EntryDraft:
    """User-editable fields of an entry; the store assigns the id."""

    title: str = ""
    trigger: str = ""
    subtitle: str = ""
    data: str = ""

    @classmethod
    def from_dict(cls, raw: Mapping[str, Any]) -> "EntryDraft":
        return cls(
            title=_text(raw.get("title")),
            trigger=_text(raw.get("trigger")),
            subtitle=_text(raw.get("subtitle")),
            data=_text(raw.get("data")),
        )

    def missing_fields(self) -> List[str]:
        values = asdict(self)
        return [name for name in REQUIRED_FIELDS if not values[name].strip()]

    def validate(self) -> None:
        missing = self.missing_fields()
        if missing:
            raise ValidationError(missing)

    def to_entry(self, entry_id: str) -> Entry:
        return Entry(
            id=entry_id,
            title=self.title,
            trigger=self.trigger,
            subtitle=self.subtitle,
            data=self.data,
        )
