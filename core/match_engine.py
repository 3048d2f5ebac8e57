from __future__ import annotations

from typing import Iterable, List, Optional

from core.models import Entry

EXACT = 0
PREFIX = 1
CONTAINS = 2


def is_exact_trigger(entry: Entry, query: str) -> bool:
    return bool(query) and (entry.trigger or "").lower() == query.lower()


def _is_candidate(entry: Entry, needle: str) -> bool:
    return (
        needle in (entry.trigger or "").lower()
        or needle in (entry.title or "").lower()
        or needle in (entry.subtitle or "").lower()
    )


def _rank(entry: Entry, needle: str) -> int:
    trigger = (entry.trigger or "").lower()
    if trigger == needle:
        return EXACT
    if trigger.startswith(needle):
        return PREFIX
    return CONTAINS


def match(entries: Iterable[Entry], query: Optional[str]) -> List[Entry]:
    """Return the entries matching `query`, best trigger matches first.

    An empty query yields nothing. Entries whose trigger equals the query
    come first, then trigger prefixes, then any other substring hit on
    trigger/title/subtitle; `sorted` is stable so ties keep collection order.
    """
    if not query:
        return []
    needle = query.lower()
    candidates = [entry for entry in entries if _is_candidate(entry, needle)]
    return sorted(candidates, key=lambda entry: _rank(entry, needle))
