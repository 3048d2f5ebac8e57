from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Iterable, Optional

MANAGE_CODE = "quickpaste-manage"
SEARCH_CODE = "quickpaste-search"

MANAGE_VIEW = "manage"
SEARCH_VIEW = "search"

DEFAULT_KEYWORDS = ("qp", "qpk")


@dataclass
class ActivationEvent:
    """What the host hands over when the launcher is opened."""

    code: str
    payload: Optional[str] = ""


def route(event: ActivationEvent) -> str:
    if event.code == MANAGE_CODE:
        return MANAGE_VIEW
    if event.code == SEARCH_CODE:
        return SEARCH_VIEW
    raise ValueError(f"Unknown activation code: {event.code!r}")


def extract_query(payload: Optional[str], keywords: Iterable[str] = DEFAULT_KEYWORDS) -> str:
    """Strip a leading launcher keyword (`qp email` -> `email`)."""
    text = payload or ""
    names = [re.escape(k) for k in keywords if k]
    if not names:
        return text
    found = re.match(rf"^(?:{'|'.join(names)})\s+(.+)$", text)
    return found.group(1) if found else text
