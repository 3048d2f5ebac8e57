from __future__ import annotations

import threading
from typing import Any, Callable, Dict, Iterable, List, Optional

from core.activation import (
    DEFAULT_KEYWORDS,
    MANAGE_VIEW,
    SEARCH_VIEW,
    ActivationEvent,
    extract_query,
    route,
)
from core.host_bridge import HostBridge
from core.item_store import ItemStore
from core.match_engine import match
from core.models import Entry
from core.selection import SETTLE_DELAY, SelectionController


class LauncherSession:
    """One launcher session: routes activations, runs search, commits.

    Subscriptions to the host are held between `start()` and `stop()`. The
    keyboard listener and the auto-commit timer only live while the search
    view is open and are released on every way out of it.
    """

    def __init__(
        self,
        store: ItemStore,
        host: HostBridge,
        keywords: Iterable[str] = DEFAULT_KEYWORDS,
        settle_delay: float = SETTLE_DELAY,
        timer_factory: Callable[..., Any] = threading.Timer,
    ) -> None:
        self.store = store
        self.host = host
        self.keywords = list(keywords)
        self.controller = SelectionController(
            on_commit=self._deliver,
            on_cancel=self._dismiss,
            settle_delay=settle_delay,
            timer_factory=timer_factory,
        )
        self.view: Optional[str] = None
        self.query = ""
        self._entries: List[Entry] = []
        self._keyboard_active = False
        self._unsubscribers: List[Callable[[], None]] = []

    # -------------------------
    # Lifecycle
    # -------------------------
    def start(self) -> None:
        if self._unsubscribers:
            return
        self._unsubscribers = [
            self.host.on_enter(self._handle_enter),
            self.host.on_exit(self._handle_exit),
        ]
        print("[INFO] Launcher session started", flush=True)

    def stop(self) -> None:
        self._reset_to_neutral()
        for unsubscribe in self._unsubscribers:
            unsubscribe()
        self._unsubscribers = []
        print("[INFO] Launcher session stopped", flush=True)

    def __enter__(self) -> "LauncherSession":
        self.start()
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.stop()

    @property
    def keyboard_active(self) -> bool:
        return self._keyboard_active

    def _handle_enter(self, event: ActivationEvent) -> None:
        self._reset_to_neutral()
        view = route(event)
        self.reload()
        if view == MANAGE_VIEW:
            self.view = MANAGE_VIEW
            return
        self.open_search(extract_query(event.payload, self.keywords))

    def _handle_exit(self) -> None:
        self._reset_to_neutral()

    def _reset_to_neutral(self) -> None:
        self._keyboard_active = False
        self.controller.reset()
        self.view = None
        self.query = ""

    # -------------------------
    # Search view
    # -------------------------
    def reload(self) -> List[Entry]:
        self._entries = self.store.list_entries()
        if self.view == SEARCH_VIEW:
            self.controller.set_candidates(match(self._entries, self.query))
        return list(self._entries)

    def open_search(self, query: str = "") -> bool:
        """Show the search view seeded with `query`.

        Returns True when the seeded query scheduled an auto-commit.
        """
        self.view = SEARCH_VIEW
        self._keyboard_active = True
        self.query = query
        return self.controller.seed(query, match(self._entries, query))

    def set_query(self, text: str) -> List[Entry]:
        if self.view != SEARCH_VIEW:
            return []
        self.query = text or ""
        self.controller.set_candidates(match(self._entries, self.query))
        return list(self.controller.candidates)

    def handle_key(self, key: str) -> bool:
        if not self._keyboard_active:
            return False
        return self.controller.handle_key(key)

    def click(self, index: int) -> Optional[Entry]:
        if self.view != SEARCH_VIEW:
            return None
        return self.controller.select(index)

    def _deliver(self, entry: Entry) -> None:
        self.host.copy_text(entry.data)
        self.host.hide_window()
        self.host.exit_plugin()

    def _dismiss(self) -> None:
        self.host.hide_window()
        self.host.exit_plugin()

    def describe(self) -> Dict[str, Any]:
        controller = self.controller
        return {
            "view": self.view,
            "query": self.query,
            "state": controller.state.value,
            "selectedIndex": controller.selected_index,
            "candidates": [entry.to_dict() for entry in controller.candidates],
        }
