from __future__ import annotations

import threading
from enum import Enum
from typing import Any, Callable, List, Optional

from core.match_engine import is_exact_trigger
from core.models import Entry

SETTLE_DELAY = 0.1

_DOWN_KEYS = {"ArrowDown", "Down"}
_UP_KEYS = {"ArrowUp", "Up"}
_COMMIT_KEYS = {"Enter", "Return"}
_CANCEL_KEYS = {"Escape", "Esc"}


class SelectionState(str, Enum):
    IDLE = "idle"
    BROWSING = "browsing"
    COMMITTED = "committed"
    CANCELLED = "cancelled"


class SelectionController:
    """Keyboard-driven selection over the current candidate list.

    `seed()` may schedule an auto-commit through `timer_factory` (a
    `threading.Timer`-compatible callable). Any new candidate list, cancel,
    commit, reset or dispose invalidates the pending timer.
    """

    def __init__(
        self,
        on_commit: Optional[Callable[[Entry], None]] = None,
        on_cancel: Optional[Callable[[], None]] = None,
        settle_delay: float = SETTLE_DELAY,
        timer_factory: Callable[..., Any] = threading.Timer,
    ) -> None:
        self._on_commit = on_commit
        self._on_cancel = on_cancel
        self.settle_delay = settle_delay
        self._timer_factory = timer_factory
        self._timer: Optional[Any] = None
        self._generation = 0
        self._lock = threading.RLock()
        self.candidates: List[Entry] = []
        self.selected_index = 0
        self.state = SelectionState.IDLE
        self.committed: Optional[Entry] = None

    @property
    def is_terminal(self) -> bool:
        return self.state in (SelectionState.COMMITTED, SelectionState.CANCELLED)

    @property
    def current(self) -> Optional[Entry]:
        if 0 <= self.selected_index < len(self.candidates):
            return self.candidates[self.selected_index]
        return None

    def _cancel_timer(self) -> None:
        self._generation += 1
        timer = self._timer
        self._timer = None
        if timer is not None:
            timer.cancel()

    def set_candidates(self, candidates: List[Entry]) -> None:
        with self._lock:
            self._cancel_timer()
            self.candidates = list(candidates)
            if not self.candidates:
                self.selected_index = 0
                if not self.is_terminal:
                    self.state = SelectionState.IDLE
                return
            self.selected_index = max(0, min(self.selected_index, len(self.candidates) - 1))
            if self.state == SelectionState.IDLE:
                self.state = SelectionState.BROWSING

    def move_down(self) -> None:
        with self._lock:
            if self.state != SelectionState.BROWSING:
                return
            self.selected_index = min(self.selected_index + 1, len(self.candidates) - 1)

    def move_up(self) -> None:
        with self._lock:
            if self.state != SelectionState.BROWSING:
                return
            self.selected_index = max(self.selected_index - 1, 0)

    def commit(self) -> Optional[Entry]:
        return self._commit()

    def _commit(self, expected_generation: Optional[int] = None) -> Optional[Entry]:
        with self._lock:
            if expected_generation is not None and expected_generation != self._generation:
                return None
            if self.state != SelectionState.BROWSING:
                return None
            entry = self.current
            if entry is None:
                return None
            self._cancel_timer()
            self.state = SelectionState.COMMITTED
            self.committed = entry
        if self._on_commit:
            self._on_commit(entry)
        return entry

    def select(self, index: int) -> Optional[Entry]:
        with self._lock:
            if self.state != SelectionState.BROWSING or not 0 <= index < len(self.candidates):
                return None
            self.selected_index = index
        return self.commit()

    def cancel(self) -> None:
        with self._lock:
            self._cancel_timer()
            self.state = SelectionState.CANCELLED
        if self._on_cancel:
            self._on_cancel()

    def seed(self, query: str, candidates: List[Entry]) -> bool:
        """Apply candidates for a caller-supplied query.

        Returns True when an auto-commit was scheduled.
        """
        with self._lock:
            self.set_candidates(candidates)
            if len(self.candidates) != 1 or not is_exact_trigger(self.candidates[0], query):
                return False
            generation = self._generation
            timer = self._timer_factory(self.settle_delay, self._auto_commit, args=(generation,))
            if hasattr(timer, "daemon"):
                timer.daemon = True
            self._timer = timer
        timer.start()
        return True

    def _auto_commit(self, generation: int) -> None:
        # the generation check and the state change share one locked section
        self._commit(expected_generation=generation)

    @property
    def has_pending_commit(self) -> bool:
        return self._timer is not None

    def handle_key(self, key: str) -> bool:
        if key in _DOWN_KEYS:
            self.move_down()
        elif key in _UP_KEYS:
            self.move_up()
        elif key in _COMMIT_KEYS:
            self.commit()
        elif key in _CANCEL_KEYS:
            self.cancel()
        else:
            return False
        return True

    def reset(self) -> None:
        with self._lock:
            self._cancel_timer()
            self.candidates = []
            self.selected_index = 0
            self.state = SelectionState.IDLE
            self.committed = None

    def dispose(self) -> None:
        with self._lock:
            self._cancel_timer()
