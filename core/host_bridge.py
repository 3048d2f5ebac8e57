from __future__ import annotations

from typing import Callable, List

from core.activation import ActivationEvent

EnterListener = Callable[[ActivationEvent], None]
ExitListener = Callable[[], None]


class HostBridge:
    """Capabilities the launcher needs from whatever window hosts it.

    Subclasses implement the window side (`copy_text`, `hide_window`,
    `exit_plugin`); listener bookkeeping lives here so the integration only
    has to call `emit_enter` / `emit_exit`.
    """

    def __init__(self) -> None:
        self._enter_listeners: List[EnterListener] = []
        self._exit_listeners: List[ExitListener] = []

    def copy_text(self, text: str) -> None:
        raise NotImplementedError

    def hide_window(self) -> None:
        raise NotImplementedError

    def exit_plugin(self) -> None:
        raise NotImplementedError

    def on_enter(self, callback: EnterListener) -> Callable[[], None]:
        self._enter_listeners.append(callback)
        return lambda: self._discard(self._enter_listeners, callback)

    def on_exit(self, callback: ExitListener) -> Callable[[], None]:
        self._exit_listeners.append(callback)
        return lambda: self._discard(self._exit_listeners, callback)

    @staticmethod
    def _discard(listeners: list, callback: Callable) -> None:
        if callback in listeners:
            listeners.remove(callback)

    def emit_enter(self, event: ActivationEvent) -> None:
        for callback in list(self._enter_listeners):
            callback(event)

    def emit_exit(self) -> None:
        for callback in list(self._exit_listeners):
            callback()

    @property
    def listener_count(self) -> int:
        return len(self._enter_listeners) + len(self._exit_listeners)
