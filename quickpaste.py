"""PyWebView-based QuickPaste launcher."""

from __future__ import annotations

import atexit
import json
import os
import sys
import threading
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional

import webview

from core.activation import MANAGE_CODE, SEARCH_CODE, ActivationEvent
from core.config_manager import ConfigManager
from core.errors import QuickPasteError
from core.host_bridge import HostBridge
from core.item_store import ItemStore
from core.kv_store import JsonFileKeyValueStore, KeyValueStore
from core.models import EntryDraft
from core.session import LauncherSession
from core.snapshot_manager import SnapshotManager

CLIPBOARD_TIMEOUT = 2.0


def _clipboard_script(text: str) -> str:
    # rejections and a missing navigator.clipboard both resolve to the error text
    return (
        f"Promise.resolve().then(() => navigator.clipboard.writeText({json.dumps(text)}))"
        ".then(() => 'ok', (err) => String(err))"
    )


class WebviewHostBridge(HostBridge):
    """Host capabilities backed by a pywebview window.

    Ending the plugin only resets the launcher; the process keeps running in
    the tray until the user exits from there.
    """

    def __init__(
        self,
        window: Any = None,
        notifier: Optional[Callable[[str], None]] = None,
        clipboard_timeout: float = CLIPBOARD_TIMEOUT,
    ) -> None:
        super().__init__()
        self.window = window
        self.notifier = notifier
        self.clipboard_timeout = clipboard_timeout

    def attach(self, window: Any) -> None:
        self.window = window
        window.events.closed += self.emit_exit

    def copy_text(self, text: str) -> bool:
        """Write `text` to the clipboard and wait for the page to confirm it."""
        if self.window is None:
            print("[WARN] No window attached; cannot copy to clipboard", flush=True)
            return False
        done = threading.Event()
        outcome: Dict[str, Any] = {}

        def _resolved(result: Any) -> None:
            outcome["result"] = result
            done.set()

        self.window.evaluate_js(_clipboard_script(text), callback=_resolved)
        if not done.wait(self.clipboard_timeout):
            print(f"[WARN] Clipboard write not confirmed after {self.clipboard_timeout}s", flush=True)
            return False
        if outcome.get("result") != "ok":
            print(f"[WARN] Clipboard write failed: {outcome.get('result')}", flush=True)
            return False
        if self.notifier:
            self.notifier("Copied to clipboard")
        return True

    def hide_window(self) -> None:
        if self.window is not None:
            self.window.hide()

    def exit_plugin(self) -> None:
        self.emit_exit()


class QuickPasteAPI:
    """Exposes the launcher to the JavaScript front end.

    Every public method returns a status dict; core errors become
    `{"status": "error", "detail": ...}` and leave the collection untouched.
    """

    def __init__(
        self,
        config_manager: Optional[ConfigManager] = None,
        kv: Optional[KeyValueStore] = None,
        host: Optional[HostBridge] = None,
    ) -> None:
        self.config_manager = config_manager or ConfigManager()
        data_root = self.config_manager.get_data_root()
        self.kv = kv or JsonFileKeyValueStore(data_root)
        self.store = ItemStore(self.kv)
        self.snapshots = SnapshotManager(self.config_manager.get_backup_dir())
        self.host = host or WebviewHostBridge()
        self.session = LauncherSession(
            self.store,
            self.host,
            keywords=self.config_manager.get_launcher_keywords(),
            settle_delay=self.config_manager.get_settle_delay(),
        )
        self.session.start()
        print(f"[INFO] QuickPaste ready, data in {data_root}", flush=True)
        atexit.register(self.shutdown)

    def shutdown(self) -> None:
        self.session.stop()

    @staticmethod
    def _error(exc: Exception) -> Dict[str, Any]:
        return {"status": "error", "detail": str(exc)}

    def ping(self) -> Dict[str, Any]:
        return {"status": "success", "view": self.session.view}

    # -------------------------
    # Host activation
    # -------------------------
    def activate(self, code: str, payload: str = "") -> Dict[str, Any]:
        try:
            self.host.emit_enter(ActivationEvent(code=code, payload=payload))
        except (QuickPasteError, ValueError) as exc:
            print(f"[ERROR] Activation '{code}' failed: {exc}", flush=True)
            return self._error(exc)
        return self.get_state()

    def deactivate(self) -> Dict[str, Any]:
        self.host.emit_exit()
        return self.get_state()

    def get_state(self) -> Dict[str, Any]:
        return {"status": "success", **self.session.describe()}

    # -------------------------
    # Search surface
    # -------------------------
    def set_query(self, text: str) -> Dict[str, Any]:
        self.session.set_query(text)
        return self.get_state()

    def key_down(self, key: str) -> Dict[str, Any]:
        handled = self.session.handle_key(key)
        return {**self.get_state(), "handled": handled}

    def click_candidate(self, index: int) -> Dict[str, Any]:
        entry = self.session.click(int(index))
        if entry is None:
            return {"status": "error", "detail": f"No candidate at position {index}"}
        return {"status": "success", "entry": entry.to_dict()}

    # -------------------------
    # Management surface
    # -------------------------
    def list_entries(self) -> Dict[str, Any]:
        try:
            entries = self.store.list_entries()
        except QuickPasteError as exc:
            return self._error(exc)
        return {"status": "success", "entries": [e.to_dict() for e in entries], "count": len(entries)}

    def get_entry(self, entry_id: str) -> Dict[str, Any]:
        try:
            entry = self.store.get_entry(entry_id)
        except QuickPasteError as exc:
            return self._error(exc)
        if entry is None:
            return {"status": "error", "detail": f"Entry '{entry_id}' not found"}
        return {"status": "success", "entry": entry.to_dict()}

    def create_entry(self, entry_data: Dict[str, Any]) -> Dict[str, Any]:
        try:
            entry = self.store.add(EntryDraft.from_dict(entry_data or {}))
        except QuickPasteError as exc:
            return self._error(exc)
        self.session.reload()
        return {"status": "success", "detail": f"Created '{entry.trigger}'", "entry": entry.to_dict()}

    def update_entry(self, entry_id: str, entry_data: Dict[str, Any]) -> Dict[str, Any]:
        try:
            entry = self.store.update(entry_id, EntryDraft.from_dict(entry_data or {}))
        except QuickPasteError as exc:
            return self._error(exc)
        self.session.reload()
        return {"status": "success", "detail": f"Updated '{entry.trigger}'", "entry": entry.to_dict()}

    def delete_entry(self, entry_id: str) -> Dict[str, Any]:
        try:
            self.store.remove(entry_id)
        except QuickPasteError as exc:
            return self._error(exc)
        self.session.reload()
        return {"status": "success", "detail": f"Removed '{entry_id}'"}

    def clear_entries(self) -> Dict[str, Any]:
        try:
            self.store.clear()
        except QuickPasteError as exc:
            return self._error(exc)
        self.session.reload()
        return {"status": "success", "detail": "All entries removed"}

    # -------------------------
    # Backup / restore
    # -------------------------
    def export_snapshot(self, file_path: Optional[str] = None) -> Dict[str, Any]:
        try:
            entries = self.store.list_entries()
        except QuickPasteError as exc:
            return self._error(exc)
        return self.snapshots.export_to_file(entries, file_path or None)

    def list_snapshots(self) -> Dict[str, Any]:
        items = self.snapshots.list_snapshots()
        return {"status": "success", "snapshots": items, "count": len(items)}

    def import_snapshot(self, file_path: str, confirmed: bool = False) -> Dict[str, Any]:
        """Replace every entry with the snapshot's contents.

        Without `confirmed` nothing is written; the caller gets a preview so
        it can ask the user first.
        """
        try:
            entries = self.snapshots.read_snapshot(file_path)
            if not confirmed:
                return {
                    "status": "confirm",
                    "detail": f"Importing replaces all entries with {len(entries)} from {file_path}",
                    "count": len(entries),
                }
            count = self.store.import_entries(entries)
        except QuickPasteError as exc:
            print(f"[ERROR] Import of {file_path} failed: {exc}", flush=True)
            return self._error(exc)
        self.session.reload()
        return {"status": "success", "detail": f"Imported {count} entries", "count": count}

    def get_settings(self) -> Dict[str, Any]:
        return {
            "status": "success",
            "dataRoot": str(self.config_manager.get_data_root()),
            "backupDir": str(self.config_manager.get_backup_dir()),
            "keywords": self.config_manager.get_launcher_keywords(),
            "settleDelay": self.config_manager.get_settle_delay(),
        }


def _gui_preferences() -> List[Optional[str]]:
    preferred = os.environ.get("PYWEBVIEW_GUI")
    return [preferred, None] if preferred else [None]


def _start_webview() -> None:
    last_error: Optional[Exception] = None
    for preferred in _gui_preferences():
        label = preferred or "auto"
        try:
            print(f"[DEBUG] Attempting to start PyWebView backend '{label}'", flush=True)
            webview.start(gui=preferred, http_server=False)
            return
        except webview.errors.WebViewException as exc:  # type: ignore[attr-defined]
            last_error = exc
            print(f"[WARN] GUI backend '{label}' failed: {exc}", flush=True)
    print("[ERROR] PyWebView could not initialize a GUI backend.", flush=True)
    if last_error:
        raise last_error
    raise webview.errors.WebViewException("No GUI backend available")  # type: ignore[attr-defined]


def parse_activation(argv: List[str]) -> Optional[ActivationEvent]:
    """`search [payload...]` or `manage` on the command line opens a view at start."""
    if not argv:
        return None
    command = argv[0].lower()
    if command == "search":
        return ActivationEvent(code=SEARCH_CODE, payload=" ".join(argv[1:]))
    if command == "manage":
        return ActivationEvent(code=MANAGE_CODE)
    print(f"[WARN] Ignoring unknown command '{argv[0]}'", flush=True)
    return None


def main(argv: Optional[List[str]] = None) -> None:
    initial = parse_activation(sys.argv[1:] if argv is None else argv) or ActivationEvent(code=MANAGE_CODE)
    bridge = WebviewHostBridge()
    api = QuickPasteAPI(host=bridge)
    html_path = Path(__file__).with_name("webview_ui") / "quickpaste.html"

    window = webview.create_window(
        "QuickPaste",
        html=html_path.read_text(encoding="utf-8"),
        js_api=api,
        width=720,
        height=520,
    )
    bridge.attach(window)

    def show(code: str, payload: str = "") -> None:
        window.show()
        api.activate(code, payload)
        window.evaluate_js("window.quickpaste && window.quickpaste.refresh()")

    window.events.loaded += lambda: show(initial.code, initial.payload or "")

    tray = None
    try:
        from core.tray_manager import TrayManager

        tray = TrayManager(
            on_search=lambda: show(SEARCH_CODE),
            on_manage=lambda: show(MANAGE_CODE),
            on_exit=window.destroy,
        )
        if tray.start():
            bridge.notifier = tray.notify
        else:
            print("[INFO] System tray not available - running without tray icon", flush=True)
            tray = None
    except Exception as exc:
        print(f"[WARN] System tray initialization failed: {exc}", flush=True)
        tray = None

    try:
        _start_webview()
    finally:
        if tray:
            tray.stop()
        api.shutdown()


if __name__ == "__main__":
    main()
