"""
System tray icon for QuickPaste.

The tray is the desktop host's entry point: its menu delivers the search and
management activations. Uses pystray with Pillow for the icon.
"""
from __future__ import annotations

import threading
import time
from typing import Callable, Optional, TYPE_CHECKING

if TYPE_CHECKING:
    import pystray


class TrayManager:
    """Tray icon with Search / Manage snippets / Exit menu entries.

    "Search" is the default item, so a left click opens the search view
    where the platform supports it. Linux needs AppIndicator or
    StatusNotifier support.
    """

    def __init__(
        self,
        on_search: Optional[Callable[[], None]] = None,
        on_manage: Optional[Callable[[], None]] = None,
        on_exit: Optional[Callable[[], None]] = None,
    ) -> None:
        self._on_search = on_search
        self._on_manage = on_manage
        self._on_exit = on_exit
        self._icon: Optional[pystray.Icon] = None
        self._thread: Optional[threading.Thread] = None
        self._running = False

    def _create_icon_image(self):
        """Draw a "Q" badge programmatically."""
        from PIL import Image, ImageDraw, ImageFont

        size = 64
        img = Image.new("RGBA", (size, size), (0, 0, 0, 0))
        draw = ImageDraw.Draw(img)
        draw.rounded_rectangle([2, 2, size - 2, size - 2], radius=12, fill=(33, 110, 200, 255))

        try:
            font = ImageFont.truetype("DejaVuSans-Bold.ttf", 40)
        except (OSError, IOError):
            font = ImageFont.load_default()

        text = "Q"
        bbox = draw.textbbox((0, 0), text, font=font)
        x = (size - (bbox[2] - bbox[0])) // 2
        y = (size - (bbox[3] - bbox[1])) // 2 - 4
        draw.text((x, y), text, fill=(255, 255, 255, 255), font=font)
        return img

    def _create_menu(self):
        import pystray

        return pystray.Menu(
            pystray.MenuItem("Search", self._on_search_clicked, default=True),
            pystray.MenuItem("Manage snippets", self._on_manage_clicked),
            pystray.Menu.SEPARATOR,
            pystray.MenuItem("Exit", self._on_exit_clicked),
        )

    def _on_search_clicked(self, icon, item):
        if self._on_search:
            self._on_search()

    def _on_manage_clicked(self, icon, item):
        if self._on_manage:
            self._on_manage()

    def _on_exit_clicked(self, icon, item):
        self.stop()
        if self._on_exit:
            self._on_exit()

    def _run_tray(self):
        """Run the tray icon loop (background thread)."""
        import pystray

        try:
            self._icon = pystray.Icon(
                name="QuickPaste",
                icon=self._create_icon_image(),
                title="QuickPaste",
                menu=self._create_menu(),
            )
            self._running = True
            print("[INFO] System tray icon started", flush=True)
            self._icon.run()
        except Exception as exc:
            print(f"[WARN] System tray failed to start: {exc}", flush=True)
            self._running = False

    def start(self) -> bool:
        """Start the tray icon in a background thread; True when it came up."""
        if self._running:
            return True
        try:
            import pystray  # noqa: F401
        except ImportError:
            print("[WARN] pystray not available. Install with: pip install pystray pillow", flush=True)
            return False

        self._thread = threading.Thread(target=self._run_tray, daemon=True)
        self._thread.start()
        # Give it a moment to start
        time.sleep(0.5)
        return self._running

    def stop(self):
        if self._icon:
            try:
                self._icon.stop()
            except Exception as exc:
                print(f"[WARN] Could not stop tray icon: {exc}", flush=True)
            self._icon = None
        if self._running:
            print("[INFO] System tray icon stopped", flush=True)
        self._running = False

    def is_running(self) -> bool:
        return self._running

    def notify(self, message: str, title: str = "QuickPaste"):
        if self._icon:
            try:
                self._icon.notify(message, title)
            except Exception:
                pass  # not every platform supports notifications
