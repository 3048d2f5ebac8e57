from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Dict, List, Optional

DEFAULT_KEYWORDS = ["qp", "qpk"]
DEFAULT_SETTLE_DELAY = 0.1


class ConfigManager:
    """Manage user preferences and storage directories for QuickPaste.

    Preferences live in `preferences.json` under `~/.quickpaste` unless a
    base directory is supplied.
    """

    def __init__(self, base_dir: Optional[Path] = None) -> None:
        # Allow tests to override where preferences are stored.
        self._base = Path(base_dir) if base_dir is not None else Path.home() / ".quickpaste"
        self._base.mkdir(parents=True, exist_ok=True)
        self._preferences_path = self._base / "preferences.json"
        self._preferences: Dict[str, Any] = self._load_preferences()

    def _load_preferences(self) -> Dict[str, Any]:
        if not self._preferences_path.exists():
            return {}
        try:
            data = json.loads(self._preferences_path.read_text(encoding="utf-8"))
        except (OSError, ValueError) as exc:
            print(f"[WARN] Ignoring unreadable preferences {self._preferences_path}: {exc}", flush=True)
            return {}
        return data if isinstance(data, dict) else {}

    def _save_preferences(self) -> None:
        self._preferences_path.write_text(json.dumps(self._preferences, indent=2), encoding="utf-8")

    def get_preferences(self) -> Dict[str, Any]:
        return dict(self._preferences)

    def set_preference(self, key: str, value: Any) -> None:
        self._preferences[key] = value
        self._save_preferences()

    def get_data_root(self) -> Path:
        override = self._preferences.get("storageRoot")
        if override:
            try:
                root = Path(str(override)).expanduser()
                root.mkdir(parents=True, exist_ok=True)
                return root
            except OSError as exc:
                print(f"[WARN] Storage root {override} unusable, falling back: {exc}", flush=True)
        self._base.mkdir(parents=True, exist_ok=True)
        return self._base

    def get_backup_dir(self) -> Path:
        path = self.get_data_root() / "backups"
        path.mkdir(parents=True, exist_ok=True)
        return path

    def get_launcher_keywords(self) -> List[str]:
        keywords = self._preferences.get("launcherKeywords")
        if isinstance(keywords, list):
            cleaned = [str(k).strip() for k in keywords if str(k).strip()]
            if cleaned:
                return cleaned
        return list(DEFAULT_KEYWORDS)

    def get_settle_delay(self) -> float:
        value = self._preferences.get("settleDelay", DEFAULT_SETTLE_DELAY)
        if isinstance(value, bool):
            return DEFAULT_SETTLE_DELAY
        try:
            delay = float(value)
        except (TypeError, ValueError):
            return DEFAULT_SETTLE_DELAY
        return delay if delay >= 0 else DEFAULT_SETTLE_DELAY
