from __future__ import annotations

from typing import Any, Dict

from quickpaste import QuickPasteAPI


class GUIApi(QuickPasteAPI):
    """Facade that exposes `QuickPasteAPI` through a dedicated API module.

    GUI-facing code and tests import `GUIApi`; `QuickPasteAPI` stays the
    source of truth.
    """

    def describe_surface(self) -> Dict[str, Any]:
        """List the callable endpoints the front end may use."""
        names = sorted(
            name
            for name in dir(QuickPasteAPI)
            if not name.startswith("_") and callable(getattr(QuickPasteAPI, name))
        )
        return {"status": "success", "methods": names}
