from unittest.mock import patch

import webview

from core.activation import MANAGE_CODE, SEARCH_CODE
from quickpaste import WebviewHostBridge, _start_webview, parse_activation


def test_start_webview_handles_backend_failure():
    calls = []

    def fake_start(*args, **kwargs):
        calls.append((args, kwargs))
        raise webview.errors.WebViewException("no backend")

    with patch("webview.start", fake_start), patch.dict("os.environ", {"PYWEBVIEW_GUI": "qt"}):
        try:
            _start_webview()
        except webview.errors.WebViewException:
            pass
        else:
            raise AssertionError("expected WebViewException")
    assert [kwargs["gui"] for _, kwargs in calls] == ["qt", None]


def test_parse_activation_from_command_line():
    assert parse_activation([]) is None
    search = parse_activation(["search", "qp", "email"])
    assert search.code == SEARCH_CODE
    assert search.payload == "qp email"
    assert parse_activation(["manage"]).code == MANAGE_CODE
    assert parse_activation(["bogus"]) is None


class FakeWindow:
    """Resolves clipboard scripts with a canned result, or never."""

    def __init__(self, result="ok", resolve=True):
        self.result = result
        self.resolve = resolve
        self.scripts = []
        self.hidden = False

    def evaluate_js(self, script, callback=None):
        self.scripts.append(script)
        if self.resolve and callback is not None:
            callback(self.result)

    def hide(self):
        self.hidden = True


def test_copy_text_waits_for_clipboard_confirmation():
    notes = []
    window = FakeWindow()
    bridge = WebviewHostBridge(window, notifier=notes.append)
    assert bridge.copy_text('say "hi"') is True
    assert 'writeText("say \\"hi\\"")' in window.scripts[0]
    assert notes == ["Copied to clipboard"]


def test_copy_text_reports_denied_clipboard(capsys):
    notes = []
    bridge = WebviewHostBridge(FakeWindow(result="NotAllowedError: denied"), notifier=notes.append)
    assert bridge.copy_text("secret") is False
    assert "[WARN] Clipboard write failed: NotAllowedError: denied" in capsys.readouterr().out
    assert notes == []


def test_copy_text_gives_up_when_page_never_answers(capsys):
    bridge = WebviewHostBridge(FakeWindow(resolve=False), clipboard_timeout=0.01)
    assert bridge.copy_text("x") is False
    assert "not confirmed" in capsys.readouterr().out


def test_copy_text_without_window():
    assert WebviewHostBridge().copy_text("x") is False
