from core.activation import MANAGE_CODE, SEARCH_CODE, ActivationEvent
from core.item_store import ItemStore
from core.kv_store import MemoryKeyValueStore
from core.models import EntryDraft
from core.selection import SelectionState
from core.session import LauncherSession
from fakes import FakeTimer, RecordingHost


def _session(*drafts):
    FakeTimer.created = []
    store = ItemStore(MemoryKeyValueStore())
    for draft in drafts:
        store.add(draft)
    host = RecordingHost()
    session = LauncherSession(store, host, timer_factory=FakeTimer)
    session.start()
    return session, host


def test_start_and_stop_manage_host_subscriptions():
    session, host = _session()
    assert host.listener_count == 2
    session.start()
    assert host.listener_count == 2
    session.stop()
    assert host.listener_count == 0


def test_context_manager_releases_subscriptions():
    store = ItemStore(MemoryKeyValueStore())
    host = RecordingHost()
    with LauncherSession(store, host, timer_factory=FakeTimer) as session:
        host.emit_enter(ActivationEvent(code=SEARCH_CODE, payload="x"))
        assert session.keyboard_active
    assert host.listener_count == 0
    assert not session.keyboard_active


def test_manage_code_opens_management_view():
    session, host = _session()
    host.emit_enter(ActivationEvent(code=MANAGE_CODE))
    assert session.view == "manage"
    assert not session.keyboard_active
    assert session.handle_key("Enter") is False


def test_search_payload_keyword_is_stripped_and_matched():
    session, host = _session(
        EntryDraft(title="Email", trigger="email", data="me@example.com"),
        EntryDraft(title="Em dash", trigger="em", data="-"),
    )
    host.emit_enter(ActivationEvent(code=SEARCH_CODE, payload="qp em"))
    assert session.view == "search"
    assert session.query == "em"
    assert [e.trigger for e in session.controller.candidates] == ["em", "email"]
    # two candidates: nothing is auto-committed
    assert FakeTimer.created == []


def test_keyboard_commit_delivers_payload_in_order():
    session, host = _session(
        EntryDraft(title="Email", trigger="email", data="me@example.com"),
        EntryDraft(title="Phone", trigger="phone", data="555"),
    )
    host.emit_enter(ActivationEvent(code=SEARCH_CODE))
    session.set_query("e")
    session.handle_key("ArrowDown")
    session.handle_key("Enter")
    assert host.calls == [("copy_text", "555"), ("hide_window",), ("exit_plugin",)]
    # exit_plugin ends the session view
    assert session.view is None
    assert not session.keyboard_active


def test_click_commits_specific_candidate():
    session, host = _session(
        EntryDraft(title="A", trigger="aa", data="first"),
        EntryDraft(title="B", trigger="ab", data="second"),
    )
    host.emit_enter(ActivationEvent(code=SEARCH_CODE, payload="a"))
    entry = session.click(1)
    assert entry.data == "second"
    assert host.calls[0] == ("copy_text", "second")


def test_seeded_exact_query_auto_commits_after_delay():
    # Scenario E
    session, host = _session(EntryDraft(title="Sig", trigger="sig", data="Regards"))
    host.emit_enter(ActivationEvent(code=SEARCH_CODE, payload="qp sig"))
    timer = FakeTimer.created[-1]
    assert timer.interval == 0.1
    assert host.calls == []
    timer.fire()
    assert host.calls == [("copy_text", "Regards"), ("hide_window",), ("exit_plugin",)]


def test_session_end_within_delay_cancels_auto_commit():
    session, host = _session(EntryDraft(title="Sig", trigger="sig", data="Regards"))
    host.emit_enter(ActivationEvent(code=SEARCH_CODE, payload="sig"))
    timer = FakeTimer.created[-1]
    host.emit_exit()
    assert timer.cancelled
    timer.fire(ignore_cancel=True)
    assert host.calls == []
    assert session.view is None
    assert session.controller.state == SelectionState.IDLE


def test_stop_cancels_auto_commit():
    session, host = _session(EntryDraft(title="Sig", trigger="sig", data="Regards"))
    host.emit_enter(ActivationEvent(code=SEARCH_CODE, payload="sig"))
    timer = FakeTimer.created[-1]
    session.stop()
    timer.fire(ignore_cancel=True)
    assert host.calls == []


def test_typing_does_not_auto_commit():
    session, host = _session(EntryDraft(title="Sig", trigger="sig", data="Regards"))
    host.emit_enter(ActivationEvent(code=SEARCH_CODE))
    assert session.controller.state == SelectionState.IDLE
    session.set_query("sig")
    assert FakeTimer.created == []
    assert session.controller.state == SelectionState.BROWSING


def test_empty_collection_stays_idle():
    session, host = _session()
    host.emit_enter(ActivationEvent(code=SEARCH_CODE, payload="anything"))
    assert session.controller.candidates == []
    assert session.controller.state == SelectionState.IDLE
    assert session.handle_key("Enter") is True
    assert host.calls == []


def test_escape_dismisses_without_copying():
    session, host = _session(EntryDraft(title="A", trigger="a", data="x"))
    host.emit_enter(ActivationEvent(code=SEARCH_CODE, payload="a"))
    timer = FakeTimer.created[-1]
    assert session.handle_key("Escape") is True
    assert host.calls == [("hide_window",), ("exit_plugin",)]
    assert timer.cancelled
    assert session.view is None
    assert not session.keyboard_active
    assert session.controller.state == SelectionState.IDLE


def test_search_works_again_after_escape():
    session, host = _session(EntryDraft(title="A", trigger="a", data="x"))
    host.emit_enter(ActivationEvent(code=SEARCH_CODE))
    session.handle_key("Escape")
    # typing and keys do nothing once the view is gone
    assert session.set_query("a") == []
    assert session.handle_key("Enter") is False
    host.calls.clear()
    host.emit_enter(ActivationEvent(code=SEARCH_CODE))
    session.set_query("a")
    session.handle_key("Enter")
    assert host.calls == [("copy_text", "x"), ("hide_window",), ("exit_plugin",)]


def test_reload_picks_up_new_entries():
    session, host = _session()
    host.emit_enter(ActivationEvent(code=SEARCH_CODE))
    session.set_query("new")
    assert session.controller.candidates == []
    session.store.add(EntryDraft(title="New", trigger="new"))
    session.reload()
    assert [e.trigger for e in session.controller.candidates] == ["new"]
    assert session.describe()["candidates"][0]["trigger"] == "new"
