from core.tray_manager import TrayManager


def test_menu_callbacks_deliver_activations():
    calls = []
    tray = TrayManager(
        on_search=lambda: calls.append("search"),
        on_manage=lambda: calls.append("manage"),
        on_exit=lambda: calls.append("exit"),
    )
    tray._on_search_clicked(None, None)
    tray._on_manage_clicked(None, None)
    tray._on_exit_clicked(None, None)
    assert calls == ["search", "manage", "exit"]
    assert not tray.is_running()


def test_icon_image_is_drawn():
    image = TrayManager()._create_icon_image()
    assert image.size == (64, 64)
