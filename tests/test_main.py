"""Tests for application wiring and the command line."""

from unittest.mock import patch

import pytest

from src.core.events import ConfigurationSaved, WidgetsRemoved
from src.main import CameraDashboard, main
from src.storage.widget_store import WidgetConfig, WidgetStore


@pytest.fixture
def config_path(tmp_path):
    path = tmp_path / "config.yaml"
    path.write_text(
        "home_assistant:\n"
        "  url: http://host:8123/\n"
        "  token: secret\n"
        "store:\n"
        "  path: widgets.yaml\n"
    )
    return path


@pytest.fixture
def offline():
    with patch("src.main.ConnectivityGate.is_active", return_value=False):
        yield


@pytest.fixture
def dashboard(config_path, offline, tmp_path):
    with patch("src.main.DisplayDriver.display_image") as display_image:
        app = CameraDashboard(config_path)
        app.display_image = display_image
        yield app
        app.dispatcher.shutdown()


def test_configured_widgets_get_tiles_at_startup(config_path, offline, tmp_path):
    WidgetStore(tmp_path / "widgets.yaml").add(WidgetConfig(4, "camera.porch"))

    app = CameraDashboard(config_path)
    try:
        assert list(app.board.views) == [4]
    finally:
        app.dispatcher.shutdown()


def test_events_run_on_main_loop_drain(dashboard):
    dashboard.post_event(ConfigurationSaved(7, "camera.front"))
    assert dashboard.store.get(7) is None

    dashboard.dispatcher.run_pending()
    assert dashboard.store.get(7) == WidgetConfig(7, "camera.front")

    dashboard.post_event(WidgetsRemoved([7]))
    dashboard.dispatcher.run_pending()
    assert dashboard.store.get(7) is None


def test_offline_run_once_renders_without_fetching(dashboard):
    dashboard.store.add(WidgetConfig(7, "camera.front"))

    with patch.object(dashboard.client, 'resolve_picture_url') as resolve:
        dashboard.run_once(timeout=1)

    resolve.assert_not_called()
    dashboard.display_image.assert_called_once()


def test_cli_add_list_remove(config_path, offline, tmp_path, capsys):
    with patch("src.main.DisplayDriver.display_image"):
        assert main(['--config', str(config_path), '--add', '7', 'camera.front']) == 0
        assert main(['--config', str(config_path), '--list']) == 0
        assert "7\tcamera.front" in capsys.readouterr().out

        assert main(['--config', str(config_path), '--remove', '7']) == 0
        assert main(['--config', str(config_path), '--list']) == 0
        assert capsys.readouterr().out == ""


def test_cli_rejects_non_integer_widget_id(config_path, offline):
    with pytest.raises(SystemExit):
        main(['--config', str(config_path), '--add', 'seven', 'camera.front'])
