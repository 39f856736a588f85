"""Tests for configuration loading."""

import pytest

from src.utils.config import Config


def write_config(tmp_path, text):
    path = tmp_path / "config.yaml"
    path.write_text(text)
    return path


def test_missing_file_raises(tmp_path):
    with pytest.raises(FileNotFoundError):
        Config(tmp_path / "nope.yaml")


def test_dot_notation_and_defaults(tmp_path):
    config = Config(write_config(tmp_path, "home_assistant:\n  url: http://ha:8123/\n  timeout: 3\n"))

    assert config.get('home_assistant.url') == "http://ha:8123/"
    assert config.get('home_assistant.missing', 'x') == 'x'
    assert config.get_request_timeout() == 3
    assert config.get_max_image_size() == (1024, 600)
    assert config.get_display_size() == (250, 122)


def test_server_url_is_required(tmp_path):
    config = Config(write_config(tmp_path, "camera:\n  max_width: 640\n"))
    with pytest.raises(ValueError):
        config.get_server_url()


def test_store_path_relative_to_config(tmp_path):
    config = Config(write_config(tmp_path, "store:\n  path: widgets.yaml\n"))
    assert config.get_store_path() == tmp_path / "widgets.yaml"


def test_empty_file(tmp_path):
    config = Config(write_config(tmp_path, ""))
    assert config.get('anything') is None
