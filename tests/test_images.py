"""Tests for camera image fetching."""

import io
from unittest.mock import MagicMock, patch

import pytest
import requests
from PIL import Image

from src.core.exceptions import ImageFetchError
from src.homeassistant.images import ImageFetcher


def jpeg_bytes(size):
    buffer = io.BytesIO()
    Image.new('RGB', size, (200, 100, 50)).save(buffer, format='JPEG')
    return buffer.getvalue()


def make_response(content=b"", status=200):
    response = MagicMock()
    response.content = content
    if status >= 400:
        response.raise_for_status.side_effect = requests.HTTPError(f"{status} error")
    return response


@pytest.fixture
def session():
    return MagicMock()


def test_image_is_bounded_to_max_size(session):
    session.get.return_value = make_response(jpeg_bytes((2048, 1536)))
    fetcher = ImageFetcher(session, "http://host:8123/", max_size=(1024, 600))

    image = fetcher.fetch("http://host:8123/api/camera_proxy/camera.front")

    assert image.width <= 1024 and image.height <= 600
    assert image.size == (800, 600)


def test_small_image_is_not_enlarged(session):
    session.get.return_value = make_response(jpeg_bytes((320, 240)))
    fetcher = ImageFetcher(session, "http://host:8123")

    assert fetcher.fetch("http://host:8123/snap.jpg").size == (320, 240)


def test_server_urls_use_authenticated_session(session):
    session.get.return_value = make_response(jpeg_bytes((10, 10)))
    fetcher = ImageFetcher(session, "http://host:8123/", timeout=3)

    fetcher.fetch("http://host:8123/api/camera_proxy/camera.front")

    session.get.assert_called_once_with("http://host:8123/api/camera_proxy/camera.front", timeout=3)


def test_foreign_urls_do_not_get_the_token(session):
    fetcher = ImageFetcher(session, "http://host:8123/")

    with patch("src.homeassistant.images.requests.get",
               return_value=make_response(jpeg_bytes((10, 10)))) as plain_get:
        fetcher.fetch("http://elsewhere/snap.jpg")

    session.get.assert_not_called()
    plain_get.assert_called_once()


def test_http_error_raises_fetch_error(session):
    session.get.return_value = make_response(status=502)
    fetcher = ImageFetcher(session, "http://host:8123")

    with pytest.raises(ImageFetchError):
        fetcher.fetch("http://host:8123/snap.jpg")


def test_garbage_bytes_raise_fetch_error(session):
    session.get.return_value = make_response(b"definitely not an image")
    fetcher = ImageFetcher(session, "http://host:8123")

    with pytest.raises(ImageFetchError):
        fetcher.fetch("http://host:8123/snap.jpg")


@pytest.mark.parametrize("url", [
    "http://host:8123.evil/snap.jpg",
    "http://host:81234/snap.jpg",
    "https://host:8123/snap.jpg",
])
def test_lookalike_hosts_do_not_get_the_token(session, url):
    fetcher = ImageFetcher(session, "http://host:8123/")

    with patch("src.homeassistant.images.requests.get",
               return_value=make_response(jpeg_bytes((10, 10)))) as plain_get:
        fetcher.fetch(url)

    session.get.assert_not_called()
    plain_get.assert_called_once_with(url, timeout=10)
