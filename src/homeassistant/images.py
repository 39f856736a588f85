"""Download and decode camera snapshots."""
import io
import logging
from typing import Optional, Tuple
from urllib.parse import urlsplit

import requests
from PIL import Image, UnidentifiedImageError

from src.core.exceptions import ImageFetchError

logger = logging.getLogger(__name__)

DEFAULT_MAX_SIZE = (1024, 600)


class ImageFetcher:
    """Fetches camera images, bounded to a maximum display resolution."""

    def __init__(self, session: Optional[requests.Session] = None, server_url: Optional[str] = None,
                 max_size: Tuple[int, int] = DEFAULT_MAX_SIZE, timeout: float = 10):
        """
        Initialize the fetcher.

        Args:
            session: Authenticated session used for URLs on the server
            server_url: Base URL of the server the session is valid for
            max_size: (width, height) the decoded image is scaled down to fit
            timeout: Request timeout in seconds
        """
        self.session = session
        self.server_url = server_url.rstrip("/") if server_url else None
        self._server_origin = self._origin(server_url) if server_url else None
        self.max_size = max_size
        self.timeout = timeout

    @staticmethod
    def _origin(url: str) -> Tuple[str, str]:
        parts = urlsplit(url)
        return parts.scheme.lower(), parts.netloc.lower()

    def _get(self, url: str) -> requests.Response:
        # Only send the access token back to the server it belongs to
        if self.session is not None and self._server_origin == self._origin(url):
            return self.session.get(url, timeout=self.timeout)
        return requests.get(url, timeout=self.timeout)

    def fetch(self, url: str) -> Image.Image:
        """
        Download and decode an image.

        Args:
            url: Absolute image URL

        Returns:
            PIL image no larger than max_size

        Raises:
            ImageFetchError: Download or decode failed
        """
        logger.debug("Fetching camera image %s", url)
        try:
            response = self._get(url)
            response.raise_for_status()
        except requests.RequestException as e:
            raise ImageFetchError(url, f"Download of {url} failed: {e}") from e

        try:
            image = Image.open(io.BytesIO(response.content))
            image.load()
        except (UnidentifiedImageError, OSError) as e:
            raise ImageFetchError(url, f"Could not decode image from {url}: {e}") from e

        image.thumbnail(self.max_size)
        logger.debug("Fetch and decode complete: %s (%dx%d)", url, image.width, image.height)
        return image
