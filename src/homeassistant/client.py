"""Home Assistant REST client used to resolve camera picture URLs."""
import logging
from typing import Optional

import requests

from src.core.exceptions import (
    AttributeMissingError,
    EntityNotFoundError,
    TransportError,
)

logger = logging.getLogger(__name__)

PICTURE_ATTRIBUTE = 'entity_picture'


class UrlRepository:
    """Holds the base URL of the Home Assistant server."""

    def __init__(self, url: str):
        self.url = url

    def get_url(self) -> str:
        """Get the configured server URL."""
        return self.url


class HomeAssistantClient:
    """Queries entity state from the Home Assistant REST API."""

    def __init__(self, url_repository: UrlRepository, token: Optional[str] = None,
                 timeout: float = 10, session: Optional[requests.Session] = None):
        """
        Initialize the client.

        Args:
            url_repository: Source of the server base URL
            token: Long-lived access token
            timeout: Request timeout in seconds
            session: requests session to reuse (one is created if omitted)
        """
        self.url_repository = url_repository
        self.timeout = timeout
        self.session = session or requests.Session()
        if token:
            self.session.headers['Authorization'] = f"Bearer {token}"
        self.session.headers.setdefault('Content-Type', 'application/json')

    def get_entity(self, entity_id: str) -> dict:
        """
        Fetch the state object of an entity.

        Raises:
            EntityNotFoundError: The server does not know the entity
            TransportError: The request failed or returned invalid data
        """
        base_url = self.url_repository.get_url().rstrip('/')
        url = f"{base_url}/api/states/{entity_id}"

        try:
            response = self.session.get(url, timeout=self.timeout)
        except requests.RequestException as e:
            raise TransportError(entity_id, f"Request for {entity_id} failed: {e}") from e

        if response.status_code == 404:
            raise EntityNotFoundError(entity_id, f"Entity {entity_id} does not exist")

        try:
            response.raise_for_status()
            return response.json()
        except requests.HTTPError as e:
            raise TransportError(entity_id, f"Server rejected request for {entity_id}: {e}") from e
        except ValueError as e:
            raise TransportError(entity_id, f"Invalid response for {entity_id}: {e}") from e

    def resolve_picture_url(self, entity_id: str) -> str:
        """
        Get the relative picture URL of a camera entity.

        Args:
            entity_id: Entity to look up, e.g. camera.front_door

        Returns:
            The entity_picture attribute, e.g. /api/camera_proxy/camera.front_door?token=...

        Raises:
            EntityNotFoundError, AttributeMissingError, TransportError
        """
        entity = self.get_entity(entity_id)
        attributes = entity.get('attributes') if isinstance(entity, dict) else None

        if not isinstance(attributes, dict) or PICTURE_ATTRIBUTE not in attributes:
            raise AttributeMissingError(entity_id, f"Entity {entity_id} has no {PICTURE_ATTRIBUTE}")

        picture = attributes[PICTURE_ATTRIBUTE]
        logger.debug("Resolved %s -> %s", entity_id, picture)
        return "" if picture is None else str(picture)
