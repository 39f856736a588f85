"""Exception types for the camera widget dashboard."""


class CameraWidgetError(Exception):
    """Base class for camera widget errors."""


class IncompleteConfigError(CameraWidgetError):
    """Configuration data arrived without a required field."""

    def __init__(self, widget_id, field: str):
        self.widget_id = widget_id
        self.field = field
        super().__init__(f"Widget {widget_id}: missing required field '{field}'")


class EntityResolutionError(CameraWidgetError):
    """The picture URL of an entity could not be resolved."""

    def __init__(self, entity_id: str, message: str = ""):
        self.entity_id = entity_id
        super().__init__(message or f"Could not resolve picture for {entity_id}")


class EntityNotFoundError(EntityResolutionError):
    """The entity does not exist on the server."""


class AttributeMissingError(EntityResolutionError):
    """The entity exists but exposes no entity_picture attribute."""


class TransportError(EntityResolutionError):
    """The server could not be reached or answered with garbage."""


class ImageFetchError(CameraWidgetError):
    """Downloading or decoding a camera image failed."""

    def __init__(self, url: str, message: str = ""):
        self.url = url
        super().__init__(message or f"Unable to fetch image from {url}")
