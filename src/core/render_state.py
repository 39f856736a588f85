"""Render decisions for camera widgets and the surface they are applied to."""
from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Optional


class RenderKind(Enum):
    """What a widget should currently show."""
    IMAGE = "image"
    PLACEHOLDER = "placeholder"
    ERROR = "error"


class Region(Enum):
    """Areas of a camera widget tile."""
    IMAGE = "image"
    PLACEHOLDER = "placeholder"
    ERROR = "error"


@dataclass(frozen=True)
class RenderState:
    """
    Derived display decision for one widget.

    Always recomputed from the widget config and the entity at refresh
    time, never stored.
    """
    kind: RenderKind
    url: Optional[str] = None

    @classmethod
    def image(cls, url: str) -> 'RenderState':
        return cls(RenderKind.IMAGE, url)

    @classmethod
    def placeholder(cls) -> 'RenderState':
        return cls(RenderKind.PLACEHOLDER)

    @classmethod
    def error(cls) -> 'RenderState':
        return cls(RenderKind.ERROR)


def build_display_url(base_url: str, picture_path: str) -> str:
    """
    Join the server base URL and a relative entity picture path.

    Example: ("http://host:8123/", "/api/camera_proxy/camera.front")
        -> "http://host:8123/api/camera_proxy/camera.front"
    """
    if base_url.endswith('/'):
        base_url = base_url[:-1]
    return f"{base_url}{picture_path}"


def state_from_picture(base_url: str, picture_path: Optional[str]) -> RenderState:
    """Turn a resolved picture path into a render state."""
    if not picture_path:
        return RenderState.placeholder()
    return RenderState.image(build_display_url(base_url, picture_path))


class RenderTarget(ABC):
    """Host-owned visual surface of a single camera widget."""

    @abstractmethod
    def set_visible(self, region: Region, visible: bool) -> None:
        """Show or hide a region."""
        pass

    @abstractmethod
    def show_default_icon(self) -> None:
        """Put the default camera iconography in the placeholder region."""
        pass

    @abstractmethod
    def set_image(self, image) -> None:
        """Bind a decoded image into the image region."""
        pass

    @abstractmethod
    def bind_trigger(self, region: Region, callback: Callable[[], None]) -> None:
        """Make a region activatable; activation calls callback."""
        pass


def apply_render_state(target: RenderTarget, state: RenderState) -> None:
    """
    Set region visibility on a target according to a render state.

    Exactly one of the image and placeholder regions ends up visible.
    The error indicator is toggled on its own.
    """
    showing_image = state.kind is RenderKind.IMAGE

    target.set_visible(Region.ERROR, state.kind is RenderKind.ERROR)
    if not showing_image:
        target.show_default_icon()
    target.set_visible(Region.IMAGE, showing_image)
    target.set_visible(Region.PLACEHOLDER, not showing_image)
