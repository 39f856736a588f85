"""Camera widget tiles drawn on the e-ink canvas."""
import logging
from typing import Callable, Dict, Iterable, List, Optional, Tuple

from src.core.render_state import Region, RenderTarget
from src.display.renderer import Renderer

logger = logging.getLogger(__name__)


class CameraView(RenderTarget):
    """
    Surface of one camera widget instance.

    Keeps region visibility, the bound image and refresh triggers, and
    draws them when the board is rendered. Must only be mutated from the
    main context.
    """

    def __init__(self, widget_id: int, on_change: Optional[Callable[[], None]] = None):
        self.widget_id = widget_id
        self.on_change = on_change
        self.visible: Dict[Region, bool] = {
            Region.IMAGE: False,
            Region.PLACEHOLDER: True,
            Region.ERROR: False,
        }
        self.image = None
        self.default_icon = True
        self.triggers: Dict[Region, Callable[[], None]] = {}

    def _changed(self):
        if self.on_change is not None:
            self.on_change()

    def set_visible(self, region: Region, visible: bool) -> None:
        self.visible[region] = visible
        self._changed()

    def show_default_icon(self) -> None:
        self.default_icon = True
        self._changed()

    def set_image(self, image) -> None:
        self.image = image
        self._changed()

    def bind_trigger(self, region: Region, callback: Callable[[], None]) -> None:
        self.triggers[region] = callback

    def is_visible(self, region: Region) -> bool:
        return self.visible.get(region, False)

    def activate(self, region: Region) -> bool:
        """
        Activate a region as if it was tapped.

        Returns:
            True if a trigger was bound to the visible region and ran
        """
        callback = self.triggers.get(region)
        if callback is None or not self.is_visible(region):
            return False
        callback()
        return True

    def tapped_region(self) -> Optional[Region]:
        """The activatable region that covers the tile right now."""
        for region in (Region.IMAGE, Region.PLACEHOLDER):
            if self.is_visible(region):
                return region
        return None

    def render(self, renderer: Renderer, bounds: tuple) -> None:
        """Draw the tile into bounds."""
        x, y, width, height = bounds
        renderer.draw_rectangle(x, y, width - 1, height - 1, outline=0)
        inner = (x + 2, y + 2, width - 4, height - 4)

        if self.is_visible(Region.IMAGE) and self.image is not None:
            renderer.paste_image(self.image, inner)
        elif self.is_visible(Region.PLACEHOLDER) and self.default_icon:
            renderer.draw_camera_icon(inner)

        if self.is_visible(Region.ERROR):
            renderer.draw_error_badge(x + width - 3, y + 3)


class CameraBoard:
    """
    Host surface holding one CameraView per placed widget.

    Tiles are laid out in a grid, ordered by widget id:

    +---------+---------+
    | widget 1| widget 2|
    +---------+---------+
    | widget 5|         |
    +---------+---------+
    """

    def __init__(self, width=250, height=122, columns=2):
        self.width = width
        self.height = height
        self.columns = max(int(columns), 1)
        self.views: Dict[int, CameraView] = {}
        self.dirty = True

    def _mark_dirty(self):
        self.dirty = True

    def view_for(self, widget_id: int) -> CameraView:
        """Get the view of a widget, placing a new tile if needed."""
        view = self.views.get(widget_id)
        if view is None:
            view = CameraView(widget_id, on_change=self._mark_dirty)
            self.views[widget_id] = view
            self.dirty = True
        return view

    def remove(self, widget_ids: Iterable[int]):
        """Take widget tiles off the board."""
        for widget_id in widget_ids:
            if self.views.pop(widget_id, None) is not None:
                self.dirty = True

    def layout(self) -> List[Tuple[int, tuple]]:
        """Get (widget_id, bounds) for every tile."""
        widget_ids = sorted(self.views)
        if not widget_ids:
            return []

        columns = min(self.columns, len(widget_ids))
        rows = (len(widget_ids) + columns - 1) // columns
        tile_width = self.width // columns
        tile_height = self.height // rows

        tiles = []
        for i, widget_id in enumerate(widget_ids):
            row, col = divmod(i, columns)
            tiles.append((widget_id, (col * tile_width, row * tile_height, tile_width, tile_height)))
        return tiles

    def render(self, renderer: Renderer) -> None:
        """Draw every tile."""
        for widget_id, bounds in self.layout():
            try:
                self.views[widget_id].render(renderer, bounds)
            except Exception as e:
                logger.error("Error rendering camera widget %d: %s", widget_id, e)
        self.dirty = False

    def handle_tap(self, position: Tuple[int, int]) -> bool:
        """
        Activate whatever tile region lies under a tap.

        Returns:
            True if a refresh trigger ran
        """
        x, y = position
        for widget_id, (tx, ty, tw, th) in self.layout():
            if tx <= x < tx + tw and ty <= y < ty + th:
                view = self.views[widget_id]
                region = view.tapped_region()
                if region is None:
                    return False
                logger.debug("Tap on widget %d (%s)", widget_id, region.value)
                return view.activate(region)
        return False
