"""Update controller: decides what each camera widget shows and when."""
import functools
import itertools
import logging
from typing import Callable, Dict, Iterable, Optional

from src.core.exceptions import IncompleteConfigError
from src.core.render_state import (
    Region,
    RenderKind,
    RenderState,
    RenderTarget,
    apply_render_state,
    state_from_picture,
)
from src.storage.widget_store import WidgetConfig

logger = logging.getLogger(__name__)


class FetchGenerations:
    """
    Per-widget refresh counters.

    A result is only applied while the generation it was started with is
    still the widget's current one. Generations come from one counter that
    is never reset, so a reused widget id never sees an old number again.
    Only touched from the main context.
    """

    def __init__(self):
        self._counter = itertools.count(1)
        self._current: Dict[int, int] = {}

    def next(self, widget_id: int) -> int:
        """Start a new generation for a widget and return it."""
        generation = next(self._counter)
        self._current[widget_id] = generation
        return generation

    def is_current(self, widget_id: int, generation: int) -> bool:
        return self._current.get(widget_id) == generation

    def forget(self, widget_ids: Iterable[int]):
        """Drop counters so in-flight results for these widgets are discarded."""
        for widget_id in widget_ids:
            self._current.pop(widget_id, None)


class UpdateController:
    """
    Orchestrates refreshes of camera widgets.

    Holds no durable state of its own: widget configs live in the store,
    refresh generations in the injected FetchGenerations.
    """

    def __init__(self, store, gate, resolver, url_repository, fetcher, dispatcher,
                 target_for: Callable[[int], RenderTarget],
                 release_targets: Optional[Callable[[Iterable[int]], None]] = None,
                 generations: Optional[FetchGenerations] = None):
        """
        Initialize the controller.

        Args:
            store: WidgetStore with widget configurations
            gate: ConnectivityGate consulted before every refresh
            resolver: Resolves an entity id to its relative picture URL
            url_repository: Provides the server base URL
            fetcher: Downloads and decodes images
            dispatcher: MainDispatcher for background work and surface writes
            target_for: Returns the render target of a widget id
            release_targets: Called with ids of deleted widgets
            generations: Shared refresh counters
        """
        self.store = store
        self.gate = gate
        self.resolver = resolver
        self.url_repository = url_repository
        self.fetcher = fetcher
        self.dispatcher = dispatcher
        self.target_for = target_for
        self.release_targets = release_targets
        self.generations = generations if generations is not None else FetchGenerations()

    def handle_configuration_saved(self, widget_id: int, entity_id: Optional[str]) -> bool:
        """
        Persist a new widget configuration and refresh the widget.

        Incomplete configurations are logged and dropped.

        Returns:
            True if the configuration was saved
        """
        try:
            config = self._validate(widget_id, entity_id)
        except IncompleteConfigError as e:
            logger.error("Did not receive complete configuration data: %s", e)
            return False

        logger.info("Saving camera config data: widget %d, entity id %s", widget_id, config.entity_id)
        self.store.add(config)
        self.refresh_widget(widget_id)
        return True

    def _validate(self, widget_id: int, entity_id: Optional[str]) -> WidgetConfig:
        if entity_id is None or not str(entity_id).strip():
            raise IncompleteConfigError(widget_id, 'entity_id')
        return WidgetConfig(widget_id, str(entity_id).strip())

    def refresh_widget(self, widget_id: int) -> bool:
        """
        Start a refresh of one widget.

        Returns:
            True if a refresh was started, False if it was skipped
        """
        if not self.gate.is_active():
            logger.info("Skipping update of widget %d since network connection is not active", widget_id)
            return False

        config = self.store.get(widget_id)
        if config is None:
            logger.debug("Widget %d is not configured, nothing to update", widget_id)
            return False

        generation = self.generations.next(widget_id)
        self.dispatcher.run_in_background(
            self.resolver.resolve_picture_url,
            config.entity_id,
            on_success=lambda path: self._on_resolved(widget_id, generation, path),
            on_failure=lambda error: self._on_resolve_failed(widget_id, generation, config.entity_id, error),
        )
        return True

    def refresh_all(self, widget_ids: Iterable[int]) -> int:
        """
        Refresh every widget in widget_ids.

        A failure for one widget is logged and does not stop the others.

        Returns:
            Number of refreshes started
        """
        started = 0
        for widget_id in widget_ids:
            try:
                if self.refresh_widget(widget_id):
                    started += 1
            except Exception:
                logger.exception("Error refreshing widget %d", widget_id)
        return started

    def delete_widgets(self, widget_ids: Iterable[int]):
        """Remove widgets from the store. Unknown ids are ignored."""
        widget_ids = list(widget_ids)
        removed = self.store.delete_all(widget_ids)
        self.generations.forget(widget_ids)
        if self.release_targets is not None:
            self.release_targets(widget_ids)
        if removed:
            logger.info("Deleted widgets %s", ", ".join(str(wid) for wid in removed))

    def _on_resolved(self, widget_id: int, generation: int, picture_path: str):
        if not self.generations.is_current(widget_id, generation):
            logger.debug("Discarding stale entity result for widget %d", widget_id)
            return

        state = state_from_picture(self.url_repository.get_url(), picture_path)
        self._render(widget_id, generation, state)

    def _on_resolve_failed(self, widget_id: int, generation: int, entity_id: str, error: BaseException):
        if not self.generations.is_current(widget_id, generation):
            logger.debug("Discarding stale entity failure for widget %d", widget_id)
            return

        logger.error("Failed to fetch entity %s for widget %d or entity does not exist: %s",
                     entity_id, widget_id, error)
        self._render(widget_id, generation, RenderState.error())

    def _render(self, widget_id: int, generation: int, state: RenderState):
        target = self.target_for(widget_id)
        apply_render_state(target, state)

        if state.kind is RenderKind.IMAGE:
            logger.debug("Fetching camera image for widget %d", widget_id)
            self.dispatcher.run_in_background(
                self.fetcher.fetch,
                state.url,
                on_success=lambda image: self._on_image(widget_id, generation, image),
                on_failure=lambda error: logger.error(
                    "Unable to fetch image for widget %d: %s", widget_id, error),
            )

        trigger = functools.partial(self.refresh_widget, widget_id)
        target.bind_trigger(Region.IMAGE, trigger)
        target.bind_trigger(Region.PLACEHOLDER, trigger)

    def _on_image(self, widget_id: int, generation: int, image):
        if not self.generations.is_current(widget_id, generation):
            logger.debug("Discarding stale image for widget %d", widget_id)
            return

        self.target_for(widget_id).set_image(image)
        logger.debug("Fetch and load complete for widget %d", widget_id)
