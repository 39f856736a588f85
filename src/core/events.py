"""Triggering events and their dispatch to the update controller."""
import logging
from dataclasses import dataclass, field
from typing import List, Optional

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ConfigurationSaved:
    """The user finished configuring a newly placed widget."""
    widget_id: int
    entity_id: Optional[str] = None


@dataclass(frozen=True)
class RefreshRequested:
    """A refresh trigger of a widget was activated."""
    widget_id: int


@dataclass(frozen=True)
class ConnectivityRestored:
    """The network (or the display) came back; refresh everything."""


@dataclass(frozen=True)
class WidgetsRemoved:
    """Widget instances were removed from the host surface."""
    widget_ids: List[int] = field(default_factory=list)


def dispatch_event(controller, store, event) -> None:
    """
    Route one event to the controller.

    The event is handed over explicitly; nothing about it is remembered
    once this returns.

    Args:
        controller: UpdateController
        store: WidgetStore, enumerated for bulk refreshes
        event: One of the event dataclasses above
    """
    logger.debug("Event received: %s", event)

    if isinstance(event, ConfigurationSaved):
        controller.handle_configuration_saved(event.widget_id, event.entity_id)
    elif isinstance(event, RefreshRequested):
        controller.refresh_widget(event.widget_id)
    elif isinstance(event, ConnectivityRestored):
        widgets = store.get_all()
        if widgets:
            logger.info("Updating all widgets")
            controller.refresh_all([widget.widget_id for widget in widgets])
    elif isinstance(event, WidgetsRemoved):
        controller.delete_widgets(event.widget_ids)
    else:
        raise TypeError(f"Unknown event type: {type(event).__name__}")
