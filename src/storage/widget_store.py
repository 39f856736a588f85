"""Persistent mapping of widget instances to their camera entities."""
import logging
import threading
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, Iterable, List, Optional

import yaml

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class WidgetConfig:
    """Configuration of a single placed camera widget."""
    widget_id: int
    entity_id: str


class WidgetStore:
    """
    YAML-file backed store of widget configurations.

    The file holds a flat mapping of widget id to entity id:

        7: camera.front_door
        8: camera.garage

    Every operation takes the store lock, so refreshes and web requests
    running on different threads can share one instance.
    """

    def __init__(self, path=None):
        """
        Initialize the store.

        Args:
            path: YAML file to persist to. None keeps everything in memory.
        """
        self.path = Path(path) if path is not None else None
        self._lock = threading.Lock()
        self._widgets: Dict[int, str] = self._load()

    def _load(self) -> Dict[int, str]:
        """Load the mapping from disk."""
        if self.path is None or not self.path.exists():
            return {}

        try:
            with open(self.path, 'r') as f:
                data = yaml.safe_load(f) or {}
        except (OSError, yaml.YAMLError) as e:
            logger.error("Could not read widget store %s: %s", self.path, e)
            return {}

        if not isinstance(data, dict):
            logger.error("Widget store %s is not a mapping, ignoring it", self.path)
            return {}

        widgets = {}
        for widget_id, entity_id in data.items():
            try:
                widgets[int(widget_id)] = str(entity_id)
            except (TypeError, ValueError):
                logger.error("Skipping invalid widget id %r in %s", widget_id, self.path)
        return widgets

    def _save(self):
        """Write the mapping to disk. Caller must hold the lock."""
        if self.path is None:
            return

        self.path.parent.mkdir(parents=True, exist_ok=True)
        tmp_path = self.path.with_suffix(self.path.suffix + '.tmp')
        with open(tmp_path, 'w') as f:
            yaml.safe_dump(dict(sorted(self._widgets.items())), f, default_flow_style=False)
        tmp_path.replace(self.path)

    def get(self, widget_id: int) -> Optional[WidgetConfig]:
        """Get the configuration for a widget, or None if it is not configured."""
        with self._lock:
            entity_id = self._widgets.get(widget_id)
        if entity_id is None:
            return None
        return WidgetConfig(widget_id, entity_id)

    def get_all(self) -> List[WidgetConfig]:
        """Get every configured widget ordered by widget id."""
        with self._lock:
            items = sorted(self._widgets.items())
        return [WidgetConfig(widget_id, entity_id) for widget_id, entity_id in items]

    def add(self, config: WidgetConfig):
        """Add a widget configuration, replacing any existing one for the same id."""
        with self._lock:
            previous = dict(self._widgets)
            self._widgets[config.widget_id] = config.entity_id
            try:
                self._save()
            except OSError:
                self._widgets = previous
                raise

    def delete_all(self, widget_ids: Iterable[int]):
        """
        Delete the configurations of the given widgets.

        Ids that are not configured are ignored.
        """
        with self._lock:
            previous = dict(self._widgets)
            removed = [wid for wid in widget_ids if self._widgets.pop(wid, None) is not None]
            if removed:
                try:
                    self._save()
                except OSError:
                    self._widgets = previous
                    raise
        return removed

    def __len__(self):
        with self._lock:
            return len(self._widgets)
