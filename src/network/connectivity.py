"""Network connectivity checks used before any camera fetch."""
import logging
from typing import Optional

import psutil

logger = logging.getLogger(__name__)

LOOPBACK_INTERFACES = ('lo', 'lo0')


class ConnectivityGate:
    """Reports whether the device currently has a usable network path."""

    def __init__(self, interface: Optional[str] = None):
        """
        Initialize the gate.

        Args:
            interface: Only consider this interface. None checks all of them.
        """
        self.interface = interface

    def is_active(self) -> bool:
        """Return True if a non-loopback interface is up."""
        try:
            stats = psutil.net_if_stats()
        except (OSError, RuntimeError) as e:
            logger.warning("Could not read interface stats: %s", e)
            return False

        if self.interface:
            iface = stats.get(self.interface)
            return bool(iface and iface.isup)

        return any(
            iface.isup
            for name, iface in stats.items()
            if name not in LOOPBACK_INTERFACES
        )


class ConnectivityMonitor:
    """Detects the moment connectivity comes back after an outage."""

    def __init__(self, gate):
        self.gate = gate
        self.last_state = None

    def poll(self) -> bool:
        """
        Check the gate.

        Returns:
            True exactly once per inactive -> active transition
        """
        active = self.gate.is_active()
        restored = self.last_state is False and active
        if self.last_state is not None and active != self.last_state:
            logger.info("Network connection %s", "restored" if active else "lost")
        self.last_state = active
        return restored
