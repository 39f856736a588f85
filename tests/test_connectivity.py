"""Tests for connectivity checks."""

from collections import namedtuple
from unittest.mock import patch

from src.network.connectivity import ConnectivityGate, ConnectivityMonitor

IfStats = namedtuple('IfStats', 'isup')


def stats(**interfaces):
    return {name: IfStats(up) for name, up in interfaces.items()}


def test_active_when_non_loopback_interface_up():
    with patch("src.network.connectivity.psutil.net_if_stats", return_value=stats(lo=True, eth0=True)):
        assert ConnectivityGate().is_active() is True


def test_loopback_alone_is_not_a_connection():
    with patch("src.network.connectivity.psutil.net_if_stats", return_value=stats(lo=True, eth0=False)):
        assert ConnectivityGate().is_active() is False


def test_specific_interface():
    with patch("src.network.connectivity.psutil.net_if_stats", return_value=stats(eth0=True, wlan0=False)):
        assert ConnectivityGate('wlan0').is_active() is False
        assert ConnectivityGate('eth0').is_active() is True
        assert ConnectivityGate('missing0').is_active() is False


def test_psutil_error_means_inactive():
    with patch("src.network.connectivity.psutil.net_if_stats", side_effect=OSError("no /proc")):
        assert ConnectivityGate().is_active() is False


class FlippingGate:
    def __init__(self, states):
        self.states = list(states)

    def is_active(self):
        return self.states.pop(0)


def test_monitor_reports_restore_once():
    monitor = ConnectivityMonitor(FlippingGate([True, False, False, True, True, False, True]))

    assert [monitor.poll() for _ in range(7)] == [False, False, False, True, False, False, True]


def test_monitor_first_poll_never_reports_restore():
    monitor = ConnectivityMonitor(FlippingGate([True]))
    assert monitor.poll() is False
