import os

import pytest

# Headless environment setup BEFORE Qt imports
os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")

from config.feature_flags import set_flag
from snapping.exclusions import ConnectedNodes
from snapping.monitor import SnappingMonitor
from snapping.node_source import NodeSource
from snapping.state import SnapEvent
from snapping.store import SnappingStore


# Global Feature Flag Defaults - Single Source of Truth for Test Isolation
# ========================================================================
# Jeder Test muss mit sauberen Feature-Flags starten.
# Diese Defaults müssen mit config/feature_flags.py synchron gehalten werden.
FEATURE_FLAG_DEFAULTS = {
    "snapping_debug": False,
    "snapping_spatial_index": True,
}


@pytest.fixture(autouse=True)
def _global_feature_flag_isolation():
    """
    Globale Feature-Flag-Isolation.

    Stellt sicher, dass jeder Test mit sauberen, deterministischen
    Feature-Flags startet.
    """
    for key, value in FEATURE_FLAG_DEFAULTS.items():
        set_flag(key, value)

    yield

    for key, value in FEATURE_FLAG_DEFAULTS.items():
        set_flag(key, value)


def identity_pixel(coordinate):
    """1 map unit == 1 pixel, enough for most unit tests."""
    return (coordinate[0], coordinate[1])


class EventRecorder:
    """Subscribes to every channel of a monitor and records (event, payload)."""

    def __init__(self, monitor: SnappingMonitor):
        self.records = []
        self.subscriptions = [
            monitor.subscribe(event, self._handler_for(event)) for event in SnapEvent
        ]

    def _handler_for(self, event):
        def handler(payload):
            self.records.append((event, payload))
        return handler

    @property
    def events(self):
        return [event for event, _ in self.records]

    def take(self):
        """Returns the recorded events and starts a new recording."""
        events = self.events
        self.records = []
        return events


@pytest.fixture
def node_source():
    return NodeSource()


@pytest.fixture
def store():
    return SnappingStore(resolution=10.0)


@pytest.fixture
def connected():
    return ConnectedNodes()


@pytest.fixture
def monitor(node_source, connected, store):
    return SnappingMonitor(node_source, connected, store, identity_pixel)


@pytest.fixture
def recorder(monitor):
    rec = EventRecorder(monitor)
    yield rec
    for sub in rec.subscriptions:
        sub.dispose()
