"""
NodeSnap - Snapping-Signale

Publish/Subscribe pro Monitor-Instanz (kein globaler Event-Bus).
Verwendet Qt Signals; Handler laufen synchron im Call-Stack von update().
"""

from typing import Callable, Dict

from PySide6.QtCore import QObject, Signal

from snapping.state import SnapEvent


class _SnappingSignalHub(QObject):
    """
    Signals:
        move_at_start: Maus bewegt sich im Fangbereich eines Startpunkts
        move_at_end: Maus bewegt sich im Fangbereich eines Endpunkts
        move_outside: Maus bewegt sich außerhalb jedes Fangbereichs
        snap_in_start: Maus betritt den Fangbereich eines Startpunkts
        snap_out_start: Maus verlässt den Fangbereich eines Startpunkts
        snap_in_end: Maus betritt den Fangbereich eines Endpunkts
        snap_out_end: Maus verlässt den Fangbereich eines Endpunkts
    """

    move_at_start = Signal(object)
    move_at_end = Signal(object)
    move_outside = Signal(object)
    snap_in_start = Signal(object)
    snap_out_start = Signal(object)
    snap_in_end = Signal(object)
    snap_out_end = Signal(object)


class Subscription:
    """Disposable handle returned by SignalChannel.subscribe()."""

    def __init__(self, channel: 'SignalChannel', slot: Callable):
        self._channel = channel
        self._slot = slot
        self._disposed = False

    @property
    def disposed(self) -> bool:
        return self._disposed

    def dispose(self):
        """Unsubscribes the handler. Calling it again is a no-op."""
        if self._disposed:
            return
        self._disposed = True
        self._channel._disconnect(self._slot)

    def __enter__(self) -> 'Subscription':
        return self

    def __exit__(self, exc_type, exc, tb):
        self.dispose()
        return False


class SignalChannel:
    """One subscribable signal of a monitor."""

    def __init__(self, hub: QObject, event: SnapEvent):
        self.event = event
        self._signal = getattr(hub, event.value)
        self._receivers = 0

    @property
    def receiver_count(self) -> int:
        return self._receivers

    def subscribe(self, handler: Callable) -> Subscription:
        # Eigener Slot pro Subscription, damit disconnect() genau diese
        # Verbindung trifft (auch wenn derselbe Handler mehrfach abonniert ist)
        def slot(payload):
            handler(payload)

        self._signal.connect(slot)
        self._receivers += 1
        return Subscription(self, slot)

    def publish(self, payload):
        self._signal.emit(payload)

    def _disconnect(self, slot: Callable):
        self._signal.disconnect(slot)
        self._receivers -= 1

    def __repr__(self) -> str:
        return f"SignalChannel({self.event.value}, receivers={self._receivers})"


class SnappingSignals:
    """The seven channels of one monitor, addressable by SnapEvent."""

    def __init__(self):
        self._hub = _SnappingSignalHub()
        self._channels: Dict[SnapEvent, SignalChannel] = {
            event: SignalChannel(self._hub, event) for event in SnapEvent
        }

    def channel(self, event: SnapEvent) -> SignalChannel:
        return self._channels[event]

    def publish(self, event: SnapEvent, payload):
        self._channels[event].publish(payload)
