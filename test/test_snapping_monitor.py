import math

import pytest
from loguru import logger

from config.feature_flags import set_flag
from snapping.events import MapPointerEvent, SnappingPointerEvent
from snapping.exclusions import ConnectedNodes
from snapping.monitor import SnappingMonitor
from snapping.node_source import NodeSource
from snapping.predicates import always, at_coordinate, never
from snapping.state import RangeState, SnapEvent
from snapping.store import SnappingStore
from snapping.view import MapView

E = SnapEvent


def _move(x, y):
    return MapPointerEvent(type="pointermove", coordinate=(x, y), pixel=(x, y))


def test_snap_in_and_out_of_start_node(monitor, node_source, recorder):
    node_source.add_node("n", (5.0, 0.0))

    snapped = monitor.update(_move(0.0, 0.0), always)

    assert snapped == (5.0, 0.0)
    assert recorder.take() == [E.SNAP_IN_START, E.MOVE_AT_START]

    snapped = monitor.update(_move(-10.0, 0.0), always)

    assert snapped == (-10.0, 0.0)
    assert recorder.take() == [E.SNAP_OUT_START, E.MOVE_OUTSIDE]


def test_repeated_identical_update_only_moves(monitor, node_source, recorder):
    node_source.add_node("n", (3.0, 0.0))

    first = monitor.update(_move(0.0, 0.0), never)
    recorder.take()
    second = monitor.update(_move(0.0, 0.0), never)

    assert first == second == (3.0, 0.0)
    assert recorder.take() == [E.MOVE_AT_END]


def test_reset_reemits_entry_signal(monitor, node_source, recorder):
    node_source.add_node("n", (1.0, 1.0))
    monitor.update(_move(0.0, 0.0), always)
    recorder.take()

    monitor.reset()

    assert recorder.take() == []
    assert monitor.range_state == RangeState(False, False)

    monitor.update(_move(0.0, 0.0), always)
    assert recorder.take() == [E.SNAP_IN_START, E.MOVE_AT_START]


def test_far_node_only_moves_outside(monitor, node_source, recorder):
    node_source.add_node("n", (100.0, 0.0))

    snapped = monitor.update(_move(0.0, 0.0), always, always)

    assert snapped == (0.0, 0.0)
    assert recorder.take() == [E.MOVE_OUTSIDE]


def test_empty_collection_only_moves_outside(monitor, recorder):
    snapped = monitor.update(_move(2.0, 3.0), always)

    assert snapped == (2.0, 3.0)
    assert recorder.take() == [E.MOVE_OUTSIDE]


def test_connected_node_does_not_attract(monitor, node_source, connected, recorder):
    node_source.add_node("start", (0.5, 0.0))
    node_source.add_node("other", (8.0, 0.0))
    connected.connect("start")

    snapped = monitor.update(_move(0.0, 0.0), never)

    assert snapped == (8.0, 0.0)
    assert recorder.take() == [E.SNAP_IN_END, E.MOVE_AT_END]


def test_exclusions_are_read_on_every_update(monitor, node_source, connected, recorder):
    node_source.add_node("a", (1.0, 0.0))
    monitor.update(_move(0.0, 0.0), never)
    recorder.take()

    connected.connect("a")
    snapped = monitor.update(_move(0.0, 0.0), never)

    assert snapped == (0.0, 0.0)
    assert recorder.take() == [E.SNAP_OUT_END, E.MOVE_OUTSIDE]


def test_at_end_defaults_to_always_true(monitor, node_source, recorder):
    node_source.add_node("n", (2.0, 0.0))

    monitor.update(_move(0.0, 0.0), never)

    assert recorder.take() == [E.SNAP_IN_END, E.MOVE_AT_END]


def test_start_wins_when_both_predicates_match(monitor, node_source, recorder):
    node_source.add_node("ring", (2.0, 0.0))

    monitor.update(_move(0.0, 0.0), always, always)

    assert recorder.take() == [E.SNAP_IN_START, E.MOVE_AT_START]


def test_start_node_while_end_latched_keeps_both_ranges(monitor, node_source, recorder):
    node_source.add_node("end", (0.0, 0.0))
    node_source.add_node("start", (3.0, 0.0))
    at_start = at_coordinate((3.0, 0.0))

    monitor.update(_move(0.0, 0.0), at_start)
    assert recorder.take() == [E.SNAP_IN_END, E.MOVE_AT_END]

    monitor.update(_move(3.0, 0.0), at_start)
    assert recorder.take() == [E.SNAP_IN_START, E.MOVE_AT_START]
    assert monitor.range_state == RangeState(True, True)

    # Beide Latches offen: pro Aufruf höchstens ein Austritt, Start zuerst
    monitor.update(_move(50.0, 0.0), at_start)
    assert recorder.take() == [E.SNAP_OUT_START, E.MOVE_OUTSIDE]
    assert monitor.range_state == RangeState(False, True)

    monitor.update(_move(50.0, 0.0), at_start)
    assert recorder.take() == [E.SNAP_OUT_END, E.MOVE_OUTSIDE]
    assert monitor.range_state == RangeState(False, False)


def test_latch_keeps_start_while_predicate_flips(monitor, node_source, recorder):
    node_source.add_node("n", (2.0, 0.0))
    monitor.update(_move(0.0, 0.0), at_coordinate((2.0, 0.0)), never)
    recorder.take()

    # Prädikat matcht nicht mehr, Knoten aber noch im Fangradius
    monitor.update(_move(1.0, 0.0), never, never)

    assert recorder.take() == [E.MOVE_AT_START]


def test_resolution_is_read_on_every_update(monitor, node_source, store, recorder):
    node_source.add_node("n", (8.0, 0.0))
    monitor.update(_move(0.0, 0.0), always)
    recorder.take()

    store.resolution = 5.0
    snapped = monitor.update(_move(0.0, 0.0), always)

    assert snapped == (0.0, 0.0)
    assert recorder.take() == [E.SNAP_OUT_START, E.MOVE_OUTSIDE]


class _FixedResolution:
    """Minimal resolution provider without the Qt store."""

    def __init__(self, px):
        self.px = px

    def current_resolution(self):
        return self.px


def test_monitor_accepts_any_resolution_provider(node_source, connected):
    node_source.add_node("n", (8.0, 0.0))
    provider = _FixedResolution(10.0)
    monitor = SnappingMonitor(node_source, connected, provider, lambda c: c)

    assert monitor.update(_move(0.0, 0.0), always) == (8.0, 0.0)

    provider.px = 5.0
    assert monitor.update(_move(0.0, 0.0), always) == (0.0, 0.0)


def test_payload_merges_pointer_event_and_snapping_info(monitor, node_source):
    node_source.add_node("n", (4.0, 3.0))
    received = []
    monitor.move_at_start.subscribe(lambda payload: received.append(payload))
    original = object()

    monitor.update(MapPointerEvent("pointermove", [0.0, 0.0], (10, 20), original), always)

    assert len(received) == 1
    payload = received[0]
    assert isinstance(payload, SnappingPointerEvent)
    assert payload.type == "pointermove"
    assert payload.pixel == (10, 20)
    assert payload.original_event is original
    assert payload.mouse_coordinate == (0.0, 0.0)
    assert payload.snapped_coordinate == (4.0, 3.0)
    assert payload.start is True
    assert payload.end is False


def test_all_signals_of_one_update_share_the_payload(monitor, node_source, recorder):
    node_source.add_node("n", (1.0, 0.0))

    monitor.update(_move(0.0, 0.0), always)

    payloads = [payload for _, payload in recorder.records]
    assert len(payloads) == 2
    assert payloads[0] is payloads[1]


def test_dispose_unsubscribes_handler(monitor, node_source):
    node_source.add_node("n", (1.0, 0.0))
    calls = []
    subscription = monitor.move_at_start.subscribe(lambda payload: calls.append(payload))

    monitor.update(_move(0.0, 0.0), always)
    subscription.dispose()
    subscription.dispose()
    monitor.update(_move(0.0, 0.0), always)

    assert len(calls) == 1
    assert subscription.disposed is True
    assert monitor.move_at_start.receiver_count == 0


def test_same_handler_subscribed_twice_is_disposed_per_subscription(monitor, node_source):
    node_source.add_node("n", (1.0, 0.0))
    calls = []

    def handler(payload):
        calls.append(payload)

    first = monitor.move_at_start.subscribe(handler)
    second = monitor.move_at_start.subscribe(handler)
    monitor.update(_move(0.0, 0.0), always)
    assert len(calls) == 2

    first.dispose()
    monitor.update(_move(0.0, 0.0), always)
    assert len(calls) == 3

    second.dispose()
    monitor.update(_move(0.0, 0.0), always)
    assert len(calls) == 3
    assert monitor.move_at_start.receiver_count == 0


@pytest.mark.filterwarnings("ignore::pytest.PytestUnraisableExceptionWarning")
def test_handler_exception_does_not_stop_publishing(monitor, node_source, recorder):
    node_source.add_node("n", (1.0, 0.0))

    def broken(payload):
        raise RuntimeError("handler failed")

    monitor.snap_in_start.subscribe(broken)

    # Exception wird von Qt gemeldet, nicht an den Aufrufer weitergereicht
    snapped = monitor.update(_move(0.0, 0.0), always)

    assert snapped == (1.0, 0.0)
    assert recorder.take() == [E.SNAP_IN_START, E.MOVE_AT_START]
    assert monitor.range_state == RangeState(True, False)


def test_subscription_as_context_manager(monitor, node_source):
    calls = []

    with monitor.subscribe(E.MOVE_OUTSIDE, lambda payload: calls.append(payload)):
        monitor.update(_move(0.0, 0.0), always)
    monitor.update(_move(0.0, 0.0), always)

    assert len(calls) == 1


def test_handlers_run_in_subscription_order(monitor):
    order = []
    monitor.move_outside.subscribe(lambda payload: order.append("first"))
    monitor.move_outside.subscribe(lambda payload: order.append("second"))

    monitor.update(_move(0.0, 0.0), always)

    assert order == ["first", "second"]


def test_collaborator_failure_keeps_range_state(node_source, connected, store):
    node_source.add_node("n", (1.0, 0.0))
    fail = {"active": False}

    def to_pixel(coordinate):
        if fail["active"]:
            raise RuntimeError("map not ready")
        return coordinate

    monitor = SnappingMonitor(node_source, connected, store, to_pixel)
    monitor.update(_move(0.0, 0.0), always)
    before = monitor.range_state

    fail["active"] = True
    with pytest.raises(RuntimeError):
        monitor.update(_move(50.0, 0.0), always)

    assert monitor.range_state == before

    fail["active"] = False
    events = []
    monitor.snap_out_start.subscribe(lambda payload: events.append(E.SNAP_OUT_START))
    monitor.update(_move(50.0, 0.0), always)
    assert events == [E.SNAP_OUT_START]


def test_malformed_pointer_event_does_not_crash(monitor, node_source, recorder):
    node_source.add_node("n", (0.0, 0.0))

    snapped = monitor.update(MapPointerEvent(coordinate=None), always)

    assert all(math.isnan(v) for v in snapped)
    assert recorder.take() == [E.MOVE_OUTSIDE]


def test_monitors_are_independent(node_source, connected, store):
    node_source.add_node("n", (1.0, 0.0))
    a = SnappingMonitor(node_source, connected, store, lambda c: c)
    b = SnappingMonitor(node_source, connected, store, lambda c: c)
    seen_b = []
    b.snap_in_start.subscribe(lambda payload: seen_b.append(payload))

    a.update(_move(0.0, 0.0), always)

    assert a.range_state.in_start_range is True
    assert b.range_state.in_start_range is False
    assert seen_b == []


def test_pixel_resolution_with_map_view():
    nodes = NodeSource()
    nodes.add_node("n", (40.0, 0.0))
    view = MapView(center=(0.0, 0.0), resolution=5.0)  # 40 Einheiten = 8 Pixel
    monitor = SnappingMonitor(nodes, ConnectedNodes(), SnappingStore(10.0), view.coordinate_to_pixel)

    assert monitor.update(_move(0.0, 0.0), always) == (40.0, 0.0)

    view.set_resolution(1.0)  # reingezoomt: jetzt 40 Pixel
    assert monitor.update(_move(0.0, 0.0), always) == (0.0, 0.0)


def test_debug_flag_traces_updates(monitor, node_source):
    messages = []
    sink_id = logger.add(lambda message: messages.append(str(message)), level="DEBUG")
    try:
        monitor.update(_move(0.0, 0.0), always)
        assert not any("[SNAP]" in m for m in messages)

        set_flag("snapping_debug", True)
        monitor.update(_move(0.0, 0.0), always)
        assert any("[SNAP]" in m and "move_outside" in m for m in messages)
    finally:
        logger.remove(sink_id)
