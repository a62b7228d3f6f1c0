import pytest

from courier_dispatch.courier import BACKLOG_CAPACITY, CourierState
from courier_dispatch.dispatcher import Dispatcher
from courier_dispatch.observer import CollectingDeliveryObserver
from courier_dispatch.transit import fixed_transit


def _dispatcher(gate, observer=None, transit_seconds=0.0):
    return Dispatcher(
        observer=observer or CollectingDeliveryObserver(),
        transit=fixed_transit(transit_seconds),
        gate=gate,
    )


def test_create_couriers_share_one_gate(gate):
    d = _dispatcher(gate)
    couriers = d.create_couriers(3)
    assert [c.name for c in couriers] == ["Courier1", "Courier2", "Courier3"]
    assert [c.courier_id for c in couriers] == [0, 1, 2]
    assert all(c.gate is gate for c in couriers)


def test_create_couriers_validates():
    d = Dispatcher()
    with pytest.raises(ValueError):
        d.create_couriers(0)
    d.create_couriers(2)
    with pytest.raises(RuntimeError):
        d.create_couriers(2)


def test_assign_requires_couriers(make_orders):
    with pytest.raises(RuntimeError):
        Dispatcher().assign(make_orders(1))


def test_round_robin_fills_each_courier_before_advancing(gate, make_orders):
    observer = CollectingDeliveryObserver()
    d = _dispatcher(gate, observer)
    c1, c2, c3 = d.create_couriers(3)
    orders = make_orders(7)

    gate.acquire()  # freeze deliveries while we inspect backlogs
    try:
        assert d.assign(orders) == 7
        assert [c.backlog_size for c in (c1, c2, c3)] == [3, 3, 1]
        assert d.cursor == 2
        assert c1.pending_orders() == orders[2::-1]
        assert c2.pending_orders() == orders[5:2:-1]
        assert c3.pending_orders() == [orders[6]]

        # Full couriers launched themselves; the last one waits for launch_all.
        assert c1.state is CourierState.DRAINING
        assert c2.state is CourierState.DRAINING
        assert c3.state is CourierState.FILLING

        assert d.launch_all() == [c3]
        assert d.launch_all() == []
    finally:
        gate.release()

    assert d.join(timeout=5.0)
    assert len(observer.records) == 7
    assert d.dropped == []


def test_wrap_around_onto_full_courier_drops_order(gate, make_orders):
    d = _dispatcher(gate)
    c1, c2 = d.create_couriers(2)
    orders = make_orders(7)

    gate.acquire()
    try:
        assert d.assign(orders) == 6
        assert d.dropped == [orders[6]]
        assert c1.backlog_size == BACKLOG_CAPACITY
        assert orders[6] not in c1.pending_orders()
        # The drop still advances the cursor.
        assert d.cursor == 1
    finally:
        gate.release()

    assert d.join(timeout=5.0)
    assert orders[6].delivered_at is None
    assert c1.delivered_count + c2.delivered_count == 6


def test_every_assigned_order_is_delivered_exactly_once(gate, make_orders):
    observer = CollectingDeliveryObserver()
    d = _dispatcher(gate, observer, transit_seconds=0.01)
    couriers = d.create_couriers(3)
    orders = make_orders(8)

    assert d.assign(orders) == 8
    d.launch_all()
    assert d.join(timeout=10.0)

    ids = [r.order_id for r in observer.records]
    assert sorted(ids) == sorted(o.order_id for o in orders)
    assert len(set(ids)) == len(ids)
    assert all(o.delivered_at is not None and o.delivered_at >= o.created_at for o in orders)

    # One courier at a time, and never over capacity.
    assert gate.max_holders == 1
    assert gate.holders == 0
    assert all(not c.has_orders() for c in couriers)

    # Per courier, newest first.
    by_id = {o.order_id: i for i, o in enumerate(orders)}
    for c in couriers:
        positions = [by_id[r.order_id] for r in observer.by_courier(c.name)]
        assert positions == sorted(positions, reverse=True)


def test_drains_never_overlap(gate, make_orders):
    observer = CollectingDeliveryObserver()
    d = _dispatcher(gate, observer, transit_seconds=0.005)
    d.create_couriers(3)
    d.assign(make_orders(9))
    d.launch_all()
    assert d.join(timeout=10.0)

    # Records of a courier are contiguous when only one courier drains at a time.
    names = [r.courier_name for r in observer.records]
    runs = [n for i, n in enumerate(names) if i == 0 or names[i - 1] != n]
    assert sorted(runs) == ["Courier1", "Courier2", "Courier3"]
    assert gate.max_holders == 1


def test_cancel_all_abandons_pending_orders(gate, make_orders):
    d = _dispatcher(gate)
    couriers = d.create_couriers(2)

    gate.acquire()
    try:
        d.assign(make_orders(4))
        d.launch_all()
        d.cancel_all()
        assert d.join(timeout=5.0)
    finally:
        gate.release()

    assert [c.backlog_size for c in couriers] == [3, 1]
    assert all(c.delivered_count == 0 for c in couriers)


def test_status_snapshot(gate, make_orders):
    d = _dispatcher(gate)
    d.create_couriers(2)
    gate.acquire()
    try:
        d.assign(make_orders(4))
        st = d.status()
    finally:
        gate.release()
    d.launch_all()
    d.join(timeout=5.0)

    assert st["type"] == "status_response"
    assert st["cursor"] == 1
    assert st["dropped"] == 0
    assert st["couriers"]["Courier1"]["backlog"] == 3
    assert st["couriers"]["Courier1"]["state"] == "draining"
    assert st["couriers"]["Courier2"]["state"] == "filling"
