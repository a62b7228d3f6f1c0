import threading
import time

import pytest

from courier_dispatch.gate import DeliveryGate


def test_acquire_and_release():
    g = DeliveryGate()
    assert g.acquire() is True
    g.release()
    assert g.acquire() is True
    g.release()


def test_release_without_holder_is_rejected():
    g = DeliveryGate()
    with pytest.raises(ValueError):
        g.release()


def test_second_acquire_waits_until_release():
    g = DeliveryGate(poll_interval=0.01)
    g.acquire()

    got = threading.Event()

    def waiter():
        g.acquire()
        got.set()
        g.release()

    t = threading.Thread(target=waiter)
    t.start()
    assert not got.wait(0.1)

    g.release()
    assert got.wait(2.0)
    t.join(2.0)


def test_cancelled_wait_returns_false():
    g = DeliveryGate(poll_interval=0.01)
    g.acquire()

    cancel = threading.Event()
    threading.Timer(0.05, cancel.set).start()

    start = time.monotonic()
    assert g.acquire(cancel=cancel) is False
    assert time.monotonic() - start < 2.0

    # Still held by us, exactly once.
    g.release()
    with pytest.raises(ValueError):
        g.release()


def test_context_manager():
    g = DeliveryGate()
    with g:
        assert g.acquire(cancel=_set_event()) is False
    assert g.acquire(cancel=threading.Event()) is True
    g.release()


def test_poll_interval_must_be_positive():
    with pytest.raises(ValueError):
        DeliveryGate(poll_interval=0)


def _set_event():
    e = threading.Event()
    e.set()
    return e
