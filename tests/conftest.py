import threading

import pytest

from courier_dispatch.gate import DeliveryGate
from courier_dispatch.order import Order


class CountingGate(DeliveryGate):
    """Delivery gate that records how many holders it ever had at once."""

    def __init__(self) -> None:
        super().__init__(poll_interval=0.01)
        self._count_lock = threading.Lock()
        self.holders = 0
        self.max_holders = 0
        self.acquisitions = 0

    def acquire(self, cancel=None):
        ok = super().acquire(cancel)
        if ok:
            with self._count_lock:
                self.holders += 1
                self.acquisitions += 1
                self.max_holders = max(self.max_holders, self.holders)
        return ok

    def release(self):
        with self._count_lock:
            self.holders -= 1
        super().release()


@pytest.fixture
def gate():
    return CountingGate()


@pytest.fixture
def make_orders():
    def _make(n, prefix="Cust"):
        return [Order(customer_name=f"{prefix}{i}", food="Pizza", drink="Soda", dessert="Vanilla") for i in range(1, n + 1)]

    return _make
