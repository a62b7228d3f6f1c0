"""Delivery observers.

Every delivered order produces one `DeliveryRecord`. The core only hands the
record to a callable; how it is rendered or shipped is up to the observer:

- `ConsoleDeliveryObserver` prints it (the default);
- `CollectingDeliveryObserver` keeps records in memory (tests, run summaries);
- `MqttDeliveryObserver` (see `mqtt_bridge`) publishes it to the broker.
"""

from __future__ import annotations

import threading
from dataclasses import dataclass
from typing import Any, Callable

from .order import Order

DeliveryObserver = Callable[["DeliveryRecord"], None]


@dataclass(frozen=True)
class DeliveryRecord:
    courier_name: str
    courier_id: int
    order: dict[str, Any]
    text: str = ""

    @classmethod
    def for_order(cls, *, courier_name: str, courier_id: int, order: Order) -> "DeliveryRecord":
        return cls(courier_name=courier_name, courier_id=courier_id, order=order.snapshot(), text=str(order))

    @property
    def order_id(self) -> str:
        return str(self.order["order_id"])

    def to_message(self) -> dict[str, Any]:
        return {
            "type": "delivery",
            "courier_name": self.courier_name,
            "courier_id": self.courier_id,
            "order": dict(self.order),
        }


class ConsoleDeliveryObserver:
    def __init__(self, out: Callable[[str], None] = print) -> None:
        self._out = out

    def __call__(self, record: DeliveryRecord) -> None:
        self._out(f"{record.courier_name} delivered the {record.text}")


class CollectingDeliveryObserver:
    """Thread-safe in-memory sink."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._records: list[DeliveryRecord] = []

    def __call__(self, record: DeliveryRecord) -> None:
        with self._lock:
            self._records.append(record)

    @property
    def records(self) -> list[DeliveryRecord]:
        with self._lock:
            return list(self._records)

    def by_courier(self, courier_name: str) -> list[DeliveryRecord]:
        return [r for r in self.records if r.courier_name == courier_name]


def fan_out(*observers: DeliveryObserver) -> DeliveryObserver:
    """Combine observers; each record is passed to all of them in order."""

    def _notify(record: DeliveryRecord) -> None:
        for observer in observers:
            observer(record)

    return _notify
