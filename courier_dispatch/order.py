from __future__ import annotations

# Order entity.
#
# The order facts (who ordered what, and when) never change after creation.
# The only mutable part is the delivery timestamp, which the delivering courier
# stamps exactly once.

import threading
import uuid
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any

from .errors import AlreadyDeliveredError

DISPLAY_FORMAT = "%d/%m/%Y %H:%M:%S"


def _new_order_id() -> str:
    return uuid.uuid4().hex[:8]


class _DeliveryStamp:
    """One-shot, thread-safe holder for the delivery timestamp."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self.at: datetime | None = None

    def set_once(self, when: datetime, order_id: str) -> None:
        with self._lock:
            if self.at is not None:
                raise AlreadyDeliveredError(order_id)
            self.at = when


@dataclass(frozen=True)
class Order:
    """A customer order: one food item, one drink and one dessert."""

    customer_name: str
    food: str
    drink: str
    dessert: str
    created_at: datetime = field(default_factory=datetime.now)
    order_id: str = field(default_factory=_new_order_id)
    _delivery: _DeliveryStamp = field(default_factory=_DeliveryStamp, init=False, repr=False, compare=False)

    @property
    def delivered_at(self) -> datetime | None:
        return self._delivery.at

    @property
    def is_delivered(self) -> bool:
        return self._delivery.at is not None

    def mark_delivered(self, now: datetime | None = None) -> datetime:
        """Stamp the delivery time (current time by default).

        Raises:
            AlreadyDeliveredError: the order already carries a delivery time.
            ValueError: an explicit `now` is earlier than `created_at`.
        """
        if now is None:
            # Wall clock can step backwards; never report delivery before creation.
            when = max(datetime.now(), self.created_at)
        elif now < self.created_at:
            raise ValueError("delivery time must not precede creation time")
        else:
            when = now

        self._delivery.set_once(when, self.order_id)
        return when

    def snapshot(self) -> dict[str, Any]:
        """JSON-ready view of the order, used in delivery records."""
        delivered_at = self.delivered_at
        return {
            "order_id": self.order_id,
            "customer_name": self.customer_name,
            "food": self.food,
            "drink": self.drink,
            "dessert": self.dessert,
            "created_at": self.created_at.isoformat(),
            "delivered_at": delivered_at.isoformat() if delivered_at is not None else None,
        }

    def __str__(self) -> str:
        lines = [
            f"Order for {self.customer_name}",
            f"food {self.food}",
            f"drink {self.drink}",
            f"dessert {self.dessert}",
            f"Ordered at {self.created_at.strftime(DISPLAY_FORMAT)}",
        ]
        delivered_at = self.delivered_at
        if delivered_at is not None:
            lines.append(f"Delivered at {delivered_at.strftime(DISPLAY_FORMAT)}")
        return "\n".join(lines) + "\n"
