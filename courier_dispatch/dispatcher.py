from __future__ import annotations

# The Dispatcher owns the courier fleet and the shared delivery gate.
#
# Assignment policy (round-robin + capacity):
# - a cursor starts at the first courier
# - each order goes to the courier under the cursor
# - once that courier is at capacity (its append filled it, or it was already
#   full and the order was dropped) the cursor moves to the next courier
#
# Couriers that fill up launch themselves; `launch_all()` starts the rest.

import threading
from typing import Any, Iterable

from .courier import AddOutcome, Courier
from .gate import DeliveryGate
from .observer import DeliveryObserver
from .order import Order
from .transit import TransitTime


class Dispatcher:
    def __init__(
        self,
        *,
        observer: DeliveryObserver | None = None,
        transit: TransitTime | None = None,
        gate: DeliveryGate | None = None,
    ) -> None:
        self._lock = threading.Lock()
        self.gate = gate or DeliveryGate()
        self._observer = observer
        self._transit = transit

        self._couriers: list[Courier] = []
        self._cursor: int = 0

        # Orders lost to the capacity ceiling, in arrival order.
        self.dropped: list[Order] = []

    # -------------------- fleet --------------------

    def create_couriers(self, n: int, *, name_prefix: str = "Courier") -> list[Courier]:
        """Create `n` couriers sharing this dispatcher's gate."""
        if n <= 0:
            raise ValueError("n must be > 0")

        with self._lock:
            if self._couriers:
                raise RuntimeError("couriers already created")
            self._couriers = [
                Courier(
                    name=f"{name_prefix}{i + 1}",
                    courier_id=i,
                    gate=self.gate,
                    observer=self._observer,
                    transit=self._transit,
                )
                for i in range(n)
            ]
            self._cursor = 0
            return list(self._couriers)

    @property
    def couriers(self) -> list[Courier]:
        with self._lock:
            return list(self._couriers)

    @property
    def cursor(self) -> int:
        with self._lock:
            return self._cursor

    # -------------------- assignment --------------------

    def assign(self, orders: Iterable[Order]) -> int:
        """Distribute orders in arrival order. Returns how many were accepted."""
        accepted = 0
        dropped = 0
        with self._lock:
            if not self._couriers:
                raise RuntimeError("no couriers; call create_couriers() first")

            for order in orders:
                courier = self._couriers[self._cursor]
                outcome = courier.add_order(order)

                if outcome is AddOutcome.DROPPED:
                    self.dropped.append(order)
                    dropped += 1
                else:
                    accepted += 1

                if outcome in (AddOutcome.FILLED, AddOutcome.DROPPED):
                    self._cursor = (self._cursor + 1) % len(self._couriers)

        if dropped:
            print(f"[dispatcher] {dropped} order(s) dropped, couriers at capacity")
        return accepted

    def launch_all(self) -> list[Courier]:
        """Launch every courier with pending orders that is not already draining."""
        launched = [c for c in self.couriers if c.has_orders() and c.launch()]
        if launched:
            print(f"[dispatcher] launched {', '.join(c.name for c in launched)}")
        return launched

    # -------------------- completion --------------------

    def join(self, timeout: float | None = None) -> bool:
        """Wait for every drain thread. Returns True if all finished.

        `timeout` applies to each courier in turn, not to the whole fleet.
        """
        return all([c.join(timeout) for c in self.couriers])

    def cancel_all(self) -> None:
        for c in self.couriers:
            c.cancel()

    def status(self) -> dict[str, Any]:
        """Snapshot of the fleet for observers."""
        couriers = self.couriers
        with self._lock:
            dropped = len(self.dropped)
            cursor = self._cursor
        return {
            "type": "status_response",
            "cursor": cursor,
            "dropped": dropped,
            "couriers": {c.name: c.status() for c in couriers},
        }
