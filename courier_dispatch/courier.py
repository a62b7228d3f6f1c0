from __future__ import annotations

# Courier worker.
#
# A courier owns a small LIFO backlog (at most 3 orders) and a drain routine
# that runs on its own thread:
# - acquire the shared delivery gate (only one courier drains at a time)
# - for each order, newest first: ride (sleep), stamp delivery, notify observer
# - release the gate, whatever happened
#
# Filling the backlog to capacity launches the drain thread right away. That
# side effect is part of `add_order`'s contract (see AddOutcome.FILLED).

import threading
from enum import Enum
from typing import Any

from .gate import DeliveryGate
from .observer import ConsoleDeliveryObserver, DeliveryObserver, DeliveryRecord
from .order import Order
from .transit import TransitTime, fixed_transit

BACKLOG_CAPACITY = 3


class AddOutcome(str, Enum):
    ACCEPTED = "accepted"
    FILLED = "filled"  # accepted, backlog now full, drain launched
    DROPPED = "dropped"  # backlog was already full


class CourierState(str, Enum):
    IDLE = "idle"
    FILLING = "filling"
    DRAINING = "draining"


class Courier:
    def __init__(
        self,
        *,
        name: str,
        courier_id: int,
        gate: DeliveryGate,
        observer: DeliveryObserver | None = None,
        transit: TransitTime | None = None,
    ) -> None:
        self.name = name
        self.courier_id = courier_id
        self.gate = gate
        self._observer = observer or ConsoleDeliveryObserver()
        self._transit = transit or fixed_transit()

        self._lock = threading.Lock()
        self._backlog: list[Order] = []  # top of the stack is the last element
        self._busy = False
        self._draining = False
        self._cancel = threading.Event()
        self._worker: threading.Thread | None = None

        self.delivered_count = 0
        self.failed_count = 0
        self.dropped_count = 0

    def __repr__(self) -> str:
        return f"Courier(name={self.name!r}, courier_id={self.courier_id}, backlog={self.backlog_size})"

    # -------------------- backlog --------------------

    def has_orders(self) -> bool:
        with self._lock:
            return bool(self._backlog)

    @property
    def backlog_size(self) -> int:
        with self._lock:
            return len(self._backlog)

    @property
    def is_busy(self) -> bool:
        with self._lock:
            return self._busy

    @property
    def state(self) -> CourierState:
        with self._lock:
            if self._draining:
                return CourierState.DRAINING
            if self._backlog:
                return CourierState.FILLING
            return CourierState.IDLE

    def pending_orders(self) -> list[Order]:
        """Orders still waiting, in delivery order (newest first)."""
        with self._lock:
            return list(reversed(self._backlog))

    def add_order(self, order: Order) -> AddOutcome:
        """Push an order onto the backlog.

        Capacity is a hard ceiling: when the backlog already holds
        BACKLOG_CAPACITY orders the new one is dropped, not queued.

        When this append brings the backlog to exactly BACKLOG_CAPACITY, the
        drain routine is launched on a new thread before returning (unless a
        drain is already running, in which case that drain picks it up).
        """
        with self._lock:
            if len(self._backlog) >= BACKLOG_CAPACITY:
                self.dropped_count += 1
                dropped = True
            else:
                self._backlog.append(order)
                self._busy = True
                dropped = False
            filled = len(self._backlog) == BACKLOG_CAPACITY

        if dropped:
            print(f"[courier {self.name}] backlog full, dropped order {order.order_id} for {order.customer_name}")
            return AddOutcome.DROPPED

        if filled:
            self.launch()
            return AddOutcome.FILLED
        return AddOutcome.ACCEPTED

    # -------------------- work unit --------------------

    def launch(self) -> bool:
        """Start `deliver_all` on its own thread.

        Returns False (and starts nothing) when the backlog is empty or a
        drain is already active for this courier.
        """
        with self._lock:
            if self._draining or not self._backlog:
                return False
            self._draining = True
            self._cancel.clear()
            worker = threading.Thread(target=self.deliver_all, name=f"courier-{self.name}")
            self._worker = worker

        worker.start()
        return True

    def cancel(self) -> None:
        """Interrupt a pending gate wait or an ongoing ride.

        The drain stops early; orders still in the backlog stay undelivered.
        No-op when no drain is active, so a later drain starts clean.
        """
        with self._lock:
            if self._draining:
                self._cancel.set()

    def join(self, timeout: float | None = None) -> bool:
        """Wait for the current drain thread. Returns True if it finished."""
        with self._lock:
            worker = self._worker
        if worker is None:
            return True
        worker.join(timeout)
        return not worker.is_alive()

    def deliver_all(self) -> int:
        """Drain the backlog while holding the delivery gate.

        Returns the number of orders delivered by this call.
        """
        with self._lock:
            self._draining = True

        delivered = 0
        drained = False
        acquired = False
        try:
            acquired = self.gate.acquire(cancel=self._cancel)
            if not acquired:
                print(f"[courier {self.name}] cancelled while waiting for the gate")
                return 0

            while True:
                if self._cancel.is_set():
                    print(f"[courier {self.name}] cancelled, {self.backlog_size} order(s) left undelivered")
                    return delivered

                with self._lock:
                    if not self._backlog:
                        # Cleared under the same lock hold that sees the empty
                        # backlog, so a concurrent add_order can relaunch us.
                        self._busy = False
                        self._draining = False
                        self._cancel.clear()
                        drained = True
                        return delivered

                if self._deliver_next():
                    delivered += 1
        finally:
            if acquired:
                self.gate.release()
            if not drained:
                with self._lock:
                    self._draining = False
                    self._cancel.clear()

    def _deliver_next(self) -> bool:
        order: Order | None = None
        try:
            if self._cancel.wait(self._transit()):
                return False

            order = self._pop()
            if order is None:
                return False
            order.mark_delivered()
            self._observer(
                DeliveryRecord.for_order(courier_name=self.name, courier_id=self.courier_id, order=order)
            )
        except Exception as e:
            # One bad order must not stall the rest of the backlog.
            with self._lock:
                self.failed_count += 1
            if order is None:
                order = self._pop()
            ident = order.order_id if order is not None else "?"
            print(f"[courier {self.name}] failed to deliver order {ident}: {e!r}")
            return False

        with self._lock:
            self.delivered_count += 1
        return True

    def _pop(self) -> Order | None:
        with self._lock:
            if not self._backlog:
                return None
            order = self._backlog.pop()
            self._busy = bool(self._backlog)
            return order

    def status(self) -> dict[str, Any]:
        state = self.state
        with self._lock:
            return {
                "courier_id": self.courier_id,
                "backlog": len(self._backlog),
                "busy": self._busy,
                "state": state.value,
                "delivered_count": self.delivered_count,
                "failed_count": self.failed_count,
                "dropped_count": self.dropped_count,
            }
