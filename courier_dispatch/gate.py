"""Delivery gate: the single permit shared by every courier.

Only the courier holding the gate may drain its backlog, so deliveries across
the whole fleet happen one courier at a time. The gate is a bounded binary
semaphore, not a lock:
- it is not reentrant (a holder calling `acquire()` again blocks forever);
- it can be released by a thread other than the one that acquired it;
- releasing a permit that is not held raises `ValueError`.

Waiting is fair only as far as `threading.Semaphore` is; callers must not
assume FIFO order at the gate.
"""

from __future__ import annotations

import threading


class DeliveryGate:
    def __init__(self, *, poll_interval: float = 0.05) -> None:
        if poll_interval <= 0:
            raise ValueError("poll_interval must be > 0")
        self._sem = threading.BoundedSemaphore(1)
        self._poll_interval = poll_interval

    def acquire(self, cancel: threading.Event | None = None) -> bool:
        """Block until the permit is available.

        Args:
            cancel: optional event. When it is set while we are still waiting,
                give up and return False without holding the permit.

        Returns:
            True once the permit is held, False if the wait was cancelled.
        """
        if cancel is None:
            self._sem.acquire()
            return True

        while not cancel.is_set():
            if self._sem.acquire(timeout=self._poll_interval):
                return True
        return False

    def release(self) -> None:
        self._sem.release()

    def __enter__(self) -> "DeliveryGate":
        self.acquire()
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.release()
