"""Shared error types.

We keep the few domain errors in one place so courier/dispatcher/CLI agree.
"""

from __future__ import annotations


class DispatchError(Exception):
    """Base class for courier dispatch errors."""


class AlreadyDeliveredError(DispatchError):
    """Raised when an order is marked delivered a second time."""

    def __init__(self, order_id: str) -> None:
        super().__init__(f"order {order_id} was already delivered")
        self.order_id = order_id
