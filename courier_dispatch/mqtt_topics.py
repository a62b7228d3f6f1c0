"""MQTT topic helpers.

We keep topic construction in one place so publisher and feed agree on naming.

Topic layout under a configurable namespace (default: `delivery/v0`):

- `<ns>/deliveries/<courier_name>`
    One message per delivered order, published by the courier's observer.
- `<ns>/status/updates`
    Periodic fleet snapshots (backlog sizes, states, counters).

You can run multiple independent simulations on a shared broker by changing
the `namespace` parameter (e.g. `--namespace demo/alice`).
"""

from __future__ import annotations

DEFAULT_NAMESPACE = "delivery/v0"


def deliveries(courier_name: str, namespace: str = DEFAULT_NAMESPACE) -> str:
    return f"{namespace}/deliveries/{courier_name}"


def all_deliveries(namespace: str = DEFAULT_NAMESPACE) -> str:
    """Wildcard subscription matching every courier's delivery topic."""
    return f"{namespace}/deliveries/+"


def status_updates(namespace: str = DEFAULT_NAMESPACE) -> str:
    return f"{namespace}/status/updates"
