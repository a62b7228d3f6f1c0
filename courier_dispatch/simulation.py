from __future__ import annotations

# Single-run simulation.
#
# Steps:
# - create the courier fleet (all couriers share one delivery gate)
# - show the menu and collect orders (console, CSV file or generator)
# - assign orders round-robin; full couriers start delivering immediately
# - launch the remaining couriers and wait for every delivery
#
# With `--publish`, deliveries and fleet snapshots also go to MQTT so a
# `watch` process can follow the run.

import argparse
import random
from dataclasses import dataclass, field
from typing import Callable, Sequence

from .dispatcher import Dispatcher
from .intake import generate_orders, load_orders, read_orders_interactive
from .menu import render_menu
from .mqtt_topics import DEFAULT_NAMESPACE
from .observer import CollectingDeliveryObserver, ConsoleDeliveryObserver, DeliveryObserver, fan_out
from .order import Order
from .transit import DEFAULT_TRANSIT_SECONDS, TransitTime, fixed_transit, random_transit


@dataclass
class RunSummary:
    assigned: int
    delivered: int
    dropped: int
    undelivered: int
    per_courier: dict[str, int] = field(default_factory=dict)


def build_transit(*, transit_seconds: float, max_transit_seconds: float | None, seed: int | None) -> TransitTime:
    if max_transit_seconds is None:
        return fixed_transit(transit_seconds)
    rng = random.Random(seed) if seed is not None else None
    return random_transit(min_seconds=transit_seconds, max_seconds=max_transit_seconds, rng=rng)


def run_simulation(
    orders: Sequence[Order],
    *,
    num_couriers: int = 3,
    transit: TransitTime | None = None,
    observer: DeliveryObserver | None = None,
    on_dispatcher: Callable[[Dispatcher], None] | None = None,
) -> RunSummary:
    """Assign `orders`, deliver them all and return what happened.

    Args:
        observer: extra delivery observer (console output is always on).
        on_dispatcher: hook called with the dispatcher before assignment
            (used to attach the MQTT status publisher).
    """
    collected = CollectingDeliveryObserver()
    observers: list[DeliveryObserver] = [ConsoleDeliveryObserver(), collected]
    if observer is not None:
        observers.append(observer)

    dispatcher = Dispatcher(observer=fan_out(*observers), transit=transit)
    couriers = dispatcher.create_couriers(num_couriers)
    if on_dispatcher is not None:
        on_dispatcher(dispatcher)

    print(f"[run] {len(orders)} order(s), {num_couriers} courier(s)")
    assigned = dispatcher.assign(orders)
    dispatcher.launch_all()

    try:
        dispatcher.join()
    except KeyboardInterrupt:
        print("[run] interrupted, cancelling couriers")
        dispatcher.cancel_all()
        dispatcher.join()

    records = collected.records
    return RunSummary(
        assigned=assigned,
        delivered=len(records),
        dropped=len(dispatcher.dropped),
        undelivered=sum(c.backlog_size for c in couriers),
        per_courier={c.name: c.delivered_count for c in couriers},
    )


def collect_orders(*, orders_file: str | None, generate: int | None, seed: int | None) -> list[Order]:
    if orders_file is not None:
        return load_orders(orders_file)
    if generate is not None:
        rng = random.Random(seed) if seed is not None else None
        return list(generate_orders(generate, rng=rng))
    return read_orders_interactive()


def main() -> None:
    parser = argparse.ArgumentParser(description="Courier dispatch simulation")
    parser.add_argument("--couriers", type=int, default=3)
    parser.add_argument("--transit-seconds", type=float, default=DEFAULT_TRANSIT_SECONDS)
    parser.add_argument(
        "--max-transit-seconds",
        type=float,
        default=None,
        help="if set, ride time is uniform in [transit-seconds, max-transit-seconds]",
    )
    parser.add_argument("--seed", type=int, default=None)

    source = parser.add_mutually_exclusive_group()
    source.add_argument("--orders-file", default=None, help="CSV with customer_name,food,drink,dessert")
    source.add_argument("--generate", type=int, default=None, help="generate N random orders")

    parser.add_argument("--no-menu", action="store_true", help="do not print the menu")

    parser.add_argument("--publish", action="store_true", help="publish deliveries and status to MQTT")
    parser.add_argument("--mqtt-host", default="127.0.0.1")
    parser.add_argument("--mqtt-port", type=int, default=1883)
    parser.add_argument("--namespace", default=DEFAULT_NAMESPACE)
    parser.add_argument("--publish-status-every", type=float, default=2.0)
    args = parser.parse_args()

    if args.couriers <= 0:
        parser.error("--couriers must be > 0")

    transit = build_transit(
        transit_seconds=args.transit_seconds,
        max_transit_seconds=args.max_transit_seconds,
        seed=args.seed,
    )

    if not args.no_menu:
        print(render_menu())
    orders = collect_orders(orders_file=args.orders_file, generate=args.generate, seed=args.seed)

    if not args.publish:
        summary = run_simulation(orders, num_couriers=args.couriers, transit=transit)
        _print_summary(summary)
        return

    from .mqtt_bridge import MqttDeliveryObserver, StatusPublisher
    from .mqtt_client import MqttClient

    mqtt_client = MqttClient(client_id="dispatcher", host=args.mqtt_host, port=args.mqtt_port)
    mqtt_client.start()
    print(f"[run] publishing to MQTT {args.mqtt_host}:{args.mqtt_port}, namespace={args.namespace}")

    publishers: list[StatusPublisher] = []

    def attach_status(dispatcher: Dispatcher) -> None:
        publisher = StatusPublisher(dispatcher=dispatcher, mqtt=mqtt_client, namespace=args.namespace)
        publisher.start(every=args.publish_status_every)
        publishers.append(publisher)

    try:
        summary = run_simulation(
            orders,
            num_couriers=args.couriers,
            transit=transit,
            observer=MqttDeliveryObserver(mqtt=mqtt_client, namespace=args.namespace),
            on_dispatcher=attach_status,
        )
    finally:
        for p in publishers:
            p.stop()
        mqtt_client.stop()

    _print_summary(summary)


def _print_summary(summary: RunSummary) -> None:
    per_courier = ", ".join(f"{name}={n}" for name, n in summary.per_courier.items())
    print(
        f"[run] delivered {summary.delivered}/{summary.assigned} assigned, "
        f"dropped {summary.dropped}, undelivered {summary.undelivered} ({per_courier})"
    )


if __name__ == "__main__":
    main()
