from __future__ import annotations

# Delivery feed consumer.
#
# Subscribes to every courier's delivery topic (and the fleet status stream)
# and prints one line per message. Runs until Ctrl+C.

import argparse
import time
from typing import Any, Callable

from .mqtt_topics import DEFAULT_NAMESPACE, all_deliveries, status_updates


def format_message(msg: dict[str, Any]) -> str | None:
    """Render a feed message as one line; None for message types we ignore."""
    mtype = msg.get("type")

    if mtype == "delivery":
        order = msg.get("order") or {}
        return (
            f"[feed] {msg.get('courier_name', '?')} delivered {order.get('order_id', '?')} "
            f"to {order.get('customer_name', '?')} at {order.get('delivered_at') or '-'}"
        )

    if mtype == "status_response":
        couriers = msg.get("couriers")
        if not isinstance(couriers, dict):
            return None
        parts = []
        for name in sorted(couriers):
            info = couriers[name]
            if isinstance(info, dict):
                parts.append(f"{name}={info.get('state', '?')}/{info.get('backlog', '?')}")
        return f"[feed] status {' '.join(parts) or '(no couriers)'} dropped={msg.get('dropped', 0)}"

    return None


def make_printer(out: Callable[[str], None] = print) -> Callable[[str, dict[str, Any]], None]:
    def _on_message(topic: str, msg: dict[str, Any]) -> None:
        line = format_message(msg)
        if line is not None:
            out(line)

    return _on_message


def watch(*, mqtt_host: str, mqtt_port: int, namespace: str, show_status: bool = True) -> None:
    # Import MQTT dependencies only when actually watching a broker.
    from .mqtt_client import MqttClient

    mqtt = MqttClient(client_id=f"feed-{int(time.time() * 1000)}", host=mqtt_host, port=mqtt_port)
    mqtt.add_handler(make_printer())
    mqtt.start()

    mqtt.subscribe(all_deliveries(namespace))
    if show_status:
        mqtt.subscribe(status_updates(namespace))

    print(f"[feed] connected to MQTT {mqtt_host}:{mqtt_port}, namespace={namespace}")
    try:
        while True:
            time.sleep(1)
    except KeyboardInterrupt:
        pass
    finally:
        mqtt.stop()


def main() -> None:
    parser = argparse.ArgumentParser(description="Delivery feed (MQTT)")
    parser.add_argument("--mqtt-host", default="127.0.0.1")
    parser.add_argument("--mqtt-port", type=int, default=1883)
    parser.add_argument("--namespace", default=DEFAULT_NAMESPACE)
    parser.add_argument("--no-status", action="store_true", help="only print deliveries")
    args = parser.parse_args()

    watch(
        mqtt_host=args.mqtt_host,
        mqtt_port=args.mqtt_port,
        namespace=args.namespace,
        show_status=not args.no_status,
    )


if __name__ == "__main__":
    main()
