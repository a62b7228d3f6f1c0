from __future__ import annotations

# MQTT adapters around the simulation core.
#
# The core never imports paho-mqtt; these adapters only need an object with a
# `publish(topic, message)` method, so unit tests can pass a fake client.

import threading
from typing import TYPE_CHECKING

from .mqtt_topics import DEFAULT_NAMESPACE, deliveries, status_updates
from .observer import DeliveryRecord

if TYPE_CHECKING:
    from .dispatcher import Dispatcher
    from .mqtt_client import MqttClient


class MqttDeliveryObserver:
    """Publish each delivery record on `<ns>/deliveries/<courier_name>`."""

    def __init__(self, *, mqtt: MqttClient, namespace: str = DEFAULT_NAMESPACE) -> None:
        self.mqtt = mqtt
        self.namespace = namespace

    def __call__(self, record: DeliveryRecord) -> None:
        self.mqtt.publish(deliveries(record.courier_name, self.namespace), record.to_message())


class StatusPublisher:
    """Broadcast periodic fleet snapshots for observers."""

    def __init__(self, *, dispatcher: Dispatcher, mqtt: MqttClient, namespace: str = DEFAULT_NAMESPACE) -> None:
        self.dispatcher = dispatcher
        self.mqtt = mqtt
        self.namespace = namespace

        # Background publisher thread control.
        self._stop_event = threading.Event()
        self._thread: threading.Thread | None = None

    def start(self, *, every: float = 2.0) -> None:
        if every <= 0:
            raise ValueError("every must be > 0")
        self._stop_event.clear()
        self._thread = threading.Thread(target=self._loop, args=(every,), daemon=True)
        self._thread.start()

    def stop(self) -> None:
        """Stop the publisher and send one final snapshot."""
        self._stop_event.set()
        t = self._thread
        if t and t.is_alive():
            t.join(timeout=1.0)
        self.publish_once()

    def publish_once(self) -> None:
        self.mqtt.publish(status_updates(self.namespace), self.dispatcher.status())

    def _loop(self, interval: float) -> None:
        while not self._stop_event.is_set():
            try:
                self.publish_once()
            except Exception as e:
                # Keep publishing even if an occasional error occurs.
                print(f"[status] publish failed: {e!r}")
            self._stop_event.wait(interval)
