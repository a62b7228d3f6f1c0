from courier_dispatch.dispatcher import Dispatcher
from courier_dispatch.feed import format_message, make_printer
from courier_dispatch.mqtt_bridge import MqttDeliveryObserver, StatusPublisher
from courier_dispatch.mqtt_client import decode_payload
from courier_dispatch.mqtt_topics import all_deliveries, deliveries, status_updates
from courier_dispatch.observer import DeliveryRecord
from courier_dispatch.order import Order


class FakeMqtt:
    def __init__(self):
        self.published = []

    def publish(self, topic, message):
        self.published.append((topic, message))


def _record():
    order = Order(customer_name="Alice", food="Pizza", drink="Soda", dessert="Oreo")
    order.mark_delivered()
    return DeliveryRecord.for_order(courier_name="Courier2", courier_id=1, order=order)


def test_topic_helpers():
    ns = "demo/v0"
    assert deliveries("Courier1", ns) == "demo/v0/deliveries/Courier1"
    assert all_deliveries(ns) == "demo/v0/deliveries/+"
    assert status_updates(ns) == "demo/v0/status/updates"


def test_delivery_observer_publishes_per_courier_topic():
    mqtt = FakeMqtt()
    record = _record()
    MqttDeliveryObserver(mqtt=mqtt, namespace="demo/v0")(record)

    [(topic, msg)] = mqtt.published
    assert topic == "demo/v0/deliveries/Courier2"
    assert msg["type"] == "delivery"
    assert msg["courier_id"] == 1
    assert msg["order"]["customer_name"] == "Alice"
    assert msg["order"]["delivered_at"] is not None


def test_status_publisher_sends_fleet_snapshot():
    mqtt = FakeMqtt()
    d = Dispatcher()
    d.create_couriers(2)
    StatusPublisher(dispatcher=d, mqtt=mqtt, namespace="demo/v0").publish_once()

    [(topic, msg)] = mqtt.published
    assert topic == "demo/v0/status/updates"
    assert sorted(msg["couriers"]) == ["Courier1", "Courier2"]


def test_feed_formats_messages():
    line = format_message(_record().to_message())
    assert line.startswith("[feed] Courier2 delivered ")
    assert "to Alice" in line

    status = {"type": "status_response", "dropped": 1, "couriers": {"Courier1": {"state": "idle", "backlog": 0}}}
    assert format_message(status) == "[feed] status Courier1=idle/0 dropped=1"

    assert format_message({"type": "something_else"}) is None


def test_feed_printer_skips_unknown_messages():
    lines = []
    printer = make_printer(lines.append)
    printer("x", {"type": "noise"})
    printer("x", _record().to_message())
    assert len(lines) == 1


def test_decode_payload():
    assert decode_payload(b'{"type":"delivery"}') == {"type": "delivery"}
    assert decode_payload("[1, 2]") is None
    assert decode_payload(b"\xff") is None
    assert decode_payload(b"not json") is None
