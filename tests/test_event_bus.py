from bus.topics import TOPIC_REGISTRY, get_module_topics, Topics

import hardware.footpressure  # noqa: F401  登记模块主题

PING = "tests.bus.ping"


def _ping_message(value, note=None):
    """测试用主题原型。"""


def test_subscribe_publish_and_unsubscribe(bus):
    bus.declare_topic(PING, _ping_message)
    received = []

    def listener(value, note=None):
        received.append((value, note))

    subscription = bus.subscribe(PING, listener)
    assert bus.has_listeners(PING)
    bus.publish(PING, value=1)
    bus.publish(PING, value=2, note="x")
    assert received == [(1, None), (2, "x")]

    subscription.unsubscribe()
    assert not bus.has_listeners(PING)
    bus.publish(PING, value=3)
    assert len(received) == 2


def test_listener_errors_are_isolated(bus):
    bus.declare_topic(PING, _ping_message)
    received = []

    def broken(value, note=None):
        raise ValueError("bad listener")

    def healthy(value, note=None):
        received.append(value)

    bus.subscribe(PING, broken)
    bus.subscribe(PING, healthy)
    bus.publish(PING, value=7)
    assert received == [7]


def test_unsubscribe_all_and_snapshot(bus):
    bus.declare_topic(PING, _ping_message)

    def listener(value, note=None):
        pass

    bus.subscribe(PING, listener)
    assert bus.listener_count(PING) == 1
    assert bus.topics_snapshot() == {PING: ["test_unsubscribe_all_and_snapshot.<locals>.listener"]}
    bus.unsubscribe_all()
    assert bus.listener_count(PING) == 0


def test_module_topics_registered():
    profile = get_module_topics("footpressure")
    assert profile is TOPIC_REGISTRY["footpressure"]
    assert Topics.Hardware.FootPressure.DATA in profile["publish"]
    assert Topics.Hardware.FootPressure.COMMAND in profile["subscribe"]
