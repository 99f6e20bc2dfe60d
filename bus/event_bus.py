"""事件总线封装：主题声明、订阅管理与监听器异常隔离。"""

from __future__ import annotations

import inspect
import logging
from dataclasses import dataclass
from typing import Any, Callable, Dict, Set

from pubsub import pub

Listener = Callable[..., None]

LOG = logging.getLogger(__name__)


@dataclass
class Subscription:
    """封装订阅句柄，便于在退出时解除监听。"""

    topic: str
    listener: Listener
    _bus: "EventBus"

    def unsubscribe(self) -> None:
        self._bus.unsubscribe(self)


def _describe_listener(listener: Listener) -> str:
    if inspect.ismethod(listener):
        return f"{type(listener.__self__).__name__}.{listener.__func__.__name__}"
    return getattr(listener, "__qualname__", repr(listener))


def _log_listener_exception(listener_id: str, topic_obj: Any) -> None:
    """pypubsub 的监听器异常处理器：记录异常并让发布继续进行。"""
    LOG.exception("Listener %s raised while handling topic %s", listener_id, topic_obj.getName())


class EventBus:
    """对 pypubsub 的轻量封装，统一入口便于依赖注入。

    监听器抛出的异常默认只记录日志，不会打断发布方（例如解码循环）。
    pypubsub 只持有监听器的弱引用，这里额外保存强引用。
    """

    def __init__(self, *, isolate_listener_errors: bool = True) -> None:
        self._listener_map: Dict[str, Set[Listener]] = {}
        if isolate_listener_errors:
            pub.setListenerExcHandler(_log_listener_exception)

    def declare_topic(self, topic: str, prototype: Listener) -> None:
        """以原型函数的签名声明主题的消息参数，已存在的主题保持不变。"""

        pub.getDefaultTopicMgr().getOrCreateTopic(topic, prototype)

    def subscribe(self, topic: str, listener: Listener) -> Subscription:
        pub.subscribe(listener, topic)
        self._listener_map.setdefault(topic, set()).add(listener)
        return Subscription(topic=topic, listener=listener, _bus=self)

    def unsubscribe(self, subscription: Subscription) -> None:
        """取消之前的订阅，常用于模块卸载。"""

        pub.unsubscribe(subscription.listener, subscription.topic)
        listeners = self._listener_map.get(subscription.topic)
        if listeners is not None:
            listeners.discard(subscription.listener)
            if not listeners:
                self._listener_map.pop(subscription.topic, None)

    def unsubscribe_all(self) -> None:
        """撤销经由本总线登记的全部监听器。"""

        for topic, listeners in list(self._listener_map.items()):
            for listener in list(listeners):
                pub.unsubscribe(listener, topic)
        self._listener_map.clear()

    def publish(self, topic: str, **message: Any) -> None:
        pub.sendMessage(topic, **message)

    def listener_count(self, topic: str) -> int:
        return len(self._listener_map.get(topic, ()))

    def has_listeners(self, topic: str) -> bool:
        return self.listener_count(topic) > 0

    def topics_snapshot(self) -> Dict[str, list[str]]:
        """按主题列出监听器名称，辅助排查事件流转。"""

        return {
            topic: sorted(_describe_listener(listener) for listener in listeners)
            for topic, listeners in sorted(self._listener_map.items())
        }
