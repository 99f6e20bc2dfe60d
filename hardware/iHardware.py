"""硬件模块的抽象基类，约束所有设备适配器的生命周期接口。"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, ClassVar, Dict, List

from bus.event_bus import EventBus
from bus.topics import TOPIC_MESSAGES


class IHardware(ABC):
    """所有硬件模块需要遵循的统一接口。"""

    topics: ClassVar[Dict[str, List[str]]] = {"publish": [], "subscribe": []}

    def __init__(self, name: str, bus: EventBus):
        self.name = name
        self.bus = bus
        self.connected = False
        declared = self.describe_topics()
        for topic in declared["publish"] + declared["subscribe"]:
            prototype = TOPIC_MESSAGES.get(topic)
            if prototype is not None:
                bus.declare_topic(topic, prototype)

    @abstractmethod
    def attach(self) -> None:
        """注册事件监听并申请所需资源。"""

    @abstractmethod
    def detach(self) -> None:
        """取消订阅并释放资源。"""

    @abstractmethod
    def handle_command(self, action: str, payload: dict[str, Any] | None = None) -> None:
        """响应总线发来的控制指令。"""

    @abstractmethod
    def poll(self) -> int:
        """处理一次已到达的输入，返回本次处理的数据单元数量。"""

    @abstractmethod
    def shutdown(self) -> None:
        """在进程退出前执行最终清理。"""

    def publish(self, topic: str, **message: Any) -> None:
        self.bus.publish(topic, **message)

    @classmethod
    def describe_topics(cls) -> Dict[str, List[str]]:
        return {
            "publish": list(cls.topics.get("publish", [])),
            "subscribe": list(cls.topics.get("subscribe", [])),
        }
