"""集中管理事件主题名称、消息签名及模块级元数据。"""

from __future__ import annotations

from typing import Any, Callable, Dict, Mapping

ModuleTopicDetails = Dict[str, str]
ModuleTopicProfile = Dict[str, ModuleTopicDetails]


class Topics:
    """按领域分组的事件主题常量，避免魔法字符串散落各处。"""

    class Hardware:
        ROOT = "hardware"

        class FootPressure:
            COMMAND = "hardware.footpressure.command"
            STATUS = "hardware.footpressure.status"
            DATA = "hardware.footpressure.data"
            ERROR = "hardware.footpressure.error"


# 各主题的消息参数原型，订阅者的签名需与之兼容


def command_message(action: str, payload: Any = None, overrides: Any = None) -> None:
    """控制指令：action 为 start/stop/request_data/reset/set_debug。"""


def status_message(event: str, payload: Any = None) -> None:
    """生命周期与连接状态事件。"""


def data_message(frame: Any) -> None:
    """解析后的压力帧及派生指标。"""


def error_message(event: str, payload: Any = None) -> None:
    """校验失败等非致命错误。"""


TOPIC_MESSAGES: Dict[str, Callable[..., None]] = {
    Topics.Hardware.FootPressure.COMMAND: command_message,
    Topics.Hardware.FootPressure.STATUS: status_message,
    Topics.Hardware.FootPressure.DATA: data_message,
    Topics.Hardware.FootPressure.ERROR: error_message,
}

TOPIC_REGISTRY: Dict[str, ModuleTopicProfile] = {}


def register_module_topics(
    module_name: str,
    *,
    publish: Mapping[str, str] | None = None,
    subscribe: Mapping[str, str] | None = None,
) -> None:
    """记录模块发布与订阅的主题，便于文档化与调试。"""

    TOPIC_REGISTRY[module_name] = {
        "publish": dict(publish or {}),
        "subscribe": dict(subscribe or {}),
    }


def get_module_topics(module_name: str) -> ModuleTopicProfile | None:
    return TOPIC_REGISTRY.get(module_name)
