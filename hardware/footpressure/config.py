"""足底压力模块的配置加载、校验与合并工具。"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import Any, Optional

from utils.communication.serial_port import SerialPortProfile

from .constants import (
    DEFAULT_BAUD_RATE,
    DEFAULT_CONNECT_TIMEOUT,
    DEFAULT_POLL_INTERVAL,
    DEFAULT_RX_BUFFER_SIZE,
    DEFAULT_SAMPLE_INTERVAL_MS,
    DEFAULT_SERIAL_PORT,
)

LOG = logging.getLogger(__name__)


@dataclass
class SerialConfig:
    """串口设备路径与通信参数。"""

    port: str = DEFAULT_SERIAL_PORT
    baud_rate: int = DEFAULT_BAUD_RATE
    rx_buffer_size: int = DEFAULT_RX_BUFFER_SIZE

    def __post_init__(self) -> None:
        if not self.port:
            raise ValueError("串口路径不能为空")
        if self.baud_rate <= 0:
            raise ValueError(f"波特率必须为正数: {self.baud_rate}")
        if self.rx_buffer_size <= 0:
            raise ValueError(f"接收缓冲区大小必须为正数: {self.rx_buffer_size}")

    @classmethod
    def from_dict(cls, payload: dict[str, Any] | None, fallback: "SerialConfig") -> "SerialConfig":
        """从字典中解析串口配置，缺失字段回落到 fallback。"""
        payload = payload or {}
        return cls(
            port=str(payload.get("port", fallback.port)),
            baud_rate=int(payload.get("baud_rate", fallback.baud_rate)),
            rx_buffer_size=int(payload.get("rx_buffer_size", fallback.rx_buffer_size)),
        )

    def to_profile(self) -> SerialPortProfile:
        return SerialPortProfile(port=self.port, baud_rate=self.baud_rate, rx_buffer_size=self.rx_buffer_size)


@dataclass
class FootPressureConfig:
    """模块总配置：串口、采样与轮询间隔、请求指令与超时。"""

    serial: SerialConfig = field(default_factory=SerialConfig)
    sample_interval_ms: int = DEFAULT_SAMPLE_INTERVAL_MS
    poll_interval: float = DEFAULT_POLL_INTERVAL
    request_command: Optional[bytes] = None
    discard_partial_on_chunk_end: bool = False
    connect_timeout: float = DEFAULT_CONNECT_TIMEOUT
    debug: bool = False

    def __post_init__(self) -> None:
        if self.sample_interval_ms <= 0:
            raise ValueError(f"采样间隔必须为正数: {self.sample_interval_ms}")
        if self.poll_interval <= 0:
            raise ValueError(f"轮询间隔必须为正数: {self.poll_interval}")
        if self.connect_timeout < 0:
            raise ValueError(f"连接超时不能为负数: {self.connect_timeout}")

    @classmethod
    def from_dict(cls, payload: dict[str, Any]) -> "FootPressureConfig":
        """从普通字典构造配置对象。"""
        defaults = cls()
        return cls(
            serial=SerialConfig.from_dict(payload.get("serial"), defaults.serial),
            sample_interval_ms=int(payload.get("sample_interval_ms", defaults.sample_interval_ms)),
            poll_interval=float(payload.get("poll_interval", defaults.poll_interval)),
            request_command=_parse_command(payload.get("request_command")),
            discard_partial_on_chunk_end=bool(
                payload.get("discard_partial_on_chunk_end", defaults.discard_partial_on_chunk_end)
            ),
            connect_timeout=float(payload.get("connect_timeout", defaults.connect_timeout)),
            debug=bool(payload.get("debug", defaults.debug)),
        )

    @classmethod
    def from_file(cls, file_path: Path) -> "FootPressureConfig":
        """读取 JSON 配置文件并解析为 FootPressureConfig 对象。"""
        with file_path.resolve().open("r", encoding="utf-8") as handle:
            data: dict[str, Any] = json.load(handle)
        return cls.from_dict(data)

    def merged(self, overrides: dict[str, Any]) -> "FootPressureConfig":
        """在当前配置基础上应用增量覆盖，返回新的配置对象。"""
        if not overrides:
            return self
        changes: dict[str, Any] = {}
        if "serial" in overrides:
            changes["serial"] = SerialConfig.from_dict(overrides["serial"], self.serial)
        if "port" in overrides:
            changes["serial"] = replace(changes.get("serial", self.serial), port=str(overrides["port"]))
        if "sample_interval_ms" in overrides:
            changes["sample_interval_ms"] = int(overrides["sample_interval_ms"])
        if "poll_interval" in overrides:
            changes["poll_interval"] = float(overrides["poll_interval"])
        if "request_command" in overrides:
            changes["request_command"] = _parse_command(overrides["request_command"])
        if "discard_partial_on_chunk_end" in overrides:
            changes["discard_partial_on_chunk_end"] = bool(overrides["discard_partial_on_chunk_end"])
        if "connect_timeout" in overrides:
            changes["connect_timeout"] = float(overrides["connect_timeout"])
        if "debug" in overrides:
            changes["debug"] = bool(overrides["debug"])
        unknown = set(overrides) - {"serial", "port", *changes}
        if unknown:
            LOG.warning("忽略未知的配置项: %s", ", ".join(sorted(unknown)))
        return replace(self, **changes)


def _parse_command(value: Any) -> Optional[bytes]:
    """将十六进制字符串（如 "A5 01"）解析为请求指令字节。"""
    if value in (None, ""):
        return None
    if isinstance(value, (bytes, bytearray)):
        return bytes(value)
    try:
        return bytes.fromhex(str(value))
    except ValueError as exc:
        raise ValueError(f"请求指令不是合法的十六进制字符串: {value!r}") from exc
