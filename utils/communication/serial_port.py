"""Serial port byte source built on pyserial."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional

import serial

LOG = logging.getLogger(__name__)


class SerialCommunicationError(RuntimeError):
    """统一封装串口通信异常。"""


@dataclass
class SerialPortProfile:
    """描述串口设备路径、波特率与单次读取上限。"""

    port: str
    baud_rate: int
    rx_buffer_size: int = 128


class SerialByteSource:
    """非阻塞串口读取器：每次只取出当前已到达的字节。"""

    def __init__(self, profile: SerialPortProfile, *, write_timeout: float = 1.0) -> None:
        self.profile = profile
        self.write_timeout = write_timeout
        self._serial: Optional[serial.Serial] = None

    @property
    def is_open(self) -> bool:
        return bool(self._serial and self._serial.is_open)

    def open(self) -> None:
        """打开串口，timeout=0 使读取立即返回。"""
        if self.is_open:
            return
        try:
            self._serial = serial.Serial(
                port=self.profile.port,
                baudrate=self.profile.baud_rate,
                timeout=0,
                write_timeout=self.write_timeout,
            )
        except serial.SerialException as exc:
            raise SerialCommunicationError(f"无法打开串口 {self.profile.port}: {exc}") from exc
        LOG.info("Opened serial port %s @ %s", self.profile.port, self.profile.baud_rate)

    def read_available(self) -> bytes:
        """读取已缓存的字节，没有数据时返回空串。"""
        port = self._serial
        if port is None:
            return b""
        try:
            waiting = port.in_waiting
            if waiting <= 0:
                return b""
            return port.read(min(waiting, self.profile.rx_buffer_size))
        except serial.SerialException as exc:
            raise SerialCommunicationError(str(exc)) from exc

    def write(self, payload: bytes) -> None:
        port = self._serial
        if port is None:
            raise SerialCommunicationError("串口尚未打开")
        try:
            port.write(payload)
        except serial.SerialException as exc:
            raise SerialCommunicationError(str(exc)) from exc

    def close(self) -> None:
        """关闭串口，重复调用无副作用。"""
        port = self._serial
        self._serial = None
        if port is None:
            return
        try:
            port.close()
        except serial.SerialException:
            LOG.debug("关闭串口时忽略异常", exc_info=True)

    def __enter__(self) -> "SerialByteSource":
        self.open()
        return self

    def __exit__(self, *_: object) -> None:
        self.close()


__all__ = [
    "SerialByteSource",
    "SerialCommunicationError",
    "SerialPortProfile",
]
