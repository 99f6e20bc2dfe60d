"""足底压力帧的二进制编解码：校验和计算、字段提取与帧构造。"""

from __future__ import annotations

import time
from dataclasses import dataclass
from enum import Enum
from typing import Iterable, Sequence

import numpy as np

from ..constants import (
    CHECKSUM_SPAN,
    FOOT_TAG_LEFT,
    FOOT_TAG_RIGHT,
    FOOT_TAG_UNKNOWN,
    FRAME_HEADER,
    FRAME_LENGTH,
    PAYLOAD_OFFSET,
    POINT_COUNT,
)

_POINT_DTYPE = np.dtype(">u2")


class FootSide(Enum):
    """帧内第 2 字节标识的左右脚。"""

    LEFT = FOOT_TAG_LEFT
    RIGHT = FOOT_TAG_RIGHT
    UNKNOWN = FOOT_TAG_UNKNOWN

    @classmethod
    def from_tag(cls, tag: int) -> "FootSide":
        """将标识字节映射为左右脚，未知取值降级为 UNKNOWN。"""
        if tag == FOOT_TAG_LEFT:
            return cls.LEFT
        if tag == FOOT_TAG_RIGHT:
            return cls.RIGHT
        return cls.UNKNOWN


def monotonic_ms() -> int:
    """返回单调时钟的毫秒值，用作样本时间戳。"""
    return int(time.monotonic() * 1000)


def _frozen_points(values: Iterable[int] | np.ndarray) -> np.ndarray:
    points = np.array(values, dtype=np.uint16)
    if points.shape != (POINT_COUNT,):
        raise ValueError(f"压力点数量必须为 {POINT_COUNT}，实际为 {points.size}")
    points.flags.writeable = False
    return points


@dataclass(frozen=True, eq=False)
class PressureSample:
    """一帧校验通过的压力数据，整体替换、不可变。

    ``raw`` 保留原始 39 字节，便于调试输出；手工构造的样本可为空。
    """

    foot_side: FootSide
    points: np.ndarray
    captured_at: int
    raw: bytes = b""

    def __post_init__(self) -> None:
        points = self.points
        if (
            not isinstance(points, np.ndarray)
            or points.dtype != np.uint16
            or points.flags.writeable
            or points.shape != (POINT_COUNT,)
        ):
            object.__setattr__(self, "points", _frozen_points(points))

    @classmethod
    def empty(cls) -> "PressureSample":
        """尚未收到有效帧时使用的占位样本。"""
        return cls(FootSide.UNKNOWN, np.zeros(POINT_COUNT, dtype=np.uint16), 0)

    @property
    def total(self) -> int:
        return int(self.points.sum(dtype=np.int64))

    @property
    def max_pressure(self) -> int:
        return int(self.points.max())

    def hex_dump(self) -> str:
        return self.raw.hex(" ")

    def point(self, index: int) -> int:
        """按 1..18 的点位编号取值，越界返回 0。"""
        if index < 1 or index > POINT_COUNT:
            return 0
        return int(self.points[index - 1])


def as_points(value: "PressureSample | np.ndarray | Sequence[int]") -> np.ndarray:
    """接受样本或 18 个数值，统一返回压力点数组。"""
    if isinstance(value, PressureSample):
        return value.points
    points = np.asarray(value)
    if points.shape != (POINT_COUNT,):
        raise ValueError(f"压力点数量必须为 {POINT_COUNT}，实际为 {points.size}")
    return points


def compute_checksum(frame: bytes | bytearray | Sequence[int]) -> int:
    """前 38 字节求和后取低 8 位。"""
    return sum(frame[:CHECKSUM_SPAN]) & 0xFF


def validate_checksum(frame: bytes | bytearray | Sequence[int]) -> bool:
    """校验完整帧的最后一个字节是否与计算结果一致。"""
    if len(frame) != FRAME_LENGTH:
        return False
    return compute_checksum(frame) == frame[CHECKSUM_SPAN]


def decode_frame(frame: bytes | bytearray, captured_at: int | None = None) -> PressureSample:
    """从校验通过的帧中提取左右脚标识与 18 个大端 16 位压力值。"""
    if len(frame) != FRAME_LENGTH:
        raise ValueError(f"帧长度必须为 {FRAME_LENGTH}，实际为 {len(frame)}")
    raw = bytes(frame)
    points = np.frombuffer(raw, dtype=_POINT_DTYPE, count=POINT_COUNT, offset=PAYLOAD_OFFSET)
    return PressureSample(
        foot_side=FootSide.from_tag(raw[1]),
        points=points.astype(np.uint16),
        captured_at=monotonic_ms() if captured_at is None else int(captured_at),
        raw=raw,
    )


def build_frame(side: FootSide | int, points: Iterable[int]) -> bytes:
    """根据左右脚与压力值生成带校验和的完整帧。"""

    tag = side.value if isinstance(side, FootSide) else int(side)
    if not 0 <= tag <= 0xFF:
        raise ValueError(f"非法的左右脚标识: {tag}")
    values = [int(value) for value in points]
    if len(values) != POINT_COUNT:
        raise ValueError(f"压力点数量必须为 {POINT_COUNT}，实际为 {len(values)}")
    if any(value < 0 or value > 0xFFFF for value in values):
        raise ValueError("压力值需位于 0~65535")
    body = bytes([FRAME_HEADER, tag]) + np.array(values, dtype=_POINT_DTYPE).tobytes()
    return body + bytes([compute_checksum(body)])


__all__ = [
    "FootSide",
    "PressureSample",
    "as_points",
    "build_frame",
    "compute_checksum",
    "decode_frame",
    "monotonic_ms",
    "validate_checksum",
]
