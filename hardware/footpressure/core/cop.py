"""压力中心 (CoP) 计算：按压力加权求质心，并换算到显示坐标范围。"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Optional, Sequence, Tuple

import numpy as np

from ..constants import COP_DISPLAY_RANGE, POINT_COUNT
from .field import coordinates_for
from .frame import FootSide, PressureSample, as_points


def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


@dataclass(frozen=True)
class CenterOfPressure:
    """压力中心结果，坐标已缩放到 [-10, 10]，数值只在输出时取整。"""

    x: float
    y: float
    total: int
    max_pressure: int

    @property
    def normalized_pressure(self) -> float:
        """总压力相对最大单点压力的平均负载比例，范围 0~1。"""
        if self.max_pressure <= 0:
            return 0.0
        return self.total / (self.max_pressure * POINT_COUNT)

    @property
    def pressure_percent(self) -> int:
        return _round_half_up(self.normalized_pressure * 100)

    def coordinates(self) -> Tuple[float, float]:
        return (self.x, self.y)

    def with_pressure(self) -> Tuple[float, float, int]:
        """坐标加 0~100 的整数压力。"""
        return (self.x, self.y, self.pressure_percent)

    def with_normalized_pressure(self) -> Tuple[float, float, float]:
        """坐标加 0~1 的原始归一化压力。"""
        return (self.x, self.y, self.normalized_pressure)

    def format(self, *, pressure: bool = False) -> str:
        text = f"X: {self.x:.2f}, Y: {self.y:.2f}"
        if pressure:
            text += f", P: {self.normalized_pressure * 100:.1f}%"
        return text

    def __str__(self) -> str:
        return self.format(pressure=True)

    def to_dict(self) -> dict:
        return {
            "x": self.x,
            "y": self.y,
            "pressure": self.normalized_pressure,
            "pressure_percent": self.pressure_percent,
        }


def _scale(raw: float) -> float:
    return (raw - 0.5) * 2.0 * COP_DISPLAY_RANGE


def compute_center_of_pressure(
    sample: PressureSample | np.ndarray | Sequence[int],
    side: Optional[FootSide] = None,
) -> CenterOfPressure:
    """计算压力加权质心；总压力为 0 时返回中心点 (0, 0)。

    ``side`` 缺省时取样本自身的左右脚，右脚坐标沿 x 镜像。
    """
    points = as_points(sample)
    if side is None:
        side = sample.foot_side if isinstance(sample, PressureSample) else FootSide.UNKNOWN
    weights = points.astype(np.float64)
    total = int(points.sum(dtype=np.int64))
    max_pressure = int(points.max())
    if total == 0:
        return CenterOfPressure(0.0, 0.0, 0, 0)
    coords = coordinates_for(side)
    raw_x = float(weights @ coords[:, 0]) / total
    raw_y = float(weights @ coords[:, 1]) / total
    return CenterOfPressure(_scale(raw_x), _scale(raw_y), total, max_pressure)


__all__ = ["CenterOfPressure", "compute_center_of_pressure"]
