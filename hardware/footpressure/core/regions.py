"""按区域或索引区间对 18 个压力点做求和、均值、最大值等统计。"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Dict, Sequence, Tuple, Union

import numpy as np

from ..constants import POINT_COUNT
from .field import REGION_POINTS, Region
from .frame import PressureSample, as_points


@dataclass(frozen=True)
class IndexRange:
    """0 基、闭区间的索引描述，例如前 1/3 为 IndexRange(0, 5)。"""

    start: int
    end: int
    step: int = 1

    def __post_init__(self) -> None:
        if self.step < 1:
            raise ValueError(f"步长必须为正数: {self.step}")
        if not 0 <= self.start <= self.end < POINT_COUNT:
            raise ValueError(f"索引区间越界: {self.start}..{self.end}")

    def indices(self) -> Tuple[int, ...]:
        return tuple(range(self.start, self.end + 1, self.step))


FRONT_THIRD = IndexRange(0, 5)
MIDDLE_THIRD = IndexRange(6, 11)
HEEL_THIRD = IndexRange(12, 17)
ODD_POINTS = IndexRange(0, POINT_COUNT - 1, 2)  # 点位 1, 3, ..., 17
EVEN_POINTS = IndexRange(1, POINT_COUNT - 1, 2)  # 点位 2, 4, ..., 18
ALL_POINTS = IndexRange(0, POINT_COUNT - 1)

POINT_GROUPS: Dict[str, IndexRange] = {
    "front": FRONT_THIRD,
    "middle": MIDDLE_THIRD,
    "rear": HEEL_THIRD,
    "odd": ODD_POINTS,
    "even": EVEN_POINTS,
    "all": ALL_POINTS,
}

Selector = Union[Region, IndexRange, str, Sequence[int]]


def resolve_indices(selector: Selector) -> Tuple[int, ...]:
    """把区域、区间、分组名或显式索引序列统一解析为索引元组。"""
    if isinstance(selector, Region):
        return REGION_POINTS[selector]
    if isinstance(selector, IndexRange):
        return selector.indices()
    if isinstance(selector, str):
        name = selector.lower()
        if name in POINT_GROUPS:
            return POINT_GROUPS[name].indices()
        try:
            return REGION_POINTS[Region(name)]
        except ValueError:
            raise KeyError(f"未知的点位分组: {selector}") from None
    indices = tuple(int(index) for index in selector)
    for index in indices:
        if not 0 <= index < POINT_COUNT:
            raise IndexError(f"点位索引越界: {index}")
    return indices


def _selected(points: np.ndarray, selector: Selector) -> np.ndarray:
    return points[list(resolve_indices(selector))].astype(np.int64)


def region_sum(sample: PressureSample | np.ndarray | Sequence[int], selector: Selector) -> int:
    return int(_selected(as_points(sample), selector).sum())


def region_average(sample: PressureSample | np.ndarray | Sequence[int], selector: Selector) -> int:
    """四舍五入到整数的均值，空集合返回 0。"""
    values = _selected(as_points(sample), selector)
    if values.size == 0:
        return 0
    return int(math.floor(values.sum() / values.size + 0.5))


def region_max(sample: PressureSample | np.ndarray | Sequence[int], selector: Selector) -> int:
    values = _selected(as_points(sample), selector)
    if values.size == 0:
        return 0
    return int(values.max())


def region_normalized_sum(sample: PressureSample | np.ndarray | Sequence[int], selector: Selector) -> float:
    """区域总和除以 (全局最大值 * 区域点数)，全局最大值为 0 时返回 0。"""
    points = as_points(sample)
    values = _selected(points, selector)
    overall_max = int(points.max())
    if overall_max == 0 or values.size == 0:
        return 0.0
    return float(values.sum()) / (overall_max * values.size)


@dataclass(frozen=True)
class RegionStats:
    count: int
    sum: int
    average: int
    max: int
    normalized_sum: float

    def to_dict(self) -> dict:
        return {
            "count": self.count,
            "sum": self.sum,
            "average": self.average,
            "max": self.max,
            "normalized_sum": self.normalized_sum,
        }


def aggregate(sample: PressureSample | np.ndarray | Sequence[int], selector: Selector) -> RegionStats:
    """一次性计算某个区域的全部统计量。"""
    points = as_points(sample)
    return RegionStats(
        count=len(resolve_indices(selector)),
        sum=region_sum(points, selector),
        average=region_average(points, selector),
        max=region_max(points, selector),
        normalized_sum=region_normalized_sum(points, selector),
    )


def region_summary(sample: PressureSample | np.ndarray | Sequence[int]) -> Dict[str, RegionStats]:
    """按解剖分区（足趾、前掌、中足、足弓、足跟）汇总当前样本。"""
    points = as_points(sample)
    return {region.value: aggregate(points, region) for region in Region}


__all__ = [
    "ALL_POINTS",
    "EVEN_POINTS",
    "FRONT_THIRD",
    "HEEL_THIRD",
    "IndexRange",
    "MIDDLE_THIRD",
    "ODD_POINTS",
    "POINT_GROUPS",
    "RegionStats",
    "Selector",
    "aggregate",
    "region_average",
    "region_max",
    "region_normalized_sum",
    "region_summary",
    "region_sum",
    "resolve_indices",
]
