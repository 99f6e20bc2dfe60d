"""足底压力场模型：18 个传感器点位的归一化坐标、左右脚镜像与解剖分区。"""

from __future__ import annotations

from enum import Enum
from types import MappingProxyType
from typing import Mapping, Tuple

import numpy as np

from .frame import FootSide


def _frozen(table: np.ndarray) -> np.ndarray:
    table.flags.writeable = False
    return table


# 左脚点位 (x, y)，x 为横向位置，y 自足跟 0 到足尖 1，按点位 1..18 排列
POINT_COORDINATES = _frozen(
    np.array(
        [
            (0.62, 0.95),  # 1  大脚趾
            (0.42, 0.92),  # 2  二趾
            (0.25, 0.86),  # 3  小趾
            (0.68, 0.78),  # 4  第一跖骨头
            (0.50, 0.76),  # 5  第二、三跖骨头
            (0.30, 0.72),  # 6  第五跖骨头
            (0.66, 0.64),  # 7  前掌内侧
            (0.45, 0.62),  # 8  前掌中部
            (0.26, 0.58),  # 9  前掌外侧
            (0.62, 0.50),  # 10 足弓前部
            (0.40, 0.48),  # 11 中足中部
            (0.24, 0.44),  # 12 中足外侧
            (0.58, 0.36),  # 13 足弓后部
            (0.36, 0.32),  # 14 中足外侧后部
            (0.60, 0.20),  # 15 足跟内侧前部
            (0.38, 0.18),  # 16 足跟外侧前部
            (0.56, 0.08),  # 17 足跟内侧
            (0.40, 0.06),  # 18 足跟外侧
        ],
        dtype=float,
    )
)

_MIRRORED_COORDINATES = _frozen(np.column_stack((1.0 - POINT_COORDINATES[:, 0], POINT_COORDINATES[:, 1])))


def coordinates_for(side: FootSide) -> np.ndarray:
    """右脚返回沿 x 镜像 (x' = 1 - x) 的坐标表，左脚与未知返回原表。"""
    if side is FootSide.RIGHT:
        return _MIRRORED_COORDINATES
    return POINT_COORDINATES


class Region(Enum):
    TOE = "toe"
    FOREFOOT = "forefoot"
    MIDFOOT = "midfoot"
    ARCH = "arch"
    HEEL = "heel"


# 0 基索引
REGION_POINTS: Mapping[Region, Tuple[int, ...]] = MappingProxyType(
    {
        Region.TOE: (0, 1, 2),
        Region.FOREFOOT: (3, 4, 5, 6, 7, 8),
        Region.MIDFOOT: (10, 11, 13),
        Region.ARCH: (9, 12),
        Region.HEEL: (14, 15, 16, 17),
    }
)


def region_indices(region: Region) -> Tuple[int, ...]:
    return REGION_POINTS[region]
