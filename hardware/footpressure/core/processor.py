"""将压力样本整理为带统计指标的结构化结果，便于在总线上广播。"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict

from .cop import CenterOfPressure, compute_center_of_pressure
from .frame import PressureSample
from .regions import RegionStats, region_summary


@dataclass
class ProcessedSample:
    """单帧样本及其派生指标。"""

    frame_index: int
    sample: PressureSample
    cop: CenterOfPressure
    regions: Dict[str, RegionStats]
    stats: Dict[str, float | int]

    def to_payload(self) -> Dict[str, object]:
        return {
            "frame_index": self.frame_index,
            "timestamp": self.sample.captured_at,
            "side": self.sample.foot_side.name.lower(),
            "points": self.sample.points.tolist(),
            "stats": dict(self.stats),
            "cop": self.cop.to_dict(),
            "regions": {name: stats.to_dict() for name, stats in self.regions.items()},
        }


def process_sample(sample: PressureSample, frame_index: int = 0) -> ProcessedSample:
    """计算总压力、非零点数、压力中心与分区统计。"""
    points = sample.points
    stats: Dict[str, float | int] = {
        "nonzero": int((points > 0).sum()),
        "max": sample.max_pressure,
        "total_pressure": sample.total,
    }
    return ProcessedSample(
        frame_index=frame_index,
        sample=sample,
        cop=compute_center_of_pressure(sample),
        regions=region_summary(sample),
        stats=stats,
    )
