"""足底压力模块的核心算法组件。"""

from .cop import CenterOfPressure, compute_center_of_pressure
from .decoder import PressureDecoder, SampleStore
from .field import POINT_COORDINATES, REGION_POINTS, Region, coordinates_for, region_indices
from .frame import (
    FootSide,
    PressureSample,
    build_frame,
    compute_checksum,
    decode_frame,
    validate_checksum,
)
from .processor import ProcessedSample, process_sample
from .regions import (
    IndexRange,
    POINT_GROUPS,
    RegionStats,
    aggregate,
    region_average,
    region_max,
    region_normalized_sum,
    region_sum,
    region_summary,
)
from .scanner import ByteFrameScanner, ScannerState

__all__ = [
    "ByteFrameScanner",
    "CenterOfPressure",
    "FootSide",
    "IndexRange",
    "POINT_COORDINATES",
    "POINT_GROUPS",
    "PressureDecoder",
    "PressureSample",
    "ProcessedSample",
    "REGION_POINTS",
    "Region",
    "RegionStats",
    "SampleStore",
    "ScannerState",
    "aggregate",
    "build_frame",
    "compute_center_of_pressure",
    "compute_checksum",
    "coordinates_for",
    "decode_frame",
    "process_sample",
    "region_average",
    "region_indices",
    "region_max",
    "region_normalized_sum",
    "region_sum",
    "region_summary",
    "validate_checksum",
]
