import pytest

from hardware.footpressure.core.field import REGION_POINTS, Region
from hardware.footpressure.core.regions import (
    EVEN_POINTS,
    FRONT_THIRD,
    ODD_POINTS,
    POINT_GROUPS,
    IndexRange,
    aggregate,
    region_average,
    region_max,
    region_normalized_sum,
    region_sum,
    region_summary,
    resolve_indices,
)


def _toe_only():
    points = [0] * 18
    for index, value in zip(REGION_POINTS[Region.TOE], (10, 20, 30)):
        points[index] = value
    return points


def test_toe_region_sum_matches_manual_sum():
    points = _toe_only()
    assert region_sum(points, Region.TOE) == 60
    assert region_sum(points, Region.HEEL) == 0
    assert region_max(points, Region.TOE) == 30
    assert region_average(points, Region.TOE) == 20
    assert region_normalized_sum(points, Region.TOE) == pytest.approx(60 / (30 * 3))


def test_regions_partition_all_points():
    covered = sorted(index for indices in REGION_POINTS.values() for index in indices)
    assert covered == list(range(18))


def test_predefined_groups_are_never_empty():
    for region in Region:
        assert len(resolve_indices(region)) >= 2
    for group in POINT_GROUPS.values():
        assert len(group.indices()) >= 2


def test_index_ranges():
    assert FRONT_THIRD.indices() == (0, 1, 2, 3, 4, 5)
    assert ODD_POINTS.indices() == tuple(range(0, 18, 2))
    assert EVEN_POINTS.indices() == tuple(range(1, 18, 2))


def test_index_range_validation():
    with pytest.raises(ValueError):
        IndexRange(0, 18)
    with pytest.raises(ValueError):
        IndexRange(5, 2)
    with pytest.raises(ValueError):
        IndexRange(0, 5, 0)


def test_average_rounds_half_up():
    points = [1, 2] + [0] * 16
    assert region_average(points, [0, 1]) == 2


def test_empty_selection_yields_zero():
    points = list(range(18))
    assert region_average(points, []) == 0
    assert region_max(points, []) == 0
    assert region_normalized_sum(points, []) == 0.0


def test_all_zero_sample_normalizes_to_zero():
    assert region_normalized_sum([0] * 18, Region.HEEL) == 0.0
    assert region_max([0] * 18, Region.HEEL) == 0


def test_string_selectors(sample_points):
    assert region_sum(sample_points, "front") == sum(sample_points[0:6])
    assert region_sum(sample_points, "TOE") == sum(sample_points[0:3])
    with pytest.raises(KeyError):
        resolve_indices("ankle")


def test_explicit_indices_are_bounds_checked():
    with pytest.raises(IndexError):
        resolve_indices([0, 18])


def test_aggregate_and_summary(sample_points):
    stats = aggregate(sample_points, Region.HEEL)
    assert stats.count == 4
    assert stats.sum == sum(sample_points[14:18])
    assert stats.max == 1800
    assert stats.normalized_sum == pytest.approx(stats.sum / (1800 * 4))
    summary = region_summary(sample_points)
    assert set(summary) == {"toe", "forefoot", "midfoot", "arch", "heel"}
    assert sum(item.sum for item in summary.values()) == sum(sample_points)
