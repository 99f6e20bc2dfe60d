import numpy as np
import pytest

from hardware.footpressure.core.frame import (
    FootSide,
    PressureSample,
    build_frame,
    compute_checksum,
    decode_frame,
    validate_checksum,
)


def test_build_frame_layout(left_frame):
    assert len(left_frame) == 39
    assert left_frame[0] == 0xAA
    assert left_frame[1] == 0x01
    # 点位 1 = 100 -> 0x00 0x64，大端在前
    assert left_frame[2:4] == bytes([0x00, 0x64])
    assert left_frame[38] == sum(left_frame[:38]) % 256


@pytest.mark.parametrize("offset", range(1, 38))
def test_checksum_detects_single_byte_flip(left_frame, offset):
    assert validate_checksum(left_frame)
    corrupted = bytearray(left_frame)
    corrupted[offset] ^= 0x01
    assert not validate_checksum(bytes(corrupted))


def test_checksum_rejects_wrong_length(left_frame):
    assert not validate_checksum(left_frame[:-1])


def test_decode_extracts_side_and_big_endian_points(left_frame, sample_points):
    sample = decode_frame(left_frame, captured_at=42)
    assert sample.foot_side is FootSide.LEFT
    assert sample.points.tolist() == sample_points
    assert sample.captured_at == 42
    assert sample.raw == left_frame
    assert sample.hex_dump().startswith("aa 01 00 64")


def test_decode_high_byte_first():
    points = [0] * 18
    points[17] = 0x1234
    sample = decode_frame(build_frame(FootSide.RIGHT, points), captured_at=0)
    assert sample.foot_side is FootSide.RIGHT
    assert sample.points[17] == 0x1234


@pytest.mark.parametrize("tag", [0x00, 0x03, 0x7F, 0xAA, 0xFF])
def test_unknown_tag_degrades_to_unknown(tag):
    frame = build_frame(tag, [1] * 18)
    assert validate_checksum(frame)
    assert decode_frame(frame, captured_at=0).foot_side is FootSide.UNKNOWN


def test_reencoding_decoded_sample_reproduces_checksum(left_frame):
    sample = decode_frame(left_frame, captured_at=0)
    rebuilt = build_frame(sample.foot_side, sample.points)
    assert rebuilt == left_frame
    assert compute_checksum(rebuilt) == left_frame[38]


def test_sample_points_are_read_only(left_frame):
    sample = decode_frame(left_frame, captured_at=0)
    with pytest.raises(ValueError):
        sample.points[0] = 1


def test_point_lookup_is_one_based():
    sample = PressureSample(FootSide.LEFT, np.arange(1, 19), 0)
    assert sample.point(1) == 1
    assert sample.point(18) == 18
    assert sample.point(0) == 0
    assert sample.point(19) == 0


def test_empty_sample():
    sample = PressureSample.empty()
    assert sample.foot_side is FootSide.UNKNOWN
    assert sample.points.shape == (18,)
    assert sample.total == 0


def test_build_frame_validates_input():
    with pytest.raises(ValueError):
        build_frame(FootSide.LEFT, [0] * 17)
    with pytest.raises(ValueError):
        build_frame(FootSide.LEFT, [70000] + [0] * 17)
