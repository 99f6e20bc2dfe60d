import pytest

from hardware.footpressure.core.decoder import PressureDecoder, SampleStore
from hardware.footpressure.core.field import Region
from hardware.footpressure.core.frame import FootSide, PressureSample, build_frame
from hardware.footpressure.core.scanner import ByteFrameScanner


@pytest.fixture
def decoder(clock):
    return PressureDecoder(clock=clock)


@pytest.fixture
def events(decoder):
    recorded = {"valid": [], "errors": []}
    decoder.on_frame_valid(recorded["valid"].append)
    decoder.on_checksum_error(recorded["errors"].append)
    return recorded


def test_valid_frame_publishes_one_sample(decoder, events, left_frame, sample_points):
    assert decoder.feed(left_frame) == 1
    assert len(events["valid"]) == 1
    assert events["errors"] == []
    sample = events["valid"][0]
    assert sample.foot_side is FootSide.LEFT
    assert sample.points.tolist() == sample_points
    assert sample.captured_at == 1000
    assert decoder.latest() is sample
    assert decoder.frames_decoded == 1


def test_corrupted_frame_reports_error_and_keeps_sample(decoder, events, left_frame):
    decoder.feed(left_frame)
    before = decoder.latest()
    corrupted = bytearray(build_frame(FootSide.RIGHT, [7] * 18))
    corrupted[5] ^= 0xFF
    assert decoder.feed(bytes(corrupted)) == 1
    assert len(events["errors"]) == 1
    assert events["errors"][0] == bytes(corrupted)
    assert len(events["valid"]) == 1
    assert decoder.latest() is before
    assert decoder.checksum_errors == 1


def test_double_header_resyncs_to_real_frame(decoder, events, left_frame):
    decoder.feed(b"\xaa\xaa" + left_frame)
    assert len(events["valid"]) == 1
    assert events["errors"] == []


def test_checksum_valid_frame_tagged_with_header_byte_is_kept(decoder, events, left_frame):
    tagged = build_frame(0xAA, [1] * 18)
    assert decoder.feed(tagged + left_frame + left_frame) == 3
    assert events["errors"] == []
    assert [sample.foot_side for sample in events["valid"]] == [
        FootSide.UNKNOWN,
        FootSide.LEFT,
        FootSide.LEFT,
    ]


@pytest.mark.parametrize("offset", range(1, 38))
def test_any_single_byte_flip_gives_one_error(decoder, events, left_frame, offset):
    corrupted = bytearray(left_frame)
    corrupted[offset] ^= 0xFF
    decoder.feed(bytes(corrupted) + left_frame)
    assert events["errors"] == [bytes(corrupted)]
    assert len(events["valid"]) == 1


def test_starved_input_is_noop(decoder, events):
    assert decoder.feed(b"") == 0
    assert events == {"valid": [], "errors": []}
    assert decoder.latest().foot_side is FootSide.UNKNOWN


def test_point_accessors_follow_latest_sample(decoder, left_frame, sample_points):
    assert decoder.point_value(1) == 0
    decoder.feed(left_frame)
    for index in range(1, 19):
        assert decoder.point_value(index) == sample_points[index - 1]
    assert decoder.point_value(0) == 0
    assert decoder.point_value(19) == 0
    assert decoder.is_left_foot()
    assert not decoder.is_right_foot()


def test_previous_sample_is_retained(decoder, left_frame):
    decoder.feed(left_frame)
    first = decoder.latest()
    decoder.feed(build_frame(FootSide.RIGHT, [1] * 18))
    assert decoder.previous() is first
    assert decoder.is_right_foot()


def test_listener_errors_do_not_escape_feed(decoder, left_frame):
    received = []

    def broken(_sample):
        raise RuntimeError("boom")

    decoder.on_frame_valid(broken)
    decoder.on_frame_valid(received.append)
    assert decoder.feed(left_frame) == 1
    assert len(received) == 1


def test_unsubscribe_handle(decoder, left_frame):
    received = []
    remove = decoder.on_frame_valid(received.append)
    remove()
    decoder.feed(left_frame)
    assert received == []


def test_derived_metrics_use_latest_sample(decoder):
    points = [0] * 18
    points[0] = 500
    decoder.feed(build_frame(FootSide.RIGHT, points))
    cop = decoder.center_of_pressure()
    assert cop.x == pytest.approx(-2.4)
    assert decoder.region_stats(Region.TOE).sum == 500


def test_partial_frame_dropped_when_configured(clock, left_frame):
    decoder = PressureDecoder(scanner=ByteFrameScanner(discard_partial_on_chunk_end=True), clock=clock)
    assert decoder.feed(left_frame[:30]) == 0
    assert decoder.feed(left_frame[30:]) == 0
    assert decoder.frames_decoded == 0


def test_sample_store_swaps_current_and_previous():
    store = SampleStore()
    first = PressureSample(FootSide.LEFT, [1] * 18, 1)
    second = PressureSample(FootSide.RIGHT, [2] * 18, 2)
    store.publish(first)
    store.publish(second)
    assert store.current() is second
    assert store.previous() is first
