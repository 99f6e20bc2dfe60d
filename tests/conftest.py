"""测试共用的夹具：事件总线、模拟字节源与可控时钟。"""

from __future__ import annotations

from typing import List

import pytest

from bus.event_bus import EventBus
from hardware.footpressure.core.frame import FootSide, build_frame

SAMPLE_POINTS = [100 * (i + 1) for i in range(18)]


class FakeByteSource:
    """按顺序吐出预先排好的字节块，记录写入的请求指令。"""

    def __init__(self, chunks: List[bytes] | None = None) -> None:
        self.chunks = list(chunks or [])
        self.written: List[bytes] = []
        self.opened = False
        self.closed = False

    def open(self) -> None:
        self.opened = True

    def close(self) -> None:
        self.closed = True

    def read_available(self) -> bytes:
        if not self.chunks:
            return b""
        return self.chunks.pop(0)

    def write(self, payload: bytes) -> None:
        self.written.append(payload)


class FakeClock:
    def __init__(self, start: int = 0) -> None:
        self.now = start

    def __call__(self) -> int:
        return self.now


@pytest.fixture
def left_frame() -> bytes:
    return build_frame(FootSide.LEFT, SAMPLE_POINTS)


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock(1000)


@pytest.fixture
def bus():
    event_bus = EventBus()
    yield event_bus
    event_bus.unsubscribe_all()


@pytest.fixture
def sample_points() -> List[int]:
    return list(SAMPLE_POINTS)
