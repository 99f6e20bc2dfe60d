"""解码管线：分帧、校验、解析，并维护最新样本与帧事件的订阅者。"""

from __future__ import annotations

import logging
from typing import Callable, List, Optional, Tuple

from .cop import CenterOfPressure, compute_center_of_pressure
from .frame import FootSide, PressureSample, decode_frame, monotonic_ms, validate_checksum
from .regions import RegionStats, Selector, aggregate
from .scanner import ByteFrameScanner

LOG = logging.getLogger(__name__)

FrameListener = Callable[[PressureSample], None]
ChecksumErrorListener = Callable[[bytes], None]


class SampleStore:
    """单写多读的样本存储，当前与上一帧作为一个整体替换。"""

    def __init__(self) -> None:
        self._state: Tuple[PressureSample, PressureSample] = (PressureSample.empty(), PressureSample.empty())

    def publish(self, sample: PressureSample) -> None:
        self._state = (sample, self._state[0])

    def current(self) -> PressureSample:
        return self._state[0]

    def previous(self) -> PressureSample:
        return self._state[1]


class PressureDecoder:
    """把串口字节块转换为压力样本，并在帧边界同步通知订阅者。"""

    def __init__(
        self,
        *,
        scanner: Optional[ByteFrameScanner] = None,
        store: Optional[SampleStore] = None,
        clock: Callable[[], int] = monotonic_ms,
    ) -> None:
        self.scanner = scanner or ByteFrameScanner()
        self.store = store or SampleStore()
        self._clock = clock
        self._frame_listeners: List[FrameListener] = []
        self._error_listeners: List[ChecksumErrorListener] = []
        self.frames_decoded = 0
        self.checksum_errors = 0

    def on_frame_valid(self, listener: FrameListener) -> Callable[[], None]:
        """注册有效帧回调，返回用于取消注册的函数。"""
        self._frame_listeners.append(listener)
        return lambda: self._remove(self._frame_listeners, listener)

    def on_checksum_error(self, listener: ChecksumErrorListener) -> Callable[[], None]:
        """注册校验失败回调，回调参数为原始帧字节。"""
        self._error_listeners.append(listener)
        return lambda: self._remove(self._error_listeners, listener)

    def feed(self, chunk: bytes | bytearray | memoryview) -> int:
        """处理一段字节，返回其中完整帧的数量（含校验失败的帧）。"""
        frames = self.scanner.feed(chunk)
        for frame in frames:
            self._handle_frame(frame)
        return len(frames)

    def reset(self) -> None:
        self.scanner.reset()

    def _handle_frame(self, frame: bytes) -> None:
        if not validate_checksum(frame):
            self.checksum_errors += 1
            LOG.debug("Checksum mismatch: %s", frame.hex(" "))
            self._notify(self._error_listeners, frame)
            return
        sample = decode_frame(frame, captured_at=self._clock())
        self.store.publish(sample)
        self.frames_decoded += 1
        self._notify(self._frame_listeners, sample)

    def _notify(self, listeners: list, argument: object) -> None:
        for listener in list(listeners):
            try:
                listener(argument)
            except Exception:
                LOG.exception("Frame listener %r failed", listener)

    @staticmethod
    def _remove(listeners: list, listener: Callable) -> None:
        if listener in listeners:
            listeners.remove(listener)

    # 拉取式访问接口

    def latest(self) -> PressureSample:
        return self.store.current()

    def previous(self) -> PressureSample:
        return self.store.previous()

    def point_value(self, index: int) -> int:
        """按 1..18 的点位编号读取最新样本，越界返回 0。"""
        return self.store.current().point(index)

    def foot_side(self) -> FootSide:
        return self.store.current().foot_side

    def is_left_foot(self) -> bool:
        return self.foot_side() is FootSide.LEFT

    def is_right_foot(self) -> bool:
        return self.foot_side() is FootSide.RIGHT

    def center_of_pressure(self) -> CenterOfPressure:
        return compute_center_of_pressure(self.store.current())

    def region_stats(self, selector: Selector) -> RegionStats:
        return aggregate(self.store.current(), selector)
