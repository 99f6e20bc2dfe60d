"""字节流分帧器：在不可靠的串口字节流中按帧头同步并收集定长帧。"""

from __future__ import annotations

import logging
from enum import Enum
from typing import List

from ..constants import FRAME_HEADER, FRAME_LENGTH
from .frame import validate_checksum

LOG = logging.getLogger(__name__)


class ScannerState(Enum):
    IDLE = "idle"
    COLLECTING = "collecting"


class ByteFrameScanner:
    """单帧缓冲的同步器，每凑满 39 字节即交出一帧候选数据。

    凑满的帧若校验失败且第 2 字节为 0xAA，视为帧头重复：整体前移一个字节，
    以第二个 0xAA 作为帧头继续收集。校验通过的 0xAA 标识帧照常交出。
    负载内部出现的 0xAA 不做识别，会导致失步直到下一个真正的帧头。
    """

    def __init__(self, *, discard_partial_on_chunk_end: bool = False) -> None:
        self.discard_partial_on_chunk_end = discard_partial_on_chunk_end
        self._buffer = bytearray(FRAME_LENGTH)
        self._offset = 0
        self.skipped_bytes = 0
        self.resyncs = 0
        self.dropped_partials = 0

    @property
    def state(self) -> ScannerState:
        return ScannerState.COLLECTING if self._offset else ScannerState.IDLE

    @property
    def offset(self) -> int:
        """当前帧已收集的字节数。"""
        return self._offset

    def reset(self) -> None:
        """丢弃未完成的帧，回到等待帧头的状态。"""
        self._offset = 0

    def feed(self, chunk: bytes | bytearray | memoryview) -> List[bytes]:
        """处理一段任意长度的字节，返回其中凑满的候选帧（按到达顺序）。"""
        frames: List[bytes] = []
        for byte in bytes(chunk):
            if self._offset == 0:
                if byte == FRAME_HEADER:
                    self._buffer[0] = byte
                    self._offset = 1
                else:
                    self.skipped_bytes += 1
                continue
            self._buffer[self._offset] = byte
            self._offset += 1
            if self._offset < FRAME_LENGTH:
                continue
            if self._buffer[1] == FRAME_HEADER and not validate_checksum(self._buffer):
                # 连续帧头：以后一个为准
                self._buffer[:-1] = self._buffer[1:]
                self._offset = FRAME_LENGTH - 1
                self.resyncs += 1
                continue
            frames.append(bytes(self._buffer))
            self._offset = 0
        if self.discard_partial_on_chunk_end and self._offset:
            LOG.debug("Dropping partial frame of %d bytes at end of chunk", self._offset)
            self.dropped_partials += 1
            self._offset = 0
        return frames
