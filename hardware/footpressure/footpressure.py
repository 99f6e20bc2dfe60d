"""足底压力硬件模块的总线适配层，负责指令响应、串口轮询与数据广播。"""

from __future__ import annotations

import logging
import threading
from typing import Any, Callable, Dict, Optional

from bus.event_bus import EventBus, Subscription
from bus.topics import Topics, register_module_topics
from hardware.iHardware import IHardware
from utils.communication.serial_port import SerialByteSource, SerialCommunicationError

from .constants import PAYLOAD_OFFSET
from .config import FootPressureConfig
from .core.cop import CenterOfPressure
from .core.decoder import PressureDecoder
from .core.frame import FootSide, PressureSample, monotonic_ms
from .core.processor import process_sample
from .core.regions import RegionStats, Selector
from .core.scanner import ByteFrameScanner

FootPressureTopics = Topics.Hardware.FootPressure

LOG = logging.getLogger(__name__)

SourceFactory = Callable[[FootPressureConfig], Any]


def _serial_source(config: FootPressureConfig) -> SerialByteSource:
    return SerialByteSource(config.serial.to_profile())


class FootPressureModule(IHardware):
    """实现 IHardware 接口的足底压力模块。

    字节源需要提供 ``open()``、``close()``、``read_available()`` 与 ``write()``。
    ``poll()`` 每次只处理当前已到达的字节，可由内部线程或外部调度器调用。
    """

    topics = {
        "publish": [FootPressureTopics.STATUS, FootPressureTopics.DATA, FootPressureTopics.ERROR],
        "subscribe": [FootPressureTopics.COMMAND],
    }

    def __init__(
        self,
        bus: EventBus,
        config: FootPressureConfig,
        *,
        source_factory: SourceFactory = _serial_source,
        clock: Callable[[], int] = monotonic_ms,
    ) -> None:
        super().__init__(name="footpressure", bus=bus)
        self.config = config
        self._source_factory = source_factory
        self._clock = clock
        self._lock = threading.RLock()
        self._decode_lock = threading.RLock()
        self._subscriptions: list[Subscription] = []
        self._decoder = PressureDecoder(
            scanner=ByteFrameScanner(discard_partial_on_chunk_end=config.discard_partial_on_chunk_end),
            clock=clock,
        )
        self._decoder.on_frame_valid(self._on_frame_valid)
        self._decoder.on_checksum_error(self._on_checksum_error)
        self._source: Any = None
        self._poll_thread: Optional[threading.Thread] = None
        self._stop_event = threading.Event()
        self._connection_timer: Optional[threading.Timer] = None
        self._active_config: Optional[FootPressureConfig] = None
        self._last_request_ms: Optional[int] = None
        self._running = False
        self._frame_counter = 0
        self._debug = config.debug
        self._debug_override: Optional[bool] = None

    @property
    def decoder(self) -> PressureDecoder:
        return self._decoder

    @property
    def running(self) -> bool:
        return self._running

    def attach(self) -> None:
        """注册指令监听并广播就绪状态。"""
        LOG.debug("Attaching foot pressure module to bus")
        sub = self.bus.subscribe(FootPressureTopics.COMMAND, self._on_bus_command)
        self._subscriptions.append(sub)
        self.publish(FootPressureTopics.STATUS, event="ready", payload=None)

    def detach(self) -> None:
        LOG.debug("Detaching foot pressure module from bus")
        self.stop()
        for sub in self._subscriptions:
            sub.unsubscribe()
        self._subscriptions.clear()

    def handle_command(self, action: str, payload: Dict[str, Any] | None = None) -> None:
        payload = payload or {}
        if action == "start":
            self.start(payload)
        elif action == "stop":
            self.stop()
        elif action == "request_data":
            self.request_data()
        elif action == "reset":
            self.reset()
        elif action == "set_debug":
            self.set_debug(bool(payload.get("enabled", True)))
        else:
            LOG.warning("Unknown foot pressure command: %s", action)

    def shutdown(self) -> None:
        self.detach()

    def set_debug(self, enabled: bool) -> None:
        """开启后以 DEBUG 级别输出每一帧的原始字节与解析结果。"""
        self._debug = enabled
        self._debug_override = enabled

    def reset(self) -> None:
        """丢弃未完成的帧；与轮询线程中的解码互斥。"""
        with self._decode_lock:
            self._decoder.reset()

    def start(self, overrides: Dict[str, Any] | None = None, *, background: bool = True) -> None:
        """打开字节源并开始采集；background=False 时由调用方定期执行 poll()。"""
        with self._lock:
            if self._running:
                LOG.info("Foot pressure module already running; ignoring start command")
                return
        effective_config = self.config.merged(overrides or {})
        LOG.info(
            "Starting foot pressure module: port=%s baud=%s interval=%sms",
            effective_config.serial.port,
            effective_config.serial.baud_rate,
            effective_config.sample_interval_ms,
        )
        source = self._source_factory(effective_config)
        try:
            source.open()
        except SerialCommunicationError as exc:
            LOG.error("Failed to open byte source: %s", exc)
            self.publish(FootPressureTopics.STATUS, event="source_error", payload={"message": str(exc)})
            raise
        with self._decode_lock:
            self._decoder.scanner.discard_partial_on_chunk_end = effective_config.discard_partial_on_chunk_end
            self._decoder.reset()
        stop_event = threading.Event()
        with self._lock:
            self._source = source
            self._active_config = effective_config
            self._stop_event = stop_event
            self._last_request_ms = None
            self._frame_counter = 0
            self._running = True
            self.connected = False
            if overrides and "debug" in overrides:
                self._debug_override = None
            if self._debug_override is None:
                self._debug = effective_config.debug
            self._schedule_connection_check(effective_config.connect_timeout)
        self.publish(FootPressureTopics.STATUS, event="starting", payload=self._session_meta(effective_config))
        if background:
            thread = threading.Thread(
                target=self._poll_loop,
                args=(stop_event, effective_config.poll_interval),
                name="FootPressurePoll",
                daemon=True,
            )
            self._poll_thread = thread
            thread.start()

    def stop(self) -> None:
        """停止轮询线程并关闭字节源。"""
        with self._lock:
            if not self._running:
                return
            self._running = False
            self._stop_event.set()
            thread = self._poll_thread
            self._poll_thread = None
            source = self._source
            self._source = None
            self._active_config = None
        LOG.info("Stopping foot pressure module")
        self._cancel_connection_timer()
        if thread is not None and thread is not threading.current_thread():
            thread.join(timeout=1.0)
        if source is not None:
            source.close()
        self.connected = False
        self.publish(FootPressureTopics.STATUS, event="stopped", payload=None)

    def poll(self) -> int:
        """读取一次已到达的字节并送入解码器，返回其中完整帧的数量。"""
        with self._lock:
            if not self._running:
                return 0
            source = self._source
            config = self._active_config
        now = self._clock()
        if self._last_request_ms is None or now - self._last_request_ms >= config.sample_interval_ms:
            self._last_request_ms = now
            self._request(source, config)
        chunk = source.read_available()
        if not chunk:
            return 0
        with self._decode_lock:
            return self._decoder.feed(chunk)

    def request_data(self) -> None:
        """手动请求新数据；未配置请求指令时只记录日志。"""
        with self._lock:
            source = self._source
            config = self._active_config
        if source is None or config is None:
            LOG.warning("Foot pressure module is not running; cannot request data")
            return
        self._request(source, config)

    # 拉取式访问接口

    def latest_sample(self) -> PressureSample:
        return self._decoder.latest()

    def point_value(self, index: int) -> int:
        return self._decoder.point_value(index)

    def foot_side(self) -> FootSide:
        return self._decoder.foot_side()

    def is_left_foot(self) -> bool:
        return self._decoder.is_left_foot()

    def is_right_foot(self) -> bool:
        return self._decoder.is_right_foot()

    def center_of_pressure(self) -> CenterOfPressure:
        return self._decoder.center_of_pressure()

    def region_stats(self, selector: Selector) -> RegionStats:
        return self._decoder.region_stats(selector)

    def _request(self, source: Any, config: FootPressureConfig) -> None:
        command = config.request_command
        if not command:
            LOG.debug("Requesting new data (no request command configured)")
            return
        LOG.debug("Requesting new data: %s", command.hex(" "))
        source.write(command)

    def _poll_loop(self, stop_event: threading.Event, interval: float) -> None:
        """后台线程：按固定间隔轮询字节源，出错时上报并停止。"""
        while not stop_event.is_set():
            try:
                self.poll()
            except SerialCommunicationError as exc:
                LOG.error("Byte source failed: %s", exc)
                self.publish(FootPressureTopics.STATUS, event="source_error", payload={"message": str(exc)})
                self.stop()
                return
            stop_event.wait(interval)

    def _on_bus_command(
        self,
        action: str,
        payload: Dict[str, Any] | None = None,
        overrides: Dict[str, Any] | None = None,
        **_: Any,
    ) -> None:
        """统一整理指令载荷，兼容 payload/overrides 两种字段。"""
        merged: Dict[str, Any] = {}
        if payload:
            merged.update(payload)
        if overrides:
            merged.update(overrides)
        self.handle_command(action, merged)

    def _on_frame_valid(self, sample: PressureSample) -> None:
        with self._lock:
            if not self.connected:
                self.connected = True
                self._cancel_connection_timer()
                became_connected = True
            else:
                became_connected = False
            frame_index = self._frame_counter
            self._frame_counter += 1
        if became_connected:
            self.publish(FootPressureTopics.STATUS, event="connected", payload={"side": sample.foot_side.name.lower()})
        processed = process_sample(sample, frame_index)
        if self._debug:
            self._log_frame(frame_index, sample, processed.cop)
        self.publish(FootPressureTopics.DATA, frame=processed.to_payload())

    def _log_frame(self, frame_index: int, sample: PressureSample, cop: CenterOfPressure) -> None:
        """逐帧调试输出：原始帧十六进制、各点高低字节与压力中心。"""
        LOG.debug("Frame #%d raw: %s", frame_index, sample.hex_dump())
        LOG.debug("Frame #%d side=%s cop=%s", frame_index, sample.foot_side.name.lower(), cop)
        raw = sample.raw
        for number, value in enumerate(sample.points.tolist(), start=1):
            if raw:
                offset = PAYLOAD_OFFSET + (number - 1) * 2
                LOG.debug("  P%-2d %5d (hi=0x%02X lo=0x%02X)", number, value, raw[offset], raw[offset + 1])
            else:
                LOG.debug("  P%-2d %5d", number, value)

    def _on_checksum_error(self, frame: bytes) -> None:
        LOG.warning("Checksum error (%d so far)", self._decoder.checksum_errors)
        self.publish(
            FootPressureTopics.ERROR,
            event="checksum_error",
            payload={"raw": frame.hex(" "), "count": self._decoder.checksum_errors},
        )

    def _schedule_connection_check(self, timeout: float) -> None:
        """设置连接超时定时器，超时未收到有效帧将发出警告。"""
        self._cancel_connection_timer()
        if timeout and timeout > 0:
            self._connection_timer = threading.Timer(timeout, self._connection_timeout)
            self._connection_timer.daemon = True
            self._connection_timer.start()

    def _cancel_connection_timer(self) -> None:
        timer = self._connection_timer
        if timer:
            timer.cancel()
        self._connection_timer = None

    def _connection_timeout(self) -> None:
        with self._lock:
            if self.connected or not self._running:
                return
        LOG.warning("Foot pressure sensor did not deliver a valid frame within timeout")
        self.publish(FootPressureTopics.STATUS, event="connection_timeout", payload=None)

    def _session_meta(self, config: FootPressureConfig) -> Dict[str, Any]:
        return {
            "port": config.serial.port,
            "baud_rate": config.serial.baud_rate,
            "sample_interval_ms": config.sample_interval_ms,
            "poll_interval": config.poll_interval,
            "request_command": config.request_command.hex(" ") if config.request_command else None,
            "connect_timeout": config.connect_timeout,
        }


register_module_topics(
    "footpressure",
    publish={
        FootPressureTopics.STATUS: "足底压力模块生命周期与连接状态事件",
        FootPressureTopics.DATA: "校验通过的压力帧及压力中心、分区统计",
        FootPressureTopics.ERROR: "校验和错误等非致命事件",
    },
    subscribe={
        FootPressureTopics.COMMAND: "控制模块的指令（start/stop/request_data/reset/set_debug）",
    },
)
