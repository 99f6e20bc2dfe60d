"""程序入口：启动足底压力模块，订阅事件并输出日志。"""

from __future__ import annotations

import argparse
import logging
import signal
import threading
from pathlib import Path
from typing import Any, Optional, Sequence

from bus.event_bus import EventBus
from bus.topics import Topics
from hardware.footpressure import FootPressureModule
from hardware.footpressure.runtime import load_config, make_data_logger, make_error_logger, make_status_logger
from utils.runtime import setup_basic_logging

FootPressureTopics = Topics.Hardware.FootPressure


def parse_args(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="读取足底压力传感器并计算压力中心")
    parser.add_argument("--config", type=Path, default=None, help="JSON 配置文件路径")
    parser.add_argument("--port", default=None, help="串口设备，覆盖配置文件中的设置")
    parser.add_argument("--duration", type=float, default=None, help="采集时长（秒），缺省时持续运行")
    parser.add_argument("--verbose", action="store_true", help="输出每一帧的调试信息")
    return parser.parse_args(argv)


def main(argv: Optional[Sequence[str]] = None) -> None:
    args = parse_args(argv)
    setup_basic_logging("DEBUG" if args.verbose else "INFO")
    log = logging.getLogger("app")
    config, _ = load_config(args.config)
    overrides: dict[str, Any] = {}
    if args.port:
        overrides["port"] = args.port
    if args.verbose:
        overrides["debug"] = True

    bus = EventBus()
    module = FootPressureModule(bus=bus, config=config)
    module.attach()
    bus.subscribe(FootPressureTopics.STATUS, make_status_logger())
    bus.subscribe(FootPressureTopics.DATA, make_data_logger())
    bus.subscribe(FootPressureTopics.ERROR, make_error_logger())

    done = threading.Event()

    def _shutdown(_: Any = None, __: Any = None) -> None:
        log.info("收到停止信号，准备退出")
        done.set()

    signal.signal(signal.SIGINT, _shutdown)
    if hasattr(signal, "SIGTERM"):
        signal.signal(signal.SIGTERM, _shutdown)

    try:
        module.start(overrides)
        done.wait(args.duration)
    finally:
        module.shutdown()
        bus.unsubscribe_all()


if __name__ == "__main__":
    main()
