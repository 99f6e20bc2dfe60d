"""足底压力模块运行期所需的辅助函数。"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Dict, Optional, Tuple

from .config import FootPressureConfig

LOG = logging.getLogger(__name__)


def default_config_path() -> Path:
    return Path(__file__).resolve().parent / "config.json"


def load_config(config_path: Optional[Path] = None) -> Tuple[FootPressureConfig, Path]:
    """读取配置文件，若不存在则返回默认配置；内容非法时抛出异常。"""

    path = (config_path or default_config_path()).resolve()
    if path.exists():
        return FootPressureConfig.from_file(path), path.parent
    LOG.warning("未找到配置文件 %s，使用默认配置", path)
    return FootPressureConfig(), path.parent


def make_status_logger(logger_name: str = "footpressure.status"):
    """生成状态事件的日志处理器。"""

    log = logging.getLogger(logger_name)

    def _handler(event: str, payload: Any = None, **_: Any) -> None:
        log.info("event=%s payload=%s", event, payload)

    return _handler


def make_data_logger(logger_name: str = "footpressure.data"):
    """生成压力帧的日志处理器，输出总压力与压力中心。"""

    log = logging.getLogger(logger_name)

    def _handler(frame: Dict[str, Any] | None = None, **_: Any) -> None:
        if not frame:
            return
        stats = frame.get("stats", {})
        cop = frame.get("cop", {})
        log.info(
            "#%s side=%s total=%s X: %.2f, Y: %.2f, P: %.1f%%",
            frame.get("frame_index"),
            frame.get("side"),
            stats.get("total_pressure", 0),
            cop.get("x", 0.0),
            cop.get("y", 0.0),
            cop.get("pressure", 0.0) * 100,
        )

    return _handler


def make_error_logger(logger_name: str = "footpressure.error"):
    log = logging.getLogger(logger_name)

    def _handler(event: str, payload: Any = None, **_: Any) -> None:
        log.warning("event=%s payload=%s", event, payload)

    return _handler
