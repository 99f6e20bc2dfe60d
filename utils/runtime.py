"""应用运行期的通用辅助工具。"""

from __future__ import annotations

import logging
from typing import Optional, Union


def setup_basic_logging(level: Union[int, str] = logging.INFO, fmt: Optional[str] = None) -> None:
    """配置项目默认的日志输出格式与等级，等级可传入名称如 "DEBUG"。"""

    if isinstance(level, str):
        resolved = logging.getLevelName(level.upper())
        if not isinstance(resolved, int):
            raise ValueError(f"未知的日志等级: {level}")
        level = resolved
    format_string = fmt or "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
    logging.basicConfig(level=level, format=format_string)
