"""足底压力硬件模块的对外接口，封装总线适配与配置载入。"""

from .config import FootPressureConfig, SerialConfig
from .core.cop import CenterOfPressure
from .core.decoder import PressureDecoder
from .core.frame import FootSide, PressureSample
from .footpressure import FootPressureModule

__all__ = [
	"CenterOfPressure",
	"FootPressureConfig",
	"FootPressureModule",
	"FootSide",
	"PressureDecoder",
	"PressureSample",
	"SerialConfig",
]
