"""足底压力传感器模块使用的默认常量配置。"""

FRAME_HEADER = 0xAA  # 帧头
FRAME_LENGTH = 39  # 1(帧头) + 1(左右脚) + 36(数据) + 1(校验)
CHECKSUM_SPAN = FRAME_LENGTH - 1  # 参与校验和计算的字节数
POINT_COUNT = 18  # 传感器点位数量
PAYLOAD_OFFSET = 2  # 压力数据在帧内的起始位置
FOOT_TAG_LEFT = 0x01
FOOT_TAG_RIGHT = 0x02
FOOT_TAG_UNKNOWN = 0xFF
COP_DISPLAY_RANGE = 10.0  # 压力中心输出范围 [-10, 10]
DEFAULT_SERIAL_PORT = "/dev/ttyUSB0"
DEFAULT_BAUD_RATE = 115200
DEFAULT_RX_BUFFER_SIZE = 128  # 单次读取的最大字节数
DEFAULT_SAMPLE_INTERVAL_MS = 1000  # 默认采样请求间隔（毫秒）
DEFAULT_POLL_INTERVAL = 0.01  # 轮询串口的间隔（秒）
DEFAULT_CONNECT_TIMEOUT = 3.0  # 启动后等待首个有效帧的超时时间（秒）
