"""Communication helpers exported for external modules."""

from .serial_port import SerialByteSource, SerialCommunicationError, SerialPortProfile

__all__ = [
	"SerialByteSource",
	"SerialCommunicationError",
	"SerialPortProfile",
]
