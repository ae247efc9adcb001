from ._base import RequestCapture
from .transports import AsyncCapturingTransport, CapturingTransport, HttpxRequestCapture

__all__ = [
    "RequestCapture",
    "HttpxRequestCapture",
    "CapturingTransport",
    "AsyncCapturingTransport",
]
