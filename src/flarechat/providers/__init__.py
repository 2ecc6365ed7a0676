"""Provider and transport implementations."""

from .base import Provider, Transport
from .mock import MockTransport
from .transport import HttpxTransport

__all__ = [
    "HttpxTransport",
    "MockTransport",
    "Provider",
    "Transport",
]
