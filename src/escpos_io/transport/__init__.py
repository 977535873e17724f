"""
Transport package - byte-stream connections to ESC/POS devices.

This package provides:
- Transport: Base class shared by all transport variants
- SerialTransport: Serial port transport (pyserial-asyncio)
- StreamSocketTransport: TCP transport
- SerialTarget / NetworkTarget: Device addresses
- open_transport: Select the transport variant for a target
"""

from .interface import (
    DeviceProtocol,
    NetworkTarget,
    SerialTarget,
    Target,
    Transport,
    TransportKind,
    open_transport,
    target_from,
)
from .serial import SerialTransport
from .socket import StreamSocketTransport

__all__ = [
    "DeviceProtocol",
    "NetworkTarget",
    "SerialTarget",
    "Target",
    "Transport",
    "TransportKind",
    "open_transport",
    "target_from",
    "SerialTransport",
    "StreamSocketTransport",
]
