"""
Transport Interface - byte-stream connections to ESC/POS devices.

This module provides the pieces shared by every transport variant:
- SerialTarget / NetworkTarget: where a device lives
- DeviceProtocol: asyncio.Protocol forwarding connection events upward
- Transport: base class wrapping one asyncio transport
- open_transport: pick the transport variant for a target
"""

import asyncio
from abc import ABC, abstractmethod
from collections.abc import Callable, Mapping
from dataclasses import dataclass
from enum import Enum
from typing import Any, cast

from escpos_io.core.errors import TransportClosedError
from escpos_io.core.logging import get_logger

logger = get_logger()

OpenCallback = Callable[[], None]
DataCallback = Callable[[bytes], None]
CloseCallback = Callable[[Exception | None], None]


class TransportKind(str, Enum):
    SERIAL = "serial"
    STREAM_SOCKET = "stream-socket"

    def __str__(self) -> str:
        """Return the string value of the enum."""
        return self.value


@dataclass(frozen=True)
class SerialTarget:
    """A device attached to a local serial port."""

    path: str
    baud_rate: int = 9600
    bytesize: int = 8
    parity: str = "N"
    stopbits: float = 1

    def __str__(self) -> str:
        return self.path


@dataclass(frozen=True)
class NetworkTarget:
    """A device reachable over TCP (raw port 9100 by default)."""

    host: str
    port: int = 9100

    def __str__(self) -> str:
        return f"{self.host}:{self.port}"


Target = SerialTarget | NetworkTarget


def target_from(value: Any, **options: Any) -> Target:
    """
    Build a target from what a caller typically has at hand.

    Args:
        value: A serial device path, a ``(host, port)`` tuple, a mapping with
            ``host`` and optional ``port`` keys, or a target instance.
        **options: Serial options (baud_rate, bytesize, parity, stopbits),
            only used with a device path.

    Returns:
        A SerialTarget or NetworkTarget.

    Raises:
        ValueError: If the value cannot be turned into a target.
    """
    if isinstance(value, (SerialTarget, NetworkTarget)):
        return value
    if isinstance(value, str):
        return SerialTarget(value, **options)
    if isinstance(value, Mapping):
        if "host" not in value:
            raise ValueError("Network target mapping requires a 'host' key")
        return NetworkTarget(str(value["host"]), int(value.get("port", 9100)))
    if isinstance(value, tuple) and len(value) == 2:
        return NetworkTarget(str(value[0]), int(value[1]))
    raise ValueError(f"Unsupported device target: {value!r}")


class DeviceProtocol(asyncio.Protocol):
    """
    asyncio.Protocol implementation shared by the serial and socket transports.

    Inbound bytes are passed on untouched, one call per received chunk. The
    stream carries no framing, so no buffering or splitting is done here.
    """

    def __init__(
        self,
        on_connected: Callable[[asyncio.BaseTransport], None],
        on_data: DataCallback,
        on_lost: CloseCallback,
    ):
        self._on_connected = on_connected
        self._on_data = on_data
        self._on_lost = on_lost

    def connection_made(self, transport: asyncio.BaseTransport) -> None:
        """Called when the connection is established."""
        self._on_connected(transport)

    def connection_lost(self, exc: Exception | None) -> None:
        """Called when the connection is lost or closed."""
        self._on_lost(exc)

    def data_received(self, data: bytes) -> None:
        """Called when a chunk of bytes arrives from the device."""
        logger.verbose(f"Raw data received: {data!r}")
        self._on_data(data)


class Transport(ABC):
    """
    Base class for device transports.

    A transport owns one connection and reports three things upward through
    the callbacks given at construction: the connection is open, a chunk of
    bytes arrived, the connection went away. Failures while opening are raised
    from open() unchanged and are never retried here.
    """

    kind: TransportKind

    def __init__(
        self,
        on_open: OpenCallback,
        on_data: DataCallback,
        on_close: CloseCallback | None = None,
    ):
        self.on_open = on_open
        self.on_data = on_data
        self.on_close = on_close
        self._transport: asyncio.WriteTransport | None = None

    @property
    def is_open(self) -> bool:
        return self._transport is not None and not self._transport.is_closing()

    async def open(self) -> None:
        """
        Open the underlying connection.

        on_open is called from the event loop once the connection is made.
        """
        loop = asyncio.get_running_loop()
        await self._create_connection(loop, self._protocol_factory)

    @abstractmethod
    async def _create_connection(
        self,
        loop: asyncio.AbstractEventLoop,
        protocol_factory: Callable[[], asyncio.Protocol],
    ) -> None:
        """Create the asyncio connection for this variant."""
        ...

    def write(self, data: bytes) -> None:
        """
        Write bytes to the device.

        Raises:
            TransportClosedError: If the connection is not open.
        """
        if self._transport is None or self._transport.is_closing():
            raise TransportClosedError(f"{self.kind} transport to {self.describe()} is not open")
        self._transport.write(data)

    def close(self) -> None:
        """Close the connection. Safe to call more than once."""
        if self._transport is not None:
            self._transport.close()
            logger.debug(f"{self.kind} transport to {self.describe()} closed")

    @abstractmethod
    def describe(self) -> str:
        """Human readable description of the peer."""
        ...

    def _protocol_factory(self) -> asyncio.Protocol:
        return DeviceProtocol(
            on_connected=self._connection_made,
            on_data=self.on_data,
            on_lost=self._connection_lost,
        )

    def _connection_made(self, transport: asyncio.BaseTransport) -> None:
        self._transport = cast(asyncio.WriteTransport, transport)
        logger.debug(f"{self.kind} connection to {self.describe()} established")
        self.on_open()

    def _connection_lost(self, exc: Exception | None) -> None:
        if exc:
            logger.warning(f"{self.kind} connection to {self.describe()} lost: {exc}")
        else:
            logger.debug(f"{self.kind} connection to {self.describe()} ended")
        self._transport = None
        if self.on_close:
            self.on_close(exc)


def open_transport(
    target: Target,
    on_open: OpenCallback,
    on_data: DataCallback,
    on_close: CloseCallback | None = None,
) -> Transport:
    """
    Create the transport variant matching the target.

    The connection is not opened yet; await ``open()`` on the result.
    """
    # Variants import this module, so they are resolved at call time
    from escpos_io.transport.serial import SerialTransport
    from escpos_io.transport.socket import StreamSocketTransport

    if isinstance(target, SerialTarget):
        return SerialTransport(target, on_open, on_data, on_close)
    if isinstance(target, NetworkTarget):
        return StreamSocketTransport(target, on_open, on_data, on_close)
    raise ValueError(f"Unsupported device target: {target!r}")
