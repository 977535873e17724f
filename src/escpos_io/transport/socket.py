"""
Stream Socket Transport - ESC/POS devices on the network.
"""

import asyncio
import socket
from collections.abc import Callable

from escpos_io.transport.interface import (
    CloseCallback,
    DataCallback,
    NetworkTarget,
    OpenCallback,
    Transport,
    TransportKind,
)


class StreamSocketTransport(Transport):
    """Transport over a TCP connection."""

    kind = TransportKind.STREAM_SOCKET

    def __init__(
        self,
        target: NetworkTarget,
        on_open: OpenCallback,
        on_data: DataCallback,
        on_close: CloseCallback | None = None,
    ):
        super().__init__(on_open, on_data, on_close)
        self.target = target

    def describe(self) -> str:
        return str(self.target)

    async def _create_connection(
        self,
        loop: asyncio.AbstractEventLoop,
        protocol_factory: Callable[[], asyncio.Protocol],
    ) -> None:
        # Raises OSError (e.g. ConnectionRefusedError) if the peer is unreachable
        transport, _ = await loop.create_connection(
            protocol_factory,
            self.target.host,
            self.target.port,
        )
        sock = transport.get_extra_info("socket")
        if sock is not None:
            sock.setsockopt(socket.IPPROTO_TCP, socket.TCP_NODELAY, 1)
