"""
Serial Transport - ESC/POS devices on a local serial port.
"""

import asyncio
from collections.abc import Callable

import serial_asyncio

from escpos_io.transport.interface import (
    CloseCallback,
    DataCallback,
    OpenCallback,
    SerialTarget,
    Transport,
    TransportKind,
)


class SerialTransport(Transport):
    """Transport over a serial port, driven by pyserial-asyncio."""

    kind = TransportKind.SERIAL

    def __init__(
        self,
        target: SerialTarget,
        on_open: OpenCallback,
        on_data: DataCallback,
        on_close: CloseCallback | None = None,
    ):
        super().__init__(on_open, on_data, on_close)
        self.target = target

    def describe(self) -> str:
        return f"{self.target.path} at {self.target.baud_rate} baud"

    async def _create_connection(
        self,
        loop: asyncio.AbstractEventLoop,
        protocol_factory: Callable[[], asyncio.Protocol],
    ) -> None:
        # Raises serial.SerialException if the port cannot be opened
        await serial_asyncio.create_serial_connection(
            loop,
            protocol_factory,
            self.target.path,
            baudrate=self.target.baud_rate,
            bytesize=self.target.bytesize,
            parity=self.target.parity,
            stopbits=self.target.stopbits,
        )
