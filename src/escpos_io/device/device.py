"""
ESC/POS Device - one long-lived handle on a printer or customer display.

This module provides the EscPosDevice base class. It owns a transport
(serial or TCP), sends the hardware init command once the connection is up,
encodes outgoing text and re-broadcasts every inbound chunk to the
registered data listeners.

Device profiles (EscPosDisplay, EscPosPrinter) add their command sets on top.
"""

import asyncio
from collections.abc import Callable
from typing import Any

from escpos_io.core.commands import HW_INIT
from escpos_io.core.logging import get_logger, log_recv, log_sent
from escpos_io.core.text import DEFAULT_CODEPAGE, check_codepage, encode_text
from escpos_io.device.status import OverlapPolicy, StatusQueryProtocol
from escpos_io.transport import Target, TransportKind, open_transport, target_from

logger = get_logger()

DataListener = Callable[[bytes], None]


class EscPosDevice:
    """
    Handle on an ESC/POS device reachable over a serial port or TCP.

    Writes are passed to the transport in call order and are fire-and-forget:
    there is no acknowledgement and no way to observe when the device has
    processed them. Inbound bytes are delivered to every listener, in the
    order the listeners were added.
    """

    def __init__(
        self,
        target: Any,
        codepage: str = DEFAULT_CODEPAGE,
        status_overlap: OverlapPolicy | str = OverlapPolicy.REJECT,
        **serial_options: Any,
    ):
        """
        Initialize the device handle. Nothing is opened until open().

        Args:
            target: Serial device path, ``(host, port)`` tuple, mapping with
                ``host``/``port`` keys, or a SerialTarget / NetworkTarget.
            codepage: Python codec name of the device's character table.
            status_overlap: Policy for status requests issued while one is
                still awaiting its reply (see OverlapPolicy).
            **serial_options: baud_rate, bytesize, parity, stopbits
                (serial targets only).

        Raises:
            ValueError: If the target is not understood.
            LookupError: If the code page is unknown.
        """
        self.target: Target = target_from(target, **serial_options)
        self.codepage = check_codepage(codepage)

        self._transport = open_transport(
            self.target,
            on_open=self._handle_open,
            on_data=self._handle_data,
            on_close=self._handle_close,
        )
        self.status_query = StatusQueryProtocol(self, status_overlap)

        self._listeners: list[DataListener] = []
        self._ready_callbacks: list[Callable[[], None]] = []
        self._close_callbacks: list[Callable[[Exception | None], None]] = []
        self._ready_event = asyncio.Event()
        self._closed_event = asyncio.Event()
        self._ready = False
        self._opened = False
        self._closed = False

    @property
    def kind(self) -> TransportKind:
        return self._transport.kind

    @property
    def is_ready(self) -> bool:
        """True once the init command has been sent on an open connection."""
        return self._ready and self._transport.is_open

    @property
    def listeners(self) -> tuple[DataListener, ...]:
        return tuple(self._listeners)

    async def open(self) -> None:
        """
        Open the transport and wait until the device is ready.

        Connection failures are raised unchanged from the transport and are
        not retried.
        """
        if self._opened:
            logger.warning(f"Device {self.target} already opened")
            return

        self._opened = True
        logger.debug(f"Opening {self.kind} device {self.target}")
        try:
            await self._transport.open()
        except Exception:
            self._opened = False
            raise

        await self._ready_event.wait()
        logger.info(f"Device {self.target} ready")

    async def wait_ready(self) -> None:
        await self._ready_event.wait()

    async def wait_closed(self) -> None:
        """
        Wait until the connection has gone away.

        Returns immediately if the device was never opened.
        """
        if self._opened:
            await self._closed_event.wait()

    def on_ready(self, callback: Callable[[], None]) -> None:
        """
        Register a callback for the ready event.

        The event fires once per handle; callbacks registered after it has
        fired are called immediately.
        """
        if self._ready:
            callback()
            return
        self._ready_callbacks.append(callback)

    def on_close(self, callback: Callable[[Exception | None], None]) -> None:
        """Register a callback for when the connection goes away."""
        self._close_callbacks.append(callback)

    def add_listener(self, listener: DataListener) -> None:
        """Receive every inbound chunk until removed."""
        self._listeners.append(listener)

    def remove_listener(self, listener: DataListener) -> None:
        """Remove the first registration of a listener, if present."""
        try:
            self._listeners.remove(listener)
        except ValueError:
            logger.debug(f"Listener {listener!r} was not registered")

    def write(self, data: bytes) -> None:
        """
        Write raw bytes to the device, unmodified.

        Raises:
            TransportClosedError: If the connection is not open.
        """
        data = bytes(data)
        self._transport.write(data)
        log_sent(data, str(self.target))
        logger.verbose(f"Raw data sent: {data!r}")

    def encode(self, text: str) -> bytes:
        return encode_text(text, self.codepage)

    def text(self, text: str) -> None:
        """Encode text to the device code page and write it."""
        self.write(self.encode(text))

    def close(self) -> None:
        """
        Close the device.

        Pending status requests are dropped and all listeners removed before
        the transport is torn down. Writing afterwards raises
        TransportClosedError.
        """
        if self._closed:
            return

        self._closed = True
        self._ready = False
        self.status_query.cancel_all()
        self._listeners.clear()
        self._transport.close()
        logger.info(f"Device {self.target} closed")

    def _handle_open(self) -> None:
        if self._ready:
            logger.warning(f"Device {self.target} reported open twice, ignoring")
            return

        self.write(HW_INIT)
        self._ready = True
        self._ready_event.set()

        callbacks, self._ready_callbacks = self._ready_callbacks, []
        for callback in callbacks:
            callback()

    def _handle_data(self, data: bytes) -> None:
        log_recv(data, str(self.target))

        for listener in list(self._listeners):
            try:
                listener(data)
            except Exception as e:
                logger.error(f"Error in data listener {listener!r}: {e}")

    def _handle_close(self, exc: Exception | None) -> None:
        self._ready = False
        self._closed_event.set()
        self.status_query.cancel_all()
        for callback in list(self._close_callbacks):
            try:
                callback(exc)
            except Exception as e:
                logger.error(f"Error in close callback {callback!r}: {e}")

    async def __aenter__(self) -> "EscPosDevice":
        """Async context manager entry."""
        await self.open()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        """Async context manager exit."""
        self.close()
        await self.wait_closed()
