"""Tests for the serial and stream socket transports."""

import asyncio
from unittest.mock import AsyncMock, MagicMock, patch

import pytest
import serial

from escpos_io.core.errors import TransportClosedError
from escpos_io.transport import (
    NetworkTarget,
    SerialTarget,
    SerialTransport,
    StreamSocketTransport,
    TransportKind,
    open_transport,
    target_from,
)


class TestTargetFrom:
    """Tests for target_from."""

    def test_path_is_serial(self):
        target = target_from("/dev/ttyUSB0", baud_rate=19200)
        assert target == SerialTarget("/dev/ttyUSB0", baud_rate=19200)

    def test_tuple_is_network(self):
        assert target_from(("192.168.1.50", 9100)) == NetworkTarget("192.168.1.50", 9100)

    def test_mapping_is_network(self):
        assert target_from({"host": "printer.local"}) == NetworkTarget("printer.local", 9100)
        assert target_from({"host": "printer.local", "port": "9101"}).port == 9101

    def test_target_passthrough(self):
        target = NetworkTarget("10.0.0.5")
        assert target_from(target) is target

    def test_mapping_without_host(self):
        with pytest.raises(ValueError, match="host"):
            target_from({"port": 9100})

    def test_unsupported_value(self):
        with pytest.raises(ValueError):
            target_from(42)


class TestOpenTransport:
    def test_selects_variant_by_target(self):
        noop = MagicMock()
        serial_transport = open_transport(SerialTarget("/dev/ttyS0"), noop, noop)
        socket_transport = open_transport(NetworkTarget("localhost"), noop, noop)

        assert isinstance(serial_transport, SerialTransport)
        assert serial_transport.kind == TransportKind.SERIAL
        assert isinstance(socket_transport, StreamSocketTransport)
        assert socket_transport.kind == TransportKind.STREAM_SOCKET

    def test_write_before_open_raises(self):
        transport = open_transport(NetworkTarget("localhost"), MagicMock(), MagicMock())
        assert not transport.is_open
        with pytest.raises(TransportClosedError):
            transport.write(b"\x1b\x40")


class TestSerialTransport:
    """Tests for SerialTransport with pyserial-asyncio mocked out."""

    @pytest.mark.asyncio
    async def test_open_passes_serial_options(self):
        wire = MagicMock()
        wire.is_closing.return_value = False

        async def fake_create(loop, protocol_factory, url, **kwargs):
            protocol = protocol_factory()
            protocol.connection_made(wire)
            return wire, protocol

        on_open = MagicMock()
        on_data = MagicMock()
        transport = SerialTransport(
            SerialTarget("/dev/ttyUSB0", baud_rate=19200, parity="E"), on_open, on_data
        )

        with patch(
            "serial_asyncio.create_serial_connection",
            new=AsyncMock(side_effect=fake_create),
        ) as mock_create:
            await transport.open()

        args, kwargs = mock_create.call_args
        assert args[2] == "/dev/ttyUSB0"
        assert kwargs["baudrate"] == 19200
        assert kwargs["parity"] == "E"
        assert kwargs["bytesize"] == 8
        on_open.assert_called_once_with()
        assert transport.is_open

        transport.write(b"\x1b\x40")
        wire.write.assert_called_once_with(b"\x1b\x40")

    @pytest.mark.asyncio
    async def test_open_failure_propagates(self):
        on_open = MagicMock()
        transport = SerialTransport(SerialTarget("/dev/ttyMISSING"), on_open, MagicMock())

        with patch(
            "serial_asyncio.create_serial_connection",
            new=AsyncMock(side_effect=serial.SerialException("could not open port")),
        ):
            with pytest.raises(serial.SerialException):
                await transport.open()

        on_open.assert_not_called()
        assert not transport.is_open


class TestStreamSocketTransport:
    """Tests for StreamSocketTransport against a local TCP server."""

    @pytest.mark.asyncio
    async def test_round_trip(self):
        server_received: asyncio.Queue[bytes] = asyncio.Queue()

        async def handle(reader, writer):
            server_received.put_nowait(await reader.read(100))
            writer.write(b"\x12")
            await writer.drain()
            await reader.read()
            writer.close()

        server = await asyncio.start_server(handle, "127.0.0.1", 0)
        port = server.sockets[0].getsockname()[1]

        opened = []
        chunks: asyncio.Queue[bytes] = asyncio.Queue()
        closed = asyncio.Event()
        transport = StreamSocketTransport(
            NetworkTarget("127.0.0.1", port),
            on_open=lambda: opened.append(True),
            on_data=chunks.put_nowait,
            on_close=lambda exc: closed.set(),
        )

        try:
            await transport.open()
            assert opened == [True]
            assert transport.is_open

            transport.write(b"\x10\x04\x04")
            assert await asyncio.wait_for(server_received.get(), 2) == b"\x10\x04\x04"
            assert await asyncio.wait_for(chunks.get(), 2) == b"\x12"

            transport.close()
            await asyncio.wait_for(closed.wait(), 2)
            assert not transport.is_open
            with pytest.raises(TransportClosedError):
                transport.write(b"\x00")
        finally:
            transport.close()
            server.close()
            await server.wait_closed()

    @pytest.mark.asyncio
    async def test_connection_refused_propagates(self):
        server = await asyncio.start_server(lambda r, w: None, "127.0.0.1", 0)
        port = server.sockets[0].getsockname()[1]
        server.close()
        await server.wait_closed()

        on_open = MagicMock()
        transport = StreamSocketTransport(NetworkTarget("127.0.0.1", port), on_open, MagicMock())

        with pytest.raises(OSError):
            await transport.open()
        on_open.assert_not_called()
