"""Shared fixtures: a fake transport standing in for serial/TCP hardware."""

import asyncio

import pytest

from escpos_io.transport import Transport, TransportKind


class FakeWire:
    """Stands in for the asyncio transport a real connection would hand us."""

    def __init__(self):
        self.writes: list[bytes] = []
        self.closed = False
        self.protocol: asyncio.Protocol | None = None

    def write(self, data: bytes) -> None:
        self.writes.append(bytes(data))

    def is_closing(self) -> bool:
        return self.closed

    def close(self) -> None:
        if self.closed:
            return
        self.closed = True
        # Like asyncio transports, report the loss from the event loop
        if self.protocol is not None:
            asyncio.get_running_loop().call_soon(self.protocol.connection_lost, None)


class FakeTransport(Transport):
    """Transport whose peer is driven by the test."""

    kind = TransportKind.STREAM_SOCKET

    def __init__(self, target, on_open, on_data, on_close=None):
        super().__init__(on_open, on_data, on_close)
        self.target = target
        self.wire = FakeWire()
        self.protocol: asyncio.Protocol | None = None
        self.open_calls = 0

    def describe(self) -> str:
        return "fake"

    async def _create_connection(self, loop, protocol_factory) -> None:
        self.open_calls += 1
        self.protocol = protocol_factory()
        self.wire.protocol = self.protocol
        # Real transports report the connection from the event loop, after returning
        loop.call_soon(self.protocol.connection_made, self.wire)

    def feed(self, data: bytes) -> None:
        """Simulate bytes arriving from the device."""
        assert self.protocol is not None
        self.protocol.data_received(data)

    def drop(self, exc: Exception | None = None) -> None:
        """Simulate the connection going away."""
        assert self.protocol is not None
        self.wire.closed = True
        self.protocol.connection_lost(exc)


@pytest.fixture
def fake_transports(monkeypatch):
    """Make every device built during the test use a FakeTransport."""
    created: list[FakeTransport] = []

    def factory(target, on_open, on_data, on_close=None):
        transport = FakeTransport(target, on_open, on_data, on_close)
        created.append(transport)
        return transport

    monkeypatch.setattr("escpos_io.device.device.open_transport", factory)
    return created
