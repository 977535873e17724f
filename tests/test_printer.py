"""Tests for the receipt printer profile."""

import asyncio
from unittest.mock import MagicMock

import pytest

from escpos_io.core.commands import HW_INIT, PRINTER, PaperStatus, StatusRequest
from escpos_io.core.errors import StatusRequestPendingError, TransportError
from escpos_io.device import EscPosPrinter, OverlapPolicy


@pytest.fixture
def printer(fake_transports):
    return EscPosPrinter(("192.168.1.50", 9100))


def sent(fake_transports) -> list[bytes]:
    """Everything written after the init command."""
    writes = fake_transports[0].wire.writes
    assert writes[0] == HW_INIT
    return writes[1:]


class TestPrinting:
    @pytest.mark.asyncio
    async def test_print_line(self, printer, fake_transports):
        await printer.open()
        printer.print_line("A")
        assert sent(fake_transports) == [b"A\n\r"]

    @pytest.mark.asyncio
    async def test_print_line_encodes_text(self, printer, fake_transports):
        await printer.open()
        printer.print_line("Café")
        assert sent(fake_transports) == [b"Caf\x82\n\r"]

    @pytest.mark.asyncio
    async def test_print_centered_default_width(self, printer, fake_transports):
        await printer.open()
        printer.print_centered("A")
        assert sent(fake_transports) == [b" " * 19 + b"A\n\r"]

    @pytest.mark.asyncio
    async def test_print_centered_custom_width(self, printer, fake_transports):
        await printer.open()
        printer.print_centered("Total", 32)
        printer.print_centered("x" * 31, 32)
        assert sent(fake_transports) == [b" " * 13 + b"Total\n\r", b"x" * 31 + b"\n\r"]

    @pytest.mark.asyncio
    async def test_print_command_is_raw(self, printer, fake_transports):
        await printer.open()
        printer.print_command(PRINTER.txt_bold_on)
        printer.print_command(b"\xff\x00")
        assert sent(fake_transports) == [b"\x1b\x45\x01", b"\xff\x00"]

    @pytest.mark.asyncio
    async def test_cut(self, printer, fake_transports):
        await printer.open()
        printer.cut()
        printer.cut(partial=True)
        assert sent(fake_transports) == [PRINTER.paper_full_cut, PRINTER.paper_part_cut]


class TestPaperStatus:
    """Tests for the paper status query."""

    @pytest.mark.asyncio
    async def test_get_paper_status(self, printer, fake_transports):
        await printer.open()
        callback = MagicMock()

        printer.get_paper_status(callback)
        assert sent(fake_transports) == [b"\x10\x04\x04"]

        fake_transports[0].feed(b"\x12")
        fake_transports[0].feed(b"\x1e")

        callback.assert_called_once_with("12")
        assert PaperStatus.from_code(callback.call_args.args[0]) is PaperStatus.OK
        assert printer.listeners == ()

    @pytest.mark.asyncio
    async def test_get_status_with_encoding(self, printer, fake_transports):
        await printer.open()
        callback = MagicMock()

        printer.get_status(StatusRequest.ERROR, callback, encoding="base64")
        fake_transports[0].feed(b"\x12")

        assert sent(fake_transports) == [b"\x10\x04\x03"]
        callback.assert_called_once_with("Eg==")

    @pytest.mark.asyncio
    async def test_overlap_rejected_by_default(self, printer, fake_transports):
        await printer.open()
        printer.get_paper_status(MagicMock())

        with pytest.raises(StatusRequestPendingError):
            printer.get_paper_status(MagicMock())

    @pytest.mark.asyncio
    async def test_overlap_race_when_configured(self, fake_transports):
        printer = EscPosPrinter("/dev/ttyUSB0", status_overlap=OverlapPolicy.RACE)
        await printer.open()
        first, second = MagicMock(), MagicMock()

        printer.get_paper_status(first)
        printer.get_paper_status(second)
        fake_transports[0].feed(b"\x1e")

        first.assert_called_once_with("1e")
        second.assert_not_called()
        assert len(printer.listeners) == 1

    @pytest.mark.asyncio
    async def test_awaitable_paper_status(self, printer, fake_transports):
        await printer.open()

        task = asyncio.create_task(printer.paper_status())
        await asyncio.sleep(0)
        fake_transports[0].feed(b"\x1e")

        assert await asyncio.wait_for(task, 1) == "1e"
        assert printer.status_query.pending == 0

    @pytest.mark.asyncio
    async def test_awaitable_status_timeout_forgets_request(self, printer, fake_transports):
        await printer.open()

        with pytest.raises(asyncio.TimeoutError):
            await asyncio.wait_for(printer.status(StatusRequest.PRINTER), 0.05)

        assert printer.status_query.pending == 0
        assert printer.listeners == ()

    @pytest.mark.asyncio
    async def test_close_fails_pending_status(self, fake_transports):
        printer = EscPosPrinter("/dev/ttyUSB0", status_overlap="queue")
        await printer.open()
        callback = MagicMock()
        printer.get_paper_status(callback)
        task = asyncio.create_task(printer.status(StatusRequest.OFFLINE))
        await asyncio.sleep(0)

        printer.close()

        with pytest.raises(TransportError):
            await task
        assert not task.cancelled()
        callback.assert_not_called()
        assert printer.status_query.pending == 0

    @pytest.mark.asyncio
    async def test_connection_loss_fails_pending_status(self, printer, fake_transports):
        await printer.open()
        task = asyncio.create_task(printer.paper_status())
        await asyncio.sleep(0)

        fake_transports[0].drop(ConnectionResetError("peer went away"))

        with pytest.raises(TransportError):
            await task
        assert not task.cancelled()
        assert printer.status_query.pending == 0

    @pytest.mark.asyncio
    async def test_non_text_codec_rejected(self, printer, fake_transports):
        await printer.open()

        with pytest.raises(LookupError):
            await printer.paper_status("zlib")

        assert sent(fake_transports) == []
        assert printer.status_query.pending == 0
