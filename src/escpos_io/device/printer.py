"""
ESC/POS receipt printer profile.

Line printing, raw command passthrough and the DLE EOT status queries.
"""

import asyncio

from escpos_io.core.commands import LINE_END, PRINTER, StatusRequest
from escpos_io.core.errors import TransportError
from escpos_io.core.logging import get_logger
from escpos_io.core.text import center_text
from escpos_io.device.device import EscPosDevice
from escpos_io.device.status import PendingStatus, StatusCallback

logger = get_logger()

PRINTER_WIDTH = 40  # default columns for centered printing


class EscPosPrinter(EscPosDevice):
    """
    Receipt printer.

    Status replies arrive on the same unframed stream as everything else.
    Do not write anything else to the printer between a status request and
    its reply, or the reply may be attributed to the wrong request.
    """

    def print_line(self, text: str) -> None:
        """Print text followed by LF CR."""
        self.write(self.encode(text) + LINE_END)

    def print_centered(self, text: str, width: int = PRINTER_WIDTH) -> None:
        self.print_line(center_text(text, width))

    def print_command(self, command: bytes) -> None:
        """
        Write a raw command, e.g. one of the PRINTER table entries.

        The bytes are not checked; the caller is responsible for sending a
        valid ESC/POS sequence.
        """
        self.write(command)

    def cut(self, partial: bool = False) -> None:
        self.write(PRINTER.paper_part_cut if partial else PRINTER.paper_full_cut)

    def get_status(
        self,
        request: StatusRequest,
        callback: StatusCallback,
        encoding: str = "hex",
    ) -> PendingStatus:
        """
        Send a DLE EOT status request; callback receives the next inbound chunk.

        Args:
            request: Which status to ask for.
            callback: Called once with the reply rendered in ``encoding``.
            encoding: "hex" (default), "base64" or a Python codec name.

        Raises:
            StatusRequestPendingError: If another request is awaiting its
                reply and the device uses the reject policy.
        """
        return self.status_query.request(request.value, callback, encoding)

    def get_paper_status(self, callback: StatusCallback, encoding: str = "hex") -> PendingStatus:
        """
        Ask for the paper roll sensor status.

        Match the reply against PaperStatus, e.g. ``PaperStatus.from_code(reply)``.
        """
        return self.get_status(StatusRequest.PAPER_SENSOR, callback, encoding)

    async def status(self, request: StatusRequest, encoding: str = "hex") -> str:
        """
        Awaitable form of get_status().

        Cancelling the await forgets the request.

        Raises:
            TransportError: If the device is closed or the connection is
                lost before the reply arrives.
        """
        future: asyncio.Future[str] = asyncio.get_running_loop().create_future()

        def resolve(reply: str) -> None:
            if not future.done():
                future.set_result(reply)

        def abandon() -> None:
            if not future.done():
                future.set_exception(
                    TransportError(f"Connection to {self.target} closed before status reply")
                )

        entry = self.status_query.request(
            request.value, resolve, encoding, on_cancel=abandon
        )
        try:
            return await future
        except asyncio.CancelledError:
            self.status_query.discard(entry)
            raise

    async def paper_status(self, encoding: str = "hex") -> str:
        return await self.status(StatusRequest.PAPER_SENSOR, encoding)
