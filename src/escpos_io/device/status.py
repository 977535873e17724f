"""
Status Query Protocol - correlate DLE EOT replies with their requests.

The inbound byte stream has no framing and no sequence numbers: a reply is
simply the next chunk that arrives after the request was written. This
module keeps the registry of pending requests and decides what happens when
a second request is issued before the first one has been answered.
"""

import base64
from collections import deque
from collections.abc import Callable
from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING

from escpos_io.core.errors import StatusRequestPendingError, TransportError
from escpos_io.core.logging import get_logger

if TYPE_CHECKING:
    from escpos_io.device.device import EscPosDevice

logger = get_logger()

StatusCallback = Callable[[str], None]


class OverlapPolicy(str, Enum):
    """What to do with a status request issued while another one is live."""

    REJECT = "reject"
    """Raise StatusRequestPendingError; nothing is written."""

    QUEUE = "queue"
    """Hold the request and write it once the live one has been answered."""

    RACE = "race"
    """
    Write immediately. The next chunk answers the oldest live request, which
    may be a reply meant for the newer one. Kept for callers that rely on
    the legacy behaviour.
    """

    def __str__(self) -> str:
        """Return the string value of the enum."""
        return self.value


def render_chunk(data: bytes, encoding: str = "hex") -> str:
    """
    Render an inbound chunk as text.

    Args:
        data: The raw bytes.
        encoding: "hex", "base64", or any Python codec name.

    Example:
        >>> render_chunk(b"\\x12")
        '12'
    """
    if encoding == "hex":
        return data.hex()
    if encoding == "base64":
        return base64.b64encode(data).decode("ascii")
    return data.decode(encoding, errors="replace")


def check_encoding(encoding: str) -> None:
    """
    Raise LookupError unless render_chunk() can render with this encoding.

    Bytes-to-bytes codecs such as zlib are rejected as well as unknown names.
    """
    if encoding not in ("hex", "base64"):
        b"".decode(encoding)


@dataclass(eq=False)
class PendingStatus:
    """
    One outstanding status request.

    Attributes:
        command: The request bytes written to the device.
        callback: Called once with the rendered reply.
        encoding: How the reply is rendered before the callback sees it.
        on_cancel: Called instead of the callback if the request is dropped.
    """
    command: bytes
    callback: StatusCallback
    encoding: str = "hex"
    on_cancel: Callable[[], None] | None = None

    def cancel(self) -> None:
        if self.on_cancel:
            self.on_cancel()


class StatusQueryProtocol:
    """
    Registry of pending status requests on one device.

    While at least one request is live, a single listener is attached to the
    device's inbound data; each chunk answers the oldest live request, which
    is removed before its callback runs. Once nothing is pending the listener
    is detached again.
    """

    def __init__(
        self,
        device: "EscPosDevice",
        policy: OverlapPolicy | str = OverlapPolicy.REJECT,
    ):
        self.device = device
        self.policy = OverlapPolicy(policy)
        self._live: list[PendingStatus] = []
        self._waiting: deque[PendingStatus] = deque()
        self._attached = False

    @property
    def pending(self) -> int:
        """Number of requests not yet answered (written or waiting)."""
        return len(self._live) + len(self._waiting)

    @property
    def is_listening(self) -> bool:
        return self._attached

    def request(
        self,
        command: bytes,
        callback: StatusCallback,
        encoding: str = "hex",
        on_cancel: Callable[[], None] | None = None,
    ) -> PendingStatus:
        """
        Write a status request and arrange for the next chunk to answer it.

        Args:
            command: The status request bytes.
            callback: Receives the reply rendered with ``encoding``.
            encoding: "hex" (default), "base64" or a Python codec name.
            on_cancel: Called if the request is dropped before a reply arrives.

        Returns:
            The pending entry, usable with discard().

        Raises:
            StatusRequestPendingError: Under the reject policy, if a request
                is already awaiting its reply.
            LookupError: If the encoding is unknown.
        """
        check_encoding(encoding)
        entry = PendingStatus(command, callback, encoding, on_cancel)

        if self._live:
            if self.policy == OverlapPolicy.REJECT:
                raise StatusRequestPendingError(
                    f"A status request is already awaiting its reply ({self.pending} pending)"
                )
            if self.policy == OverlapPolicy.QUEUE:
                self._waiting.append(entry)
                logger.debug(f"Status request queued behind {self.pending - 1} pending")
                return entry
            logger.warning("Overlapping status request; replies may be misattributed")

        self._send(entry)
        return entry

    def discard(self, entry: PendingStatus) -> None:
        """Forget a request without calling its callback."""
        if entry in self._live:
            self._live.remove(entry)
        elif entry in self._waiting:
            self._waiting.remove(entry)
        self._send_next()
        self._detach_if_idle()

    def cancel_all(self) -> None:
        """Drop every pending request; their callbacks never fire."""
        entries = self._live + list(self._waiting)
        self._live.clear()
        self._waiting.clear()
        self._detach_if_idle()
        if entries:
            logger.debug(f"Cancelled {len(entries)} pending status request(s)")
        for entry in entries:
            entry.cancel()

    def _send(self, entry: PendingStatus) -> None:
        self._live.append(entry)
        self._attach()
        try:
            self.device.write(entry.command)
        except Exception:
            self._live.remove(entry)
            self._detach_if_idle()
            raise
        logger.verbose(f"Status request sent: {entry.command!r}")

    def _send_next(self) -> None:
        if self._live or not self._waiting:
            return
        entry = self._waiting.popleft()
        try:
            self._send(entry)
        except TransportError as e:
            logger.error(f"Failed to send queued status request: {e}")
            entry.cancel()
            self.cancel_all()

    def _on_data(self, data: bytes) -> None:
        if not self._live:
            return

        entry = self._live.pop(0)
        self._detach_if_idle()
        try:
            reply = render_chunk(data, entry.encoding)
            logger.debug(f"Status reply: {reply}")
            entry.callback(reply)
        finally:
            self._send_next()

    def _attach(self) -> None:
        if not self._attached:
            self.device.add_listener(self._on_data)
            self._attached = True

    def _detach_if_idle(self) -> None:
        if self._attached and not self._live and not self._waiting:
            self.device.remove_listener(self._on_data)
            self._attached = False
