"""Exception types raised by escpos-io."""


class EscPosError(Exception):
    """Base class for errors raised by this package."""

    pass


class TransportError(EscPosError):
    """Raised when the device transport cannot be used."""

    pass


class TransportClosedError(TransportError):
    """Raised when writing to a transport that is not open."""

    pass


class StatusRequestPendingError(EscPosError):
    """Raised when a status request is issued while another is still awaiting its reply."""

    pass
