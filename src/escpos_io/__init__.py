"""escpos-io - ESC/POS receipt printers and customer displays over serial or TCP."""

__version__ = "0.1.0"

from .core import (
    PRINTER,
    VFD,
    ControlCode,
    EscPosError,
    PaperStatus,
    StatusRequest,
    StatusRequestPendingError,
    TransportClosedError,
    TransportError,
    center_text,
    encode_text,
)
from .device import (
    CursorMove,
    EscPosDevice,
    EscPosDisplay,
    EscPosPrinter,
    OverlapPolicy,
)
from .transport import NetworkTarget, SerialTarget

__all__ = [
    "PRINTER",
    "VFD",
    "ControlCode",
    "EscPosError",
    "PaperStatus",
    "StatusRequest",
    "StatusRequestPendingError",
    "TransportClosedError",
    "TransportError",
    "center_text",
    "encode_text",
    "CursorMove",
    "EscPosDevice",
    "EscPosDisplay",
    "EscPosPrinter",
    "OverlapPolicy",
    "NetworkTarget",
    "SerialTarget",
    "__version__",
]
