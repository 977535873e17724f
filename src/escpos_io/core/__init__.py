"""
Core package - Contains core utilities and infrastructure.

This package provides:
- Commands: ESC/POS control codes, command tables and builders
- Text: Line centering and code page encoding
- Errors: Exception types
- Logging: Logging utilities

Config is imported from escpos_io.core.config directly; it depends on the
transport and device packages.
"""

from .commands import (
    HW_INIT,
    LINE_END,
    PRINTER,
    VFD,
    ControlCode,
    PaperStatus,
    StatusRequest,
)
from .errors import (
    EscPosError,
    StatusRequestPendingError,
    TransportClosedError,
    TransportError,
)
from .text import center_text, encode_text

__all__ = [
    "HW_INIT",
    "LINE_END",
    "PRINTER",
    "VFD",
    "ControlCode",
    "PaperStatus",
    "StatusRequest",
    "EscPosError",
    "StatusRequestPendingError",
    "TransportClosedError",
    "TransportError",
    "center_text",
    "encode_text",
]
