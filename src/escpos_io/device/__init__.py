"""
Device package - ESC/POS device handles and profiles.

This package provides:
- EscPosDevice: Device handle shared by all profiles
- EscPosDisplay: Customer display (VFD) profile
- EscPosPrinter: Receipt printer profile
- StatusQueryProtocol: Correlation of status replies with requests
- OverlapPolicy: Handling of overlapping status requests
"""

from .device import EscPosDevice
from .display import DISPLAY_WIDTH, CursorMove, EscPosDisplay
from .printer import PRINTER_WIDTH, EscPosPrinter
from .status import OverlapPolicy, PendingStatus, StatusQueryProtocol, render_chunk

__all__ = [
    "EscPosDevice",
    "DISPLAY_WIDTH",
    "CursorMove",
    "EscPosDisplay",
    "PRINTER_WIDTH",
    "EscPosPrinter",
    "OverlapPolicy",
    "PendingStatus",
    "StatusQueryProtocol",
    "render_chunk",
]
