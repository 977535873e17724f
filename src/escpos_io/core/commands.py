"""
ESC/POS control codes and command byte sequences.

All tables in this module are frozen and shared process-wide. Commands are
plain ``bytes`` values; the builders at the bottom produce the few commands
that carry a numeric parameter.
"""

from dataclasses import dataclass
from enum import Enum


@dataclass(frozen=True)
class _ControlCodes:
    NUL: bytes = b"\x00"
    EOT: bytes = b"\x04"
    ENQ: bytes = b"\x05"
    HT: bytes = b"\x09"
    LF: bytes = b"\x0a"
    FF: bytes = b"\x0c"
    CR: bytes = b"\x0d"
    DLE: bytes = b"\x10"
    DC4: bytes = b"\x14"
    CAN: bytes = b"\x18"
    ESC: bytes = b"\x1b"
    FS: bytes = b"\x1c"
    GS: bytes = b"\x1d"


ControlCode = _ControlCodes()

# ESC @ - sent once on every new connection
HW_INIT = b"\x1b\x40"

# Printer line terminator, in the order the device expects it
LINE_END = ControlCode.LF + ControlCode.CR


@dataclass(frozen=True)
class _VfdCommands:
    """Customer display (VFD) command set."""

    move_cursor_right: bytes = b"\x09"
    move_cursor_left: bytes = b"\x08"
    move_cursor_up: bytes = b"\x1f\x0a"
    move_cursor_down: bytes = b"\x0a"
    move_cursor_right_most: bytes = b"\x1f\x0d"
    move_cursor_left_most: bytes = b"\x0d"
    move_cursor_home: bytes = b"\x0b"
    move_cursor_bottom: bytes = b"\x1f\x42"
    cursor_goto: bytes = b"\x1f\x24"  # 1F 24 x y (1 <= x <= 20; 1 <= y <= 2)
    cursor_display: bytes = b"\x1f\x43"  # 1F 43 n (n=0 hide, n=1 show)
    clear_screen: bytes = b"\x0c"
    clear_cursor_line: bytes = b"\x18"
    brightness: bytes = b"\x1f\x58"  # 1F 58 n (1 <= n <= 4)
    blink_display: bytes = b"\x1f\x45"  # 1F 45 n (n*50ms on/off; 0 cancels, 255 turns off)


VFD = _VfdCommands()


@dataclass(frozen=True)
class _PrinterCommands:
    """Receipt printer command set."""

    # Paper cutting
    paper_full_cut: bytes = b"\x1d\x56\x00"
    paper_part_cut: bytes = b"\x1d\x56\x01"
    # Text formatting
    txt_normal: bytes = b"\x1b\x21\x00"
    txt_2height: bytes = b"\x1b\x21\x10"
    txt_2width: bytes = b"\x1b\x21\x20"
    txt_underline_off: bytes = b"\x1b\x2d\x00"
    txt_underline_on: bytes = b"\x1b\x2d\x01"
    txt_underline2_on: bytes = b"\x1b\x2d\x02"
    txt_bold_off: bytes = b"\x1b\x45\x00"
    txt_bold_on: bytes = b"\x1b\x45\x01"
    txt_font_a: bytes = b"\x1b\x4d\x00"
    txt_font_b: bytes = b"\x1b\x4d\x01"
    txt_align_left: bytes = b"\x1b\x61\x00"
    txt_align_center: bytes = b"\x1b\x61\x01"
    txt_align_right: bytes = b"\x1b\x61\x02"
    # DLE EOT real-time status requests
    transmit_printer_status: bytes = b"\x10\x04\x01"
    transmit_offline_status: bytes = b"\x10\x04\x02"
    transmit_error_status: bytes = b"\x10\x04\x03"
    transmit_paper_sensor_status: bytes = b"\x10\x04\x04"
    # Barcode format
    barcode_txt_off: bytes = b"\x1d\x48\x00"
    barcode_txt_above: bytes = b"\x1d\x48\x01"
    barcode_txt_below: bytes = b"\x1d\x48\x02"
    barcode_txt_both: bytes = b"\x1d\x48\x03"
    barcode_font_a: bytes = b"\x1d\x66\x00"
    barcode_font_b: bytes = b"\x1d\x66\x01"
    barcode_height: bytes = b"\x1d\x68\x64"  # 100 dots
    barcode_width: bytes = b"\x1d\x77\x03"
    barcode_upc_a: bytes = b"\x1d\x6b\x00"
    barcode_upc_e: bytes = b"\x1d\x6b\x01"
    barcode_ean13: bytes = b"\x1d\x6b\x02"
    barcode_ean8: bytes = b"\x1d\x6b\x03"
    barcode_code39: bytes = b"\x1d\x6b\x04"
    barcode_itf: bytes = b"\x1d\x6b\x05"
    barcode_nw7: bytes = b"\x1d\x6b\x06"
    barcode_code128: bytes = b"\x1d\x6b\x49"
    barcode_code128_b: bytes = b"\x7b\x42"  # CODE128 character set B
    # Raster image size
    raster_normal: bytes = b"\x1d\x76\x30\x00"
    raster_2width: bytes = b"\x1d\x76\x30\x01"
    raster_2height: bytes = b"\x1d\x76\x30\x02"
    raster_quad: bytes = b"\x1d\x76\x30\x03"


PRINTER = _PrinterCommands()


class StatusRequest(Enum):
    """DLE EOT status request subcommands."""

    PRINTER = _PrinterCommands.transmit_printer_status
    OFFLINE = _PrinterCommands.transmit_offline_status
    ERROR = _PrinterCommands.transmit_error_status
    PAPER_SENSOR = _PrinterCommands.transmit_paper_sensor_status


class PaperStatus(str, Enum):
    """
    Paper roll sensor reply codes, as rendered in hex.

    Match a reply with ``PaperStatus.from_code`` rather than by string
    equality: a single zero byte renders as "00" while the code is "0".
    """
    ERROR = "0"
    OK = "12"
    NO_PAPER = "1e"

    def __str__(self) -> str:
        """Return the string value of the enum."""
        return self.value

    @classmethod
    def from_code(cls, code: str) -> "PaperStatus | None":
        try:
            value = int(code, 16)
        except ValueError:
            return None
        for status in cls:
            if int(status.value, 16) == value:
                return status
        return None


def _check_range(name: str, value: int, low: int, high: int) -> None:
    if not low <= value <= high:
        raise ValueError(f"{name} must be between {low} and {high}, got {value}")


def cursor_display(visible: bool) -> bytes:
    return VFD.cursor_display + bytes([1 if visible else 0])


def cursor_goto(x: int, y: int) -> bytes:
    """Build the VFD cursor positioning command (1-based column and row)."""
    _check_range("column", x, 1, 20)
    _check_range("row", y, 1, 2)
    return VFD.cursor_goto + bytes([x, y])


def brightness(level: int) -> bytes:
    _check_range("brightness", level, 1, 4)
    return VFD.brightness + bytes([level])


def blink(interval: int) -> bytes:
    """Build the VFD blink command; 0 cancels blinking, 255 turns the display off."""
    _check_range("blink interval", interval, 0, 255)
    return VFD.blink_display + bytes([interval])


def barcode_height(dots: int) -> bytes:
    _check_range("barcode height", dots, 1, 255)
    return PRINTER.barcode_height[:2] + bytes([dots])


def barcode_width(module: int) -> bytes:
    _check_range("barcode width", module, 2, 6)
    return PRINTER.barcode_width[:2] + bytes([module])
