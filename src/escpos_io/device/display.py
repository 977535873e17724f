"""
ESC/POS customer display (VFD) profile.
"""

from enum import Enum

from escpos_io.core import commands
from escpos_io.core.commands import VFD
from escpos_io.core.text import center_text
from escpos_io.device.device import EscPosDevice

DISPLAY_WIDTH = 20  # columns per display line


class CursorMove(Enum):
    RIGHT = VFD.move_cursor_right
    LEFT = VFD.move_cursor_left
    UP = VFD.move_cursor_up
    DOWN = VFD.move_cursor_down
    RIGHT_MOST = VFD.move_cursor_right_most
    LEFT_MOST = VFD.move_cursor_left_most
    HOME = VFD.move_cursor_home
    BOTTOM = VFD.move_cursor_bottom


class EscPosDisplay(EscPosDevice):
    """
    Two-line vacuum fluorescent customer display.

    Line operations always reposition the cursor first, so each call stands
    on its own regardless of where the cursor was left.
    """

    def show_cursor(self, visible: bool) -> None:
        self.write(commands.cursor_display(visible))

    def centered_top_line(self, text: str) -> None:
        """Replace the top line with text centered on the display."""
        self._centered_line(VFD.move_cursor_home, text)

    def centered_bottom_line(self, text: str) -> None:
        """Replace the bottom line with text centered on the display."""
        self._centered_line(VFD.move_cursor_bottom, text)

    def clear(self) -> None:
        self.write(VFD.clear_screen)

    def clear_line(self) -> None:
        """Clear the line the cursor is on."""
        self.write(VFD.clear_cursor_line)

    def move_cursor(self, move: CursorMove) -> None:
        self.write(move.value)

    def goto(self, column: int, row: int) -> None:
        self.write(commands.cursor_goto(column, row))

    def set_brightness(self, level: int) -> None:
        self.write(commands.brightness(level))

    def blink(self, interval: int) -> None:
        """Blink the display every interval * 50ms; 0 stops blinking."""
        self.write(commands.blink(interval))

    def _centered_line(self, position: bytes, text: str) -> None:
        self.write(position)
        self.write(VFD.clear_cursor_line)
        self.text(center_text(text, DISPLAY_WIDTH))
