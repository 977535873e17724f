"""
Text helpers shared by the display and printer profiles.

center_text pads a line for a fixed-width device; encode_text converts
Unicode text to the device's 8-bit code page.
"""

import codecs
import unicodedata

DEFAULT_CODEPAGE = "cp437"


def center_text(text: str, width: int) -> str:
    """
    Left-pad text so it sits in the middle of a line of the given width.

    Text that is too long (length >= width - 2) is returned unchanged; the
    device wraps or truncates it. No padding is added on the right.

    Example:
        >>> center_text("abc", 10)
        '   abc'
    """
    if len(text) < width - 2:
        return " " * ((width - len(text)) // 2) + text
    return text


def check_codepage(codepage: str) -> str:
    """
    Validate a codec name.

    Raises:
        LookupError: If Python has no codec with that name.
    """
    return codecs.lookup(codepage).name


def encode_text(text: str, codepage: str = DEFAULT_CODEPAGE) -> bytes:
    """
    Encode text for the device, never failing on unmappable characters.

    Characters missing from the code page are decomposed (NFKD) and their
    combining marks dropped, so "ő" becomes "o". What still does not fit is
    replaced with "?".

    Args:
        text: The Unicode text.
        codepage: Python codec name of the device code page.

    Returns:
        The encoded bytes.
    """
    out = bytearray()
    for char in text:
        try:
            out += char.encode(codepage)
            continue
        except UnicodeEncodeError:
            pass

        decomposed = "".join(
            c for c in unicodedata.normalize("NFKD", char) if not unicodedata.combining(c)
        )
        out += decomposed.encode(codepage, errors="replace")
    return bytes(out)
