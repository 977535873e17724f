"""Tests for line centering and code page encoding."""

import pytest

from escpos_io.core.text import center_text, check_codepage, encode_text


class TestCenterText:
    """Tests for center_text."""

    @pytest.mark.parametrize(
        "text,width",
        [("", 20), ("A", 20), ("Coffee", 20), ("Total 12.50", 40), ("x" * 17, 20)],
    )
    def test_short_text_is_left_padded(self, text, width):
        """Text shorter than width - 2 gets floor((W - L) / 2) leading spaces."""
        result = center_text(text, width)
        pad = (width - len(text)) // 2
        assert len(result) == pad + len(text)
        assert result == " " * pad + text
        assert result.endswith(text)

    @pytest.mark.parametrize("text,width", [("x" * 18, 20), ("x" * 19, 20), ("x" * 25, 20)])
    def test_long_text_is_unchanged(self, text, width):
        """Text of length >= width - 2 is returned as is, not truncated."""
        assert center_text(text, width) == text

    def test_no_right_padding(self):
        assert center_text("abc", 10) == "   abc"


class TestEncodeText:
    """Tests for encode_text."""

    def test_ascii_passthrough(self):
        assert encode_text("Hello 123") == b"Hello 123"

    def test_code_page_characters(self):
        """Characters present in CP437 map to their CP437 bytes."""
        assert encode_text("café") == b"caf\x82"

    def test_accents_outside_code_page_are_transliterated(self):
        assert encode_text("Erdős") == b"Erdos"

    def test_unmappable_characters_are_replaced(self):
        assert encode_text("5€") == b"5?"

    def test_lone_combining_mark_is_dropped(self):
        assert encode_text("a\u0301") == b"a"

    def test_other_code_page(self):
        assert encode_text("€", "cp858") == b"\xd5"

    def test_control_characters_survive(self):
        assert encode_text("A\n\r") == b"A\n\r"


class TestCheckCodepage:
    def test_known_codec(self):
        assert check_codepage("CP437") == "cp437"

    def test_unknown_codec_raises(self):
        with pytest.raises(LookupError):
            check_codepage("no-such-codepage")
