"""Tests for shared export utility functions (quizexport/export_utils.py)."""

import unittest

from reportlab.pdfbase.pdfmetrics import stringWidth

from quizexport.export_utils import sanitize_cell, sanitize_filename, strip_control_chars, wrap_words


class TestSanitizeFilename(unittest.TestCase):
    """Tests for sanitize_filename()."""

    def test_basic_cleanup(self):
        assert sanitize_filename("My Quiz!") == "My_Quiz"

    def test_special_characters(self):
        assert sanitize_filename("Test: Quiz #1 (v2)") == "Test_Quiz_1_v2"

    def test_empty_string_uses_default(self):
        assert sanitize_filename("") == "export"
        assert sanitize_filename(None) == "export"

    def test_custom_default(self):
        assert sanitize_filename("", default="quizzes_export") == "quizzes_export"

    def test_max_length_80(self):
        assert len(sanitize_filename("A" * 200)) == 80

    def test_preserves_hyphens_underscores(self):
        assert sanitize_filename("quizzes_me_202601151030-v2") == "quizzes_me_202601151030-v2"

    def test_collapses_and_strips_whitespace(self):
        assert sanitize_filename("  Hello   World  ") == "Hello_World"

    def test_only_special_chars_uses_default(self):
        assert sanitize_filename("!@#$%^&*()", default="quiz") == "quiz"


class TestSanitizeCell(unittest.TestCase):
    """Tests for sanitize_cell()."""

    def test_formula_prefixes_escaped(self):
        for value in ("=SUM(A1)", "+1", "-2", "@cmd", "\tx", "\rx"):
            assert sanitize_cell(value) == "'" + value

    def test_plain_text_unchanged(self):
        assert sanitize_cell("Photosynthesis") == "Photosynthesis"
        assert sanitize_cell("a=b") == "a=b"

    def test_empty_and_non_strings_unchanged(self):
        assert sanitize_cell("") == ""
        assert sanitize_cell(None) is None
        assert sanitize_cell(-5) == -5


class TestStripControlChars(unittest.TestCase):
    """Tests for strip_control_chars()."""

    def test_control_characters_removed(self):
        assert strip_control_chars("Line\x0bbreak") == "Linebreak"
        assert strip_control_chars("\x00a\x1fb\x0c") == "ab"

    def test_whitespace_kept(self):
        assert strip_control_chars("a\tb\nc\rd") == "a\tb\nc\rd"

    def test_non_strings_unchanged(self):
        assert strip_control_chars(None) is None
        assert strip_control_chars(3) == 3


class TestWrapWords(unittest.TestCase):
    """Tests for wrap_words()."""

    @staticmethod
    def _measure(text):
        return stringWidth(text, "Helvetica", 10)

    def test_short_text_single_line(self):
        assert wrap_words("Hello world", 500, self._measure) == ["Hello world"]

    def test_long_text_wraps_within_width(self):
        text = "The quick brown fox jumps over the lazy dog. " * 6
        lines = wrap_words(text, 150, self._measure)
        assert len(lines) > 1
        for line in lines:
            assert self._measure(line) <= 150
        assert " ".join(lines) == " ".join(text.split())

    def test_blank_text_yields_no_lines(self):
        assert wrap_words("", 100, self._measure) == []
        assert wrap_words("   ", 100, self._measure) == []
        assert wrap_words(None, 100, self._measure) == []

    def test_oversized_word_gets_own_line(self):
        lines = wrap_words("a " + "W" * 60 + " b", 50, self._measure)
        assert lines == ["a", "W" * 60, "b"]

    def test_newlines_start_new_lines(self):
        assert wrap_words("first\nsecond", 500, self._measure) == ["first", "second"]

    def test_character_count_measure(self):
        assert wrap_words("aa bb cc dd", 5, len) == ["aa bb", "cc dd"]
