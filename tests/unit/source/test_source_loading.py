"""Source reading, encoding detection and sanitization."""

from __future__ import annotations

import tempfile
import unittest
from pathlib import Path
from unittest import mock

from previewcode.errors import DecodeFailure, FailureReason, FileUnreadable
from previewcode.source import (
    decode_source,
    detect_encoding,
    leading_lines,
    read_source,
    sanitize_terminal_text,
)


class ReadSourceTests(unittest.TestCase):
    def test_reads_utf8_and_drops_byte_order_mark(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            path = Path(tmp) / "main.swift"
            path.write_bytes("\ufefflet café = 1\n".encode("utf-8"))
            self.assertEqual(read_source(path), "let café = 1\n")

    def test_missing_file_is_unreadable(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            with self.assertRaises(FileUnreadable) as caught:
                read_source(Path(tmp) / "missing.c")
        self.assertIs(caught.exception.reason, FailureReason.FILE_UNREADABLE)

    def test_directory_is_unreadable(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            with self.assertRaises(FileUnreadable):
                read_source(Path(tmp))

    def test_undecodable_bytes_raise_decode_failure(self) -> None:
        with mock.patch("previewcode.source.chardet.detect", return_value={"encoding": "utf-8"}):
            with self.assertRaises(DecodeFailure) as caught:
                decode_source(b"\xff\xfe\xfa broken")
        self.assertIs(caught.exception.reason, FailureReason.DECODE_FAILURE)

    def test_unknown_codec_name_is_decode_failure(self) -> None:
        with mock.patch("previewcode.source.chardet.detect", return_value={"encoding": "no-such-codec"}):
            with self.assertRaises(DecodeFailure):
                decode_source(b"abc")

    def test_empty_and_undetected_input_default_to_utf8(self) -> None:
        self.assertEqual(detect_encoding(b""), "utf-8")
        with mock.patch("previewcode.source.chardet.detect", return_value={"encoding": None}):
            self.assertEqual(detect_encoding(b"\x00\x01"), "utf-8")
        self.assertEqual(decode_source(b""), "")


class LeadingLinesTests(unittest.TestCase):
    def test_keeps_first_lines_newline_terminated(self) -> None:
        self.assertEqual(leading_lines("a\nb\nc\nd", 2), "a\nb\n")
        self.assertEqual(leading_lines("a\nb", 5), "a\nb\n")
        self.assertEqual(leading_lines("anything", 0), "")


class SanitizeTests(unittest.TestCase):
    def test_control_characters_become_visible_escapes(self) -> None:
        self.assertEqual(sanitize_terminal_text("bell\x07 esc\x1b[2J nel\x85"), "bell\\x07 esc\\x1b[2J nel\\x85")

    def test_layout_whitespace_and_plain_text_are_untouched(self) -> None:
        source = "col\tvalue\r\nnext line \u00e9"
        self.assertEqual(sanitize_terminal_text(source), source)


if __name__ == "__main__":
    unittest.main()
