"""CLI entrypoint behaviour.

Verifies dispatch to the preview, HTML, thumbnail and language-report paths
and that render failures exit with their reason code.
"""

from __future__ import annotations

import io
import re
import tempfile
import unittest
from pathlib import Path
from unittest import mock

from PIL import Image

from previewcode import cli
from previewcode.config import Preferences
from previewcode.theme import DisplayMode

ANSI_RE = re.compile(r"\x1b\[[0-9;?]*[ -/]*[@-~]")


class CliTests(unittest.TestCase):
    def setUp(self) -> None:
        patcher = mock.patch("previewcode.cli.load_preferences", return_value=Preferences())
        self.load_preferences = patcher.start()
        self.addCleanup(patcher.stop)

    def test_terminal_preview_prints_highlighted_source(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            target = Path(tmp) / "hello.py"
            target.write_text("print('hi')\x07\n", encoding="utf-8")
            stdout = io.StringIO()
            with mock.patch("sys.stdout", stdout):
                cli.main([str(target), "--mode", "dark"])

        output = stdout.getvalue()
        self.assertIn("\x1b[", output)
        self.assertEqual(ANSI_RE.sub("", output), "print('hi')\\x07\n")

    def test_language_report(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            target = Path(tmp) / "boot.s"
            target.write_text("mov r0, r1\n", encoding="utf-8")
            stdout = io.StringIO()
            with mock.patch("sys.stdout", stdout):
                cli.main([str(target), "--language"])

        self.assertEqual(stdout.getvalue(), "public.assembly-source\tarm\tARM\n")

    def test_html_export_of_csv_table(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            target = Path(tmp) / "data.csv"
            target.write_text("a,b,c\n1,2,3\n", encoding="utf-8")
            out = Path(tmp) / "out.html"
            cli.main([str(target), "--html", str(out), "--theme", "light.github"])
            page = out.read_text(encoding="utf-8")

        self.assertIn('<body class="hljs">', page)
        self.assertIn('<td class="k"><nobr>a</nobr></td>', page)

    def test_thumbnail_is_written_as_png(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            target = Path(tmp) / "main.rs"
            target.write_text("fn main() {}\n", encoding="utf-8")
            out = Path(tmp) / "thumb.png"
            cli.main([str(target), "--thumbnail", str(out), "--size", "128", "--no-tag"])
            with Image.open(out) as image:
                self.assertEqual(image.size, (96, 128))
                self.assertEqual(image.format, "PNG")

    def test_theme_and_mode_override_preferences(self) -> None:
        with mock.patch("previewcode.cli.render_preview") as render_preview, mock.patch("sys.stdout", io.StringIO()):
            render_preview.return_value.document.text = ""
            render_preview.return_value.document.spans = ()
            with tempfile.TemporaryDirectory() as tmp:
                target = Path(tmp) / "x.swift"
                target.write_text("let x = 1\n", encoding="utf-8")
                with mock.patch("previewcode.cli.to_ansi", return_value=""), mock.patch(
                    "previewcode.cli._terminal_safe", side_effect=lambda document: document
                ):
                    cli.main([str(target), "--theme", "dark.monokai", "--mode", "light"])

        preferences = render_preview.call_args.kwargs["preferences"]
        self.assertEqual(preferences.light_theme, "dark.monokai")
        self.assertEqual(preferences.dark_theme, "dark.monokai")
        self.assertIs(preferences.theme_mode, DisplayMode.LIGHT)

    def test_unreadable_file_exits_with_reason_code(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            with self.assertRaises(SystemExit) as caught:
                cli.main([tmp])
        self.assertTrue(str(caught.exception.code).startswith("file-unreadable:"))

    def test_missing_path_exits(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            with self.assertRaises(SystemExit) as caught:
                cli.main([str(Path(tmp) / "missing.c")])
        self.assertIn("Path not found", str(caught.exception.code))

    def test_list_languages_includes_bundled_grammar(self) -> None:
        stdout = io.StringIO()
        with mock.patch("sys.stdout", stdout):
            cli.main(["--list-languages"])
        languages = stdout.getvalue().split()
        self.assertIn("cisco", languages)
        self.assertIn("python", languages)

    def test_positive_int_rejects_zero(self) -> None:
        with mock.patch("sys.stderr", io.StringIO()):
            with self.assertRaises(SystemExit):
                cli.main(["x.py", "--size", "0"])


if __name__ == "__main__":
    unittest.main()
