"""Rendering pipeline routing and failure normalization.

Uses a scripted highlighter so every engine outcome can be exercised
without depending on a particular grammar set.
"""

from __future__ import annotations

import threading
import unittest
from unittest import mock

from previewcode.config import Preferences
from previewcode.document import DocumentKind, StyledDocument, StyledSpan
from previewcode.errors import HighlighterUnavailable, UnknownLanguageRendered
from previewcode.pipeline import DIAGNOSTIC_COLOR, RenderingPipeline
from previewcode.session import ReadWriteLock, RenderOptions, RenderSession
from previewcode.theme import DisplayMode, ResolvedTheme

BACKGROUNDS = {
    "agate": (0.2, 0.2, 0.2),
    "atom-one-dark": (0.15, 0.17, 0.2),
    "atom-one-light": (0.98, 0.98, 0.98),
    "github": (1.0, 1.0, 1.0),
}


class FakeHighlighter:
    def __init__(self, result: str | None = None, error: Exception | None = None) -> None:
        self.result = result
        self.error = error
        self.languages = ["cpp", "python"]
        self.themes: list[str] = []
        self.fonts: list[tuple[str, float]] = []
        self.registered: dict[str, str] = {}
        self.calls: list[tuple[str, str]] = []
        self.line_spacing = 0.0
        self.foreground_color = "#ffffff"

    @property
    def background_color(self):
        return BACKGROUNDS.get(self.themes[-1] if self.themes else "agate", (0.5, 0.5, 0.5))

    def set_theme(self, name: str) -> None:
        self.themes.append(name)

    def set_code_font(self, font_name: str, font_size: float) -> None:
        self.fonts.append((font_name, font_size))

    def highlight(self, text: str, token: str) -> StyledDocument:
        self.calls.append((text, token))
        if self.error is not None:
            raise self.error
        shown = self.result if self.result is not None else text
        return StyledDocument(spans=(StyledSpan(shown, color="#00ff00"),), language=token)

    def supported_languages(self) -> list[str]:
        return list(self.languages)

    def register_language(self, name: str, grammar_script: str) -> bool:
        self.registered[name] = grammar_script
        return True

    def stylesheet(self) -> str:
        return ".hljs { background: #333333 }"

    def color_for_class(self, css_class: str) -> str | None:
        return "#abcdef" if css_class == "k" else None


def _session(highlighter: FakeHighlighter, **options) -> RenderSession:
    return RenderSession(RenderOptions(**options), ResolvedTheme("agate", True), highlighter)


class RenderingPipelineTests(unittest.TestCase):
    def test_successful_highlight_is_returned_unmodified(self) -> None:
        highlighter = FakeHighlighter()
        pipeline = RenderingPipeline(_session(highlighter))

        document = pipeline.render("int x;\n", "cpp")

        self.assertEqual(highlighter.calls, [("int x;\n", "cpp")])
        self.assertEqual(document.text, "int x;\n")
        self.assertEqual(document.spans[0].color, "#00ff00")
        self.assertFalse(document.is_diagnostic)

    def test_undefined_sentinel_becomes_diagnostic(self) -> None:
        pipeline = RenderingPipeline(_session(FakeHighlighter(result="undefined")))

        document = pipeline.render("fn main() {}", "zig")

        self.assertIs(document.kind, DocumentKind.DIAGNOSTIC)
        self.assertEqual(
            document.text,
            "Could not render source code in (zig): received undefined\nAvailable languages: cpp, python",
        )
        self.assertEqual(document.spans[0].color, DIAGNOSTIC_COLOR)

    def test_engine_exception_payload_is_reported(self) -> None:
        error = UnknownLanguageRendered("no grammar", payload="undefined")
        document = RenderingPipeline(_session(FakeHighlighter(error=error))).render("x", "zig")
        self.assertTrue(document.is_diagnostic)
        self.assertIn("(zig): received undefined", document.text)

    def test_arbitrary_engine_errors_do_not_escape(self) -> None:
        document = RenderingPipeline(_session(FakeHighlighter(error=RuntimeError("boom")))).render("x", "cpp")
        self.assertTrue(document.is_diagnostic)
        self.assertIn("received boom", document.text)

    def test_diagnostic_without_language_list(self) -> None:
        highlighter = FakeHighlighter(result="undefined")
        with mock.patch.object(highlighter, "supported_languages", side_effect=RuntimeError("no list")):
            document = RenderingPipeline(_session(highlighter)).render("x", "zig")
        self.assertEqual(document.text, "Could not render source code in (zig): received undefined")

    def test_empty_payload_is_reported_as_nil(self) -> None:
        pipeline = RenderingPipeline(_session(FakeHighlighter()))
        document = pipeline.diagnostic("cpp", None)
        self.assertTrue(document.text.startswith("Could not render source code in (cpp): received nil"))

    def test_debug_prefix_only_adds_visual_language_line(self) -> None:
        pipeline = RenderingPipeline(_session(FakeHighlighter(), debug=True))

        document = pipeline.render("print(1)\n", "python")

        self.assertEqual(document.spans[0].text, "Language: python\n")
        self.assertEqual(document.spans[0].color, DIAGNOSTIC_COLOR)
        self.assertEqual(document.spans[1:], (StyledSpan("print(1)\n", color="#00ff00"),))

    def test_tabular_tokens_bypass_the_highlighter(self) -> None:
        for token, raw in (("csv-data", "a,b,c\n1,2,3\n"), ("ssv-data", "a;b;c\n1;2;3\n")):
            with self.subTest(token=token):
                highlighter = FakeHighlighter()
                document = RenderingPipeline(_session(highlighter, font_size=14)).render(raw, token)

                self.assertEqual(highlighter.calls, [])
                self.assertIs(document.kind, DocumentKind.TABLE)
                self.assertEqual(document.language, token)
                self.assertEqual(document.font_size, 14)
                self.assertIn(".hljs { background: #333333 }", document.html)
                self.assertEqual([cell.text for cell in document.table.rows[0].cells], ["a", "b", "c"])
                self.assertEqual(document.spans[0].color, "#abcdef")
                self.assertTrue(document.spans[0].bold)

    def test_tabular_shade_uses_session_background(self) -> None:
        document = RenderingPipeline(_session(FakeHighlighter())).render("a\n1\n", "csv-data")
        for channel, expected in zip(document.table.alternate_background, (0.14, 0.14, 0.14)):
            self.assertAlmostEqual(channel, expected)


class RenderSessionTests(unittest.TestCase):
    def test_create_resolves_theme_once_and_configures_highlighter(self) -> None:
        highlighter = FakeHighlighter()
        preferences = Preferences(theme_mode=DisplayMode.LIGHT, font_name="Menlo", font_size=14, line_spacing=1.5)

        session = RenderSession.create(preferences, highlighter_factory=lambda: highlighter)

        self.assertEqual(session.theme, ("atom-one-light", False))
        self.assertEqual(highlighter.themes, ["atom-one-light"])
        self.assertEqual(highlighter.fonts, [("Menlo", 14.0)])
        self.assertEqual(highlighter.line_spacing, 7.0)
        self.assertEqual(session.background_color, BACKGROUNDS["atom-one-light"])
        self.assertIn("cisco", highlighter.registered)
        self.assertIn("class CustomLexer", highlighter.registered["cisco"])

    def test_auto_mode_consults_system_appearance(self) -> None:
        highlighter = FakeHighlighter()
        with mock.patch("previewcode.session.system_is_light", return_value=False) as system_is_light:
            session = RenderSession.create(Preferences(), highlighter_factory=lambda: highlighter)
        system_is_light.assert_called_once_with()
        self.assertEqual(session.theme, ("atom-one-dark", True))

    def test_thumbnail_session_uses_fixed_theme_font_size_and_spacing(self) -> None:
        highlighter = FakeHighlighter()
        preferences = Preferences(theme_mode=DisplayMode.LIGHT, font_size=28, line_spacing=2.0)
        with mock.patch("previewcode.session.system_is_light") as system_is_light:
            session = RenderSession.create(
                preferences,
                is_thumbnail=True,
                highlighter_factory=lambda: highlighter,
                register_grammars=False,
            )
        system_is_light.assert_not_called()
        self.assertEqual(session.theme, ("agate", True))
        self.assertEqual(session.options.font_size, 22.0)
        self.assertEqual(highlighter.line_spacing, 0.0)
        self.assertEqual(highlighter.registered, {})

    def test_update_theme_refreshes_cached_background(self) -> None:
        highlighter = FakeHighlighter()
        session = RenderSession.create(
            Preferences(theme_mode=DisplayMode.DARK),
            highlighter_factory=lambda: highlighter,
            register_grammars=False,
        )
        self.assertEqual(session.background_color, BACKGROUNDS["atom-one-dark"])

        resolved = session.update_theme("light.github")

        self.assertEqual(resolved, ("github", False))
        self.assertEqual(session.snapshot(), (("github", False), BACKGROUNDS["github"]))
        self.assertEqual(highlighter.themes[-1], "github")

    def test_default_options_describe_a_preview(self) -> None:
        options = RenderOptions()
        self.assertFalse(options.is_thumbnail)
        self.assertEqual(options.font_size, 16.0)
        self.assertEqual(options.extra_line_spacing, 0.0)

    def test_damaged_bundled_grammar_means_highlighter_unavailable(self) -> None:
        with mock.patch("previewcode.session.load_grammar_script", side_effect=OSError("grammar missing")):
            with self.assertRaises(HighlighterUnavailable):
                RenderSession.create(Preferences(theme_mode=DisplayMode.DARK), highlighter_factory=FakeHighlighter)


class GatedHighlighter(FakeHighlighter):
    """Pauses inside highlight/stylesheet until released, reporting the theme seen before and after."""

    def __init__(self) -> None:
        super().__init__()
        self.entered = threading.Event()
        self.release = threading.Event()

    def _pause(self) -> str:
        started = self.themes[-1]
        self.entered.set()
        self.release.wait(5)
        return f"{started}|{self.themes[-1]}"

    def highlight(self, text: str, token: str) -> StyledDocument:
        return StyledDocument(spans=(StyledSpan(self._pause()),), language=token)

    def stylesheet(self) -> str:
        return f"/* {self._pause()} */"


class ThemeSwitchDuringRenderTests(unittest.TestCase):
    def _render_while_switching(self, raw: str, token: str):
        highlighter = GatedHighlighter()
        session = RenderSession.create(
            Preferences(theme_mode=DisplayMode.DARK),
            highlighter_factory=lambda: highlighter,
            register_grammars=False,
        )
        pipeline = RenderingPipeline(session)
        results: dict[str, StyledDocument] = {}
        updated = threading.Event()

        def render() -> None:
            results["document"] = pipeline.render(raw, token)

        def switch() -> None:
            session.update_theme("light.github")
            updated.set()

        renderer = threading.Thread(target=render)
        renderer.start()
        self.assertTrue(highlighter.entered.wait(5))
        writer = threading.Thread(target=switch)
        writer.start()

        self.assertFalse(updated.wait(0.2))
        highlighter.release.set()
        renderer.join(5)
        writer.join(5)

        self.assertTrue(updated.is_set())
        self.assertEqual(session.theme, ("github", False))
        return results["document"]

    def test_highlighted_document_uses_one_theme(self) -> None:
        document = self._render_while_switching("let x = 1\n", "swift")
        self.assertEqual(document.text, "atom-one-dark|atom-one-dark")

    def test_table_shade_and_stylesheet_come_from_the_same_theme(self) -> None:
        document = self._render_while_switching("a,b\n1,2\n", "csv-data")

        self.assertIn("/* atom-one-dark|atom-one-dark */", document.html)
        for channel, expected in zip(document.table.alternate_background, (0.09, 0.11, 0.14)):
            self.assertAlmostEqual(channel, expected)

    def test_readers_share_the_lock_and_may_nest(self) -> None:
        lock = ReadWriteLock()
        other_reader_done = threading.Event()

        def read() -> None:
            with lock.reading():
                other_reader_done.set()

        with lock.reading():
            with lock.reading():
                reader = threading.Thread(target=read)
                reader.start()
                self.assertTrue(other_reader_done.wait(5))
                reader.join(5)
        with lock.writing():
            pass


if __name__ == "__main__":
    unittest.main()
