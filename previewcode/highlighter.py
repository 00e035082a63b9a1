"""Highlighting engine binding.

``Highlighter`` is the capability surface the pipeline depends on.
``PygmentsHighlighter`` implements it on top of Pygments, speaking the
highlight.js vocabulary used by type resolution and stored theme names.
"""

from __future__ import annotations

import logging
import tempfile
from pathlib import Path
from typing import Protocol

from .colors import RGB, parse_hex_color, relative_luminance, to_hex
from .constants import BASE_PREVIEW_FONT_SIZE, DEFAULT_FONT, UNDEFINED_SENTINEL
from .document import DocumentKind, StyledDocument, StyledSpan, merge_spans
from .errors import HighlighterUnavailable, UnknownLanguageRendered

logger = logging.getLogger(__name__)

FALLBACK_STYLE = "monokai"

# highlight.js theme names without a same-named Pygments style.
STYLE_ALIASES: dict[str, str] = {
    "agate": "monokai",
    "a11y-dark": "monokai",
    "a11y-light": "default",
    "an-old-hope": "fruity",
    "androidstudio": "native",
    "atom-one-dark": "one-dark",
    "atom-one-light": "xcode",
    "github": "default",
    "stackoverflow-dark": "native",
    "stackoverflow-light": "friendly",
    "tokyo-night-dark": "one-dark",
    "vs2015": "native",
}

# highlight.js language tokens that Pygments spells differently.
LEXER_ALIASES: dict[str, str] = {
    "arm": "gas",
    "x86asm": "nasm",
    "plaintext": "text",
}

_LEXER_OPTIONS = {"stripnl": False, "ensurenl": False}


class Highlighter(Protocol):
    """Capability interface of an external highlighting engine."""

    line_spacing: float

    @property
    def background_color(self) -> RGB: ...

    @property
    def foreground_color(self) -> str: ...

    def set_theme(self, name: str) -> None: ...

    def set_code_font(self, font_name: str, font_size: float) -> None: ...

    def highlight(self, text: str, token: str) -> StyledDocument: ...

    def supported_languages(self) -> list[str]: ...

    def register_language(self, name: str, grammar_script: str) -> bool: ...

    def stylesheet(self) -> str: ...

    def color_for_class(self, css_class: str) -> str | None: ...


class PygmentsHighlighter:
    """Pygments-backed ``Highlighter``.

    Holds per-session mutable state (active style, code font, registered
    grammars); create one per session.
    """

    def __init__(self, theme: str = FALLBACK_STYLE) -> None:
        try:
            from pygments.formatters import HtmlFormatter
            from pygments.lexers import get_all_lexers, get_lexer_by_name, load_lexer_from_file
            from pygments.styles import get_style_by_name
            from pygments.token import STANDARD_TYPES, Token
            from pygments.util import ClassNotFound
        except ImportError as exc:
            raise HighlighterUnavailable("Pygments is not installed") from exc

        self._html_formatter = HtmlFormatter
        self._get_all_lexers = get_all_lexers
        self._get_lexer_by_name = get_lexer_by_name
        self._load_lexer_from_file = load_lexer_from_file
        self._get_style_by_name = get_style_by_name
        self._class_not_found = ClassNotFound
        self._token_root = Token
        self._tokens_by_class = {css_class: token for token, css_class in STANDARD_TYPES.items() if css_class}

        self._custom_lexers: dict[str, type] = {}
        self.font_name = DEFAULT_FONT
        self.font_size = BASE_PREVIEW_FONT_SIZE
        self.line_spacing = 0.0
        self.theme_name = ""
        self.style_name = FALLBACK_STYLE
        self._style = get_style_by_name(FALLBACK_STYLE)
        self.set_theme(theme)

    # ------------------------------------------------------------------
    # Theme
    # ------------------------------------------------------------------
    def _resolve_style_name(self, name: str) -> str:
        for candidate in (name, STYLE_ALIASES.get(name)):
            if not candidate:
                continue
            try:
                self._get_style_by_name(candidate)
            except self._class_not_found:
                continue
            return candidate
        logger.info("No Pygments style for theme %r, using %s", name, FALLBACK_STYLE)
        return FALLBACK_STYLE

    def set_theme(self, name: str) -> None:
        self.theme_name = name
        self.style_name = self._resolve_style_name(name.strip().lower())
        self._style = self._get_style_by_name(self.style_name)

    @property
    def background_color(self) -> RGB:
        return parse_hex_color(self._style.background_color)

    @property
    def foreground_color(self) -> str:
        color = self._style.style_for_token(self._token_root.Text).get("color")
        if color:
            return f"#{color}"
        return "#000000" if relative_luminance(self.background_color) >= 0.5 else "#e6e6e6"

    def stylesheet(self) -> str:
        """CSS for the active style, scoped under ``.hljs``."""
        return self._html_formatter(style=self.style_name).get_style_defs(".hljs")

    def color_for_class(self, css_class: str) -> str | None:
        token = self._tokens_by_class.get(css_class)
        if token is None:
            return None
        color = self._style.style_for_token(token).get("color")
        return f"#{color}" if color else None

    def set_code_font(self, font_name: str, font_size: float) -> None:
        self.font_name = font_name
        self.font_size = font_size

    # ------------------------------------------------------------------
    # Languages
    # ------------------------------------------------------------------
    def _lexer_for(self, token: str):
        key = token.strip().lower()
        custom = self._custom_lexers.get(key)
        if custom is not None:
            return custom(**_LEXER_OPTIONS)
        try:
            return self._get_lexer_by_name(LEXER_ALIASES.get(key, key), **_LEXER_OPTIONS)
        except self._class_not_found as exc:
            raise UnknownLanguageRendered(f"no grammar for {token!r}", payload=UNDEFINED_SENTINEL) from exc

    def supported_languages(self) -> list[str]:
        names: set[str] = set(self._custom_lexers)
        names.update(LEXER_ALIASES)
        for _name, aliases, _filenames, _mimetypes in self._get_all_lexers():
            names.update(aliases)
        return sorted(names)

    def register_language(self, name: str, grammar_script: str) -> bool:
        """Load ``grammar_script`` (defining ``CustomLexer``) under ``name``."""
        with tempfile.TemporaryDirectory() as tmp:
            script_path = Path(tmp) / f"{name}_lexer.py"
            script_path.write_text(grammar_script, encoding="utf-8")
            try:
                lexer = self._load_lexer_from_file(str(script_path), "CustomLexer")
            except self._class_not_found as exc:
                logger.warning("Could not register language %r: %s", name, exc)
                return False
        self._custom_lexers[name.strip().lower()] = type(lexer)
        logger.debug("Registered language %r", name)
        return True

    # ------------------------------------------------------------------
    # Rendering
    # ------------------------------------------------------------------
    def highlight(self, text: str, token: str) -> StyledDocument:
        lexer = self._lexer_for(token)
        active_style = self._style
        spans: list[StyledSpan] = []
        for token_type, value in lexer.get_tokens(text):
            style = active_style.style_for_token(token_type)
            spans.append(
                StyledSpan(
                    value,
                    color=f"#{style['color']}" if style.get("color") else None,
                    background=f"#{style['bgcolor']}" if style.get("bgcolor") else None,
                    bold=bool(style.get("bold")),
                    italic=bool(style.get("italic")),
                    underline=bool(style.get("underline")),
                )
            )
        return StyledDocument(
            spans=merge_spans(spans),
            kind=DocumentKind.CODE,
            language=token,
            font_name=self.font_name,
            font_size=self.font_size,
            line_spacing=self.line_spacing,
        )

    def __repr__(self) -> str:
        return f"PygmentsHighlighter(theme={self.theme_name!r}, style={self.style_name!r}, background={to_hex(self.background_color)})"


__all__ = [
    "FALLBACK_STYLE",
    "STYLE_ALIASES",
    "LEXER_ALIASES",
    "Highlighter",
    "PygmentsHighlighter",
]
