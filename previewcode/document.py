"""Styled document model and its terminal/HTML serializations.

A ``StyledDocument`` is the single output type of the rendering pipeline:
highlighted code, a synthesized table, or a diagnostic message. It is built
once per render call and handed to the preview or thumbnail consumer.
"""

from __future__ import annotations

import html
from collections.abc import Iterable
from dataclasses import dataclass, replace
from enum import Enum
from typing import TYPE_CHECKING

from .colors import RGB, css_rgb, parse_hex_color, to_rgb255
from .constants import BASE_PREVIEW_FONT_SIZE, DEFAULT_FONT

if TYPE_CHECKING:  # pragma: no cover - used for type checking only
    from .tabular import TableDocument


class DocumentKind(str, Enum):
    CODE = "code"
    TABLE = "table"
    DIAGNOSTIC = "diagnostic"


@dataclass(frozen=True)
class StyledSpan:
    """A run of text sharing one set of visual attributes.

    Colours are ``#rrggbb`` strings; ``None`` means the surface default.
    """

    text: str
    color: str | None = None
    background: str | None = None
    bold: bool = False
    italic: bool = False
    underline: bool = False

    def same_style(self, other: "StyledSpan") -> bool:
        return (
            self.color == other.color
            and self.background == other.background
            and self.bold == other.bold
            and self.italic == other.italic
            and self.underline == other.underline
        )


def merge_spans(spans: Iterable[StyledSpan]) -> tuple[StyledSpan, ...]:
    """Drop empty spans and join neighbours with identical attributes."""
    merged: list[StyledSpan] = []
    for span in spans:
        if not span.text:
            continue
        if merged and merged[-1].same_style(span):
            merged[-1] = replace(merged[-1], text=merged[-1].text + span.text)
            continue
        merged.append(span)
    return tuple(merged)


@dataclass(frozen=True)
class StyledDocument:
    """Rendered output for one file.

    ``line_spacing`` is extra space between lines in pixels. ``html`` and
    ``table`` are set for tabular documents only.
    """

    spans: tuple[StyledSpan, ...]
    kind: DocumentKind = DocumentKind.CODE
    language: str = ""
    font_name: str = DEFAULT_FONT
    font_size: float = BASE_PREVIEW_FONT_SIZE
    line_spacing: float = 0.0
    html: str | None = None
    table: "TableDocument | None" = None

    @property
    def text(self) -> str:
        """Underlying plain text with all styling removed."""
        return "".join(span.text for span in self.spans)

    @property
    def is_diagnostic(self) -> bool:
        return self.kind is DocumentKind.DIAGNOSTIC

    def with_prefix(self, prefix: StyledSpan) -> "StyledDocument":
        return replace(self, spans=(prefix, *self.spans))

    def lines(self) -> list[list[StyledSpan]]:
        """Split spans into visual lines on ``\\n``; newlines are dropped."""
        rows: list[list[StyledSpan]] = [[]]
        for span in self.spans:
            pieces = span.text.split("\n")
            for idx, piece in enumerate(pieces):
                if idx > 0:
                    rows.append([])
                if piece:
                    rows[-1].append(replace(span, text=piece))
        if len(rows) > 1 and not rows[-1]:
            rows.pop()
        return rows


def _sgr_for_span(span: StyledSpan) -> str:
    params: list[str] = []
    if span.bold:
        params.append("1")
    if span.italic:
        params.append("3")
    if span.underline:
        params.append("4")
    if span.color:
        r, g, b = to_rgb255(parse_hex_color(span.color))
        params.append(f"38;2;{r};{g};{b}")
    if span.background:
        r, g, b = to_rgb255(parse_hex_color(span.background))
        params.append(f"48;2;{r};{g};{b}")
    return f"\033[{';'.join(params)}m" if params else ""


def to_ansi(document: StyledDocument) -> str:
    """Render spans as 24-bit SGR sequences for a truecolor terminal."""
    out: list[str] = []
    for span in document.spans:
        sgr = _sgr_for_span(span)
        if not sgr:
            out.append(span.text)
            continue
        # Reset before each newline so backgrounds do not bleed to the margin.
        segments = span.text.split("\n")
        for idx, segment in enumerate(segments):
            if idx > 0:
                out.append("\n")
            if segment:
                out.append(f"{sgr}{segment}\033[0m")
    return "".join(out)


def _css_for_span(span: StyledSpan) -> str:
    rules: list[str] = []
    if span.color:
        rules.append(f"color: {span.color}")
    if span.background:
        rules.append(f"background-color: {span.background}")
    if span.bold:
        rules.append("font-weight: bold")
    if span.italic:
        rules.append("font-style: italic")
    if span.underline:
        rules.append("text-decoration: underline")
    return "; ".join(rules)


def to_html(document: StyledDocument, background: RGB) -> str:
    """Render a standalone HTML page; tables return their synthesized HTML."""
    if document.html is not None:
        return document.html

    body: list[str] = []
    for span in document.spans:
        escaped = html.escape(span.text, quote=False)
        css = _css_for_span(span)
        body.append(f'<span style="{css}">{escaped}</span>' if css else escaped)

    line_height = document.font_size + document.line_spacing
    return (
        "<html><head><style>"
        f"body {{ background-color: {css_rgb(background)}; margin: 0; padding: 0.5em; }}"
        f"pre {{ font-family: '{document.font_name}', monospace; font-size: {document.font_size:g}px;"
        f" line-height: {line_height:g}px; margin: 0; }}"
        "</style></head><body><pre>"
        + "".join(body)
        + "</pre></body></html>"
    )


__all__ = [
    "DocumentKind",
    "StyledSpan",
    "StyledDocument",
    "merge_spans",
    "to_ansi",
    "to_html",
]
