"""Tabular rendering for comma/semicolon separated data.

Builds a small table model (cells with positional token classes, a bold
header row, alternate rows shaded from the theme background) and serializes
it to HTML or to styled spans. Everything here is pure and thread-safe.
"""

from __future__ import annotations

import html
import logging
from collections.abc import Callable
from dataclasses import dataclass

from .colors import RGB, adjust_channels, css_rgb, to_hex
from .constants import BASE_PREVIEW_FONT_SIZE
from .document import DocumentKind, StyledDocument, StyledSpan, merge_spans

logger = logging.getLogger(__name__)

# Pygments short CSS classes, so tables pick up the theme palette: Keyword,
# Name.Builtin, Keyword.Type, Keyword.Constant, Name.Property, String.Regex,
# String, Name.Variable, Name.Builtin.Pseudo, Name.Constant, Name.Attribute.
COLUMN_CLASSES: tuple[str, ...] = ("k", "nb", "kt", "kc", "py", "sr", "s", "nv", "bp", "no", "na")

CELL_DISPLAY_LIMIT = 6
CELL_PREFIX_LENGTH = 4
ELLIPSIS_MARKER = "&hellip;"
NBSP_MARKER = "&nbsp;"
ROW_SHADE_DELTA = 0.06
COLUMN_GAP = "  "

_CELL_ESCAPES = str.maketrans(
    {"&": "&amp;", "<": "&lt;", ">": "&gt;", '"': "&quot;", "'": "&#39;"}
)


@dataclass(frozen=True)
class TableCell:
    """One field: raw text, escaped display fragment, and its style class."""

    text: str
    display: str
    style_index: int
    truncated: bool = False

    @property
    def style_class(self) -> str:
        return COLUMN_CLASSES[self.style_index]

    @property
    def plain_display(self) -> str:
        """Display fragment with HTML markers decoded (for non-HTML surfaces)."""
        return html.unescape(self.display)


@dataclass(frozen=True)
class TableRow:
    cells: tuple[TableCell, ...]
    is_header: bool = False
    is_alternate: bool = False


@dataclass(frozen=True)
class TableDocument:
    """Rows plus the derived alternate-row background.

    Rows may have different lengths; nothing is padded.
    """

    rows: tuple[TableRow, ...]
    alternate_background: RGB
    delimiter: str = ","
    font_size: float = BASE_PREVIEW_FONT_SIZE

    @property
    def column_count(self) -> int:
        return max((len(row.cells) for row in self.rows), default=0)


def detect_delimiter(raw_text: str) -> str:
    """Semicolon when present anywhere in the text, otherwise comma."""
    return ";" if ";" in raw_text else ","


def split_records(raw_text: str, delimiter: str) -> list[list[str]]:
    """Split non-empty lines into fields, keeping empty trailing fields."""
    records: list[list[str]] = []
    for line in raw_text.split("\n"):
        line = line.rstrip("\r")
        if not line:
            continue
        records.append(line.split(delimiter))
    return records


def escape_cell_text(text: str) -> str:
    """Escape ``& < > " '`` for HTML output.

    The apostrophe becomes the five-character ``&#39;``; truncation counts
    escaped characters, so the entity length matters.
    """
    return text.translate(_CELL_ESCAPES)


def format_cell_text(text: str) -> tuple[str, bool]:
    """Return the display fragment for ``text`` and whether it was truncated.

    Escaped text longer than six characters keeps its first four followed by
    an ellipsis marker; spaces become non-breaking markers.
    """
    escaped = escape_cell_text(text)
    truncated = len(escaped) > CELL_DISPLAY_LIMIT
    shown = escaped[:CELL_PREFIX_LENGTH] + ELLIPSIS_MARKER if truncated else escaped
    return shown.replace(" ", NBSP_MARKER), truncated


def column_style_index(column_index: int) -> int:
    return column_index % len(COLUMN_CLASSES)


def alternate_row_color(background: RGB, is_dark: bool) -> RGB:
    """Derive the alternate-row shade from the theme background.

    Each channel moves by 6%: up for light themes, down for dark themes,
    clamped to ``[0, 1]``.
    """
    delta = -ROW_SHADE_DELTA if is_dark else ROW_SHADE_DELTA
    return adjust_channels(background, delta)


def _build_cell(column_index: int, field: str) -> TableCell:
    display, truncated = format_cell_text(field)
    return TableCell(
        text=field,
        display=display,
        style_index=column_style_index(column_index),
        truncated=truncated,
    )


def render_table(
    raw_text: str,
    theme_background: RGB,
    is_dark: bool,
    font_size: float = BASE_PREVIEW_FONT_SIZE,
) -> TableDocument:
    """Build the table model for ``raw_text``.

    The first row is the header; rows at odd positions (the even rows when
    counted from one) carry the alternate background. Empty input yields an
    empty table, never an error.
    """
    delimiter = detect_delimiter(raw_text)
    rows: list[TableRow] = []
    for row_index, fields in enumerate(split_records(raw_text, delimiter)):
        cells = tuple(_build_cell(column_index, field) for column_index, field in enumerate(fields))
        rows.append(
            TableRow(
                cells=cells,
                is_header=(row_index == 0),
                is_alternate=(row_index % 2 == 1),
            )
        )
    logger.debug("Built table with %d rows using %r delimiter", len(rows), delimiter)
    return TableDocument(
        rows=tuple(rows),
        alternate_background=alternate_row_color(theme_background, is_dark),
        delimiter=delimiter,
        font_size=font_size,
    )


def table_to_html(table: TableDocument, stylesheet: str = "") -> str:
    """Serialize the table as a standalone HTML page.

    ``stylesheet`` is the active theme's CSS, embedded verbatim so cell
    classes pick up the highlighter palette.
    """
    head = (
        "<html><head><style>\n"
        f"{stylesheet}\n"
        "body {\n"
        "  font-family: monospace;\n"
        f"  font-size: {table.font_size:g}px;\n"
        "  padding: 0.5em;\n"
        "}\n"
        "table { border-spacing: 0; width: 100%; }\n"
        "th, td { overflow: hidden; text-align: left; white-space: nowrap; }\n"
        "tbody tr:first-child { font-weight: bold; }\n"
        f"tbody tr:nth-child(even) {{ background-color: {css_rgb(table.alternate_background)}; }}\n"
        '</style></head><body class="hljs"><table>'
    )
    rows: list[str] = []
    for row in table.rows:
        cells = "".join(
            f'<td class="{cell.style_class}"><nobr>{cell.display}</nobr></td>' for cell in row.cells
        )
        rows.append(f"<tr>{cells}</tr>")
    return head + "".join(rows) + "</table></body></html>"


def table_to_spans(
    table: TableDocument,
    color_for_class: Callable[[str], str | None] = lambda _cls: None,
) -> tuple[StyledSpan, ...]:
    """Lay the table out as padded text columns for terminals and bitmaps."""
    widths: list[int] = [0] * table.column_count
    for row in table.rows:
        for column_index, cell in enumerate(row.cells):
            widths[column_index] = max(widths[column_index], len(cell.plain_display))

    shade = to_hex(table.alternate_background)
    spans: list[StyledSpan] = []
    for row in table.rows:
        background = shade if row.is_alternate else None
        for column_index, cell in enumerate(row.cells):
            if column_index > 0:
                spans.append(StyledSpan(COLUMN_GAP, background=background))
            spans.append(
                StyledSpan(
                    cell.plain_display.ljust(widths[column_index]),
                    color=color_for_class(cell.style_class),
                    background=background,
                    bold=row.is_header,
                )
            )
        spans.append(StyledSpan("\n"))
    return merge_spans(spans)


def tabular_document(
    table: TableDocument,
    *,
    language: str,
    font_name: str,
    stylesheet: str = "",
    color_for_class: Callable[[str], str | None] = lambda _cls: None,
) -> StyledDocument:
    """Wrap a table model as a ``StyledDocument`` carrying HTML and spans."""
    return StyledDocument(
        spans=table_to_spans(table, color_for_class),
        kind=DocumentKind.TABLE,
        language=language,
        font_name=font_name,
        font_size=table.font_size,
        html=table_to_html(table, stylesheet),
        table=table,
    )


__all__ = [
    "COLUMN_CLASSES",
    "CELL_DISPLAY_LIMIT",
    "ELLIPSIS_MARKER",
    "NBSP_MARKER",
    "TableCell",
    "TableRow",
    "TableDocument",
    "detect_delimiter",
    "split_records",
    "escape_cell_text",
    "format_cell_text",
    "column_style_index",
    "alternate_row_color",
    "render_table",
    "table_to_html",
    "table_to_spans",
    "tabular_document",
]
