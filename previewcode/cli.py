"""Command-line front door for previewcode.

Parses CLI options, resolves preferences, and dispatches to the preview,
HTML export, thumbnail, or language-report paths.
"""

from __future__ import annotations

import argparse
import logging
import sys
from dataclasses import replace
from pathlib import Path

from .config import Preferences, load_preferences
from .document import StyledDocument, to_ansi, to_html
from .errors import RenderError
from .filetype import type_identifier_for_path
from .language import extension_for_path, resolve_language
from .preview import render_preview
from .session import RenderSession
from .source import sanitize_terminal_text
from .theme import DisplayMode
from .thumbnail import generate_thumbnail


def _positive_int(value: str) -> int:
    """argparse type for positive integer values."""
    try:
        parsed = int(value)
    except ValueError as exc:
        raise argparse.ArgumentTypeError(f"invalid integer value: {value!r}") from exc
    if parsed <= 0:
        raise argparse.ArgumentTypeError("value must be >= 1")
    return parsed


def _positive_float(value: str) -> float:
    try:
        parsed = float(value)
    except ValueError as exc:
        raise argparse.ArgumentTypeError(f"invalid number: {value!r}") from exc
    if parsed <= 0:
        raise argparse.ArgumentTypeError("value must be > 0")
    return parsed


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="previewcode",
        description="Preview source files with syntax highlighting, or render them as thumbnails.",
    )
    parser.add_argument("path", nargs="?", default=None, help="Source file to render.")
    parser.add_argument("--html", metavar="OUT", help="Write the preview as an HTML page to OUT.")
    parser.add_argument("--thumbnail", metavar="OUT", help="Write a PNG thumbnail to OUT.")
    parser.add_argument("--size", type=_positive_int, default=256, help="Thumbnail maximum height (default: 256).")
    parser.add_argument("--scale", type=_positive_float, default=1.0, help="Thumbnail render scale (default: 1).")
    tag_group = parser.add_mutually_exclusive_group()
    tag_group.add_argument("--tag", dest="tag", action="store_true", default=None, help="Always draw the type tag.")
    tag_group.add_argument("--no-tag", dest="tag", action="store_false", help="Never draw the type tag.")
    parser.add_argument("--language", action="store_true", help="Print the language token and display tag, then exit.")
    parser.add_argument("--type-identifier", default=None, help="Use this type identifier instead of detecting one.")
    parser.add_argument("--theme", default=None, help='Theme descriptor, e.g. "dark.monokai".')
    parser.add_argument("--mode", choices=[mode.value for mode in DisplayMode], default=None, help="Display mode.")
    parser.add_argument("--list-languages", action="store_true", help="List languages the highlighter supports.")
    parser.add_argument("-v", "--verbose", action="store_true", help="Log debugging information to stderr.")
    return parser


def _preferences_from_args(args: argparse.Namespace) -> Preferences:
    preferences = load_preferences()
    if args.theme:
        preferences = replace(preferences, light_theme=args.theme, dark_theme=args.theme)
    if args.mode:
        preferences = replace(preferences, theme_mode=DisplayMode(args.mode))
    return preferences


def _terminal_safe(document: StyledDocument) -> StyledDocument:
    spans = tuple(replace(span, text=sanitize_terminal_text(span.text)) for span in document.spans)
    return replace(document, spans=spans)


def _print_language(path: Path, type_identifier: str | None, preferences: Preferences) -> None:
    identifier = type_identifier or type_identifier_for_path(path)
    resolution = resolve_language(
        identifier,
        extension_for_path(path),
        default_language=preferences.default_language,
    )
    sys.stdout.write(f"{identifier}\t{resolution.token}\t{resolution.tag}\n")


def main(argv: list[str] | None = None) -> None:
    """Parse CLI arguments and run the requested action.

    Render failures exit with status 1 and a message naming the reason code.
    """
    parser = build_parser()
    args = parser.parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )
    preferences = _preferences_from_args(args)

    try:
        if args.list_languages:
            session = RenderSession.create(preferences)
            sys.stdout.write("\n".join(session.highlighter.supported_languages()) + "\n")
            return

        if args.path is None:
            parser.error("a source file path is required")
        path = Path(args.path)
        if not path.exists():
            raise SystemExit(f"Path not found: {path}")

        if args.language:
            _print_language(path, args.type_identifier, preferences)
            return

        if args.thumbnail:
            reply = generate_thumbnail(
                path,
                args.size,
                args.scale,
                include_tag=args.tag,
                type_identifier=args.type_identifier,
                preferences=preferences,
            )
            if not reply.ok:
                assert reply.failure is not None
                raise SystemExit(f"{reply.failure.value}: {reply.message}")
            assert reply.image is not None
            try:
                reply.image.save(args.thumbnail, format="PNG")
            finally:
                reply.image.close()
            return

        result = render_preview(path, type_identifier=args.type_identifier, preferences=preferences)
        if args.html:
            Path(args.html).write_text(to_html(result.document, result.background), encoding="utf-8")
            return
        sys.stdout.write(to_ansi(_terminal_safe(result.document)))
        if not result.document.text.endswith("\n"):
            sys.stdout.write("\n")
    except RenderError as exc:
        raise SystemExit(f"{exc.reason.value}: {exc}") from exc
