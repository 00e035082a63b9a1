"""Preview path: file -> language -> styled document plus viewport colour."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from .colors import RGB
from .config import Preferences, load_preferences
from .document import StyledDocument
from .filetype import type_identifier_for_path
from .language import LanguageResolution, extension_for_path, resolve_language
from .pipeline import RenderingPipeline
from .session import RenderSession
from .source import read_source


@dataclass(frozen=True)
class PreviewResult:
    """Rendered preview and the background for the surrounding viewport."""

    document: StyledDocument
    background: RGB
    language: LanguageResolution


def render_preview(
    path: Path,
    session: RenderSession | None = None,
    *,
    type_identifier: str | None = None,
    preferences: Preferences | None = None,
) -> PreviewResult:
    """Render ``path`` for preview.

    A shared ``session`` may be passed by long-lived hosts; otherwise one is
    created from ``preferences`` (or the persisted config). Raises
    ``FileUnreadable``, ``DecodeFailure`` or ``HighlighterUnavailable``.
    """
    path = Path(path)
    text = read_source(path)
    if session is None:
        session = RenderSession.create(preferences or load_preferences())

    identifier = type_identifier or type_identifier_for_path(path)
    resolution = resolve_language(
        identifier,
        extension_for_path(path),
        default_language=session.options.default_language,
    )
    document = RenderingPipeline(session).render(text, resolution.token)
    return PreviewResult(document=document, background=session.background_color, language=resolution)


__all__ = ["PreviewResult", "render_preview"]
