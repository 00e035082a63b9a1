"""Route source text to the tabular renderer or the highlighter.

Highlighter failures never escape ``render``: unknown languages, the
``"undefined"`` sentinel, and engine exceptions all become a diagnostic
document so the preview always has something to show.
"""

from __future__ import annotations

import logging

from .constants import TABULAR_TOKENS, UNDEFINED_SENTINEL
from .document import DocumentKind, StyledDocument, StyledSpan
from .session import RenderOptions, RenderSession
from .tabular import render_table, tabular_document

logger = logging.getLogger(__name__)

DIAGNOSTIC_COLOR = "#ff0000"


class RenderingPipeline:
    """Render source text for one session."""

    def __init__(self, session: RenderSession) -> None:
        self.session = session

    @property
    def options(self) -> RenderOptions:
        return self.session.options

    def render(self, source_text: str, language_token: str) -> StyledDocument:
        """Render under the session read lock so a theme switch cannot interleave."""
        with self.session.reading():
            if language_token in TABULAR_TOKENS:
                return self.render_tabular(source_text, language_token)
            return self._highlight(source_text, language_token)

    def _highlight(self, source_text: str, language_token: str) -> StyledDocument:
        highlighter = self.session.highlighter
        try:
            document = highlighter.highlight(source_text, language_token)
        except Exception as exc:  # any engine failure becomes a diagnostic
            logger.warning("Highlighting failed for %r: %s", language_token, exc)
            payload = getattr(exc, "payload", None) or str(exc) or None
            return self.diagnostic(language_token, payload)

        if document.text == UNDEFINED_SENTINEL:
            logger.warning("Highlighter returned the undefined sentinel for %r", language_token)
            return self.diagnostic(language_token, document.text)

        if self.options.debug:
            return document.with_prefix(
                StyledSpan(f"Language: {language_token}\n", color=DIAGNOSTIC_COLOR)
            )
        return document

    def render_tabular(self, source_text: str, language_token: str) -> StyledDocument:
        highlighter = self.session.highlighter
        with self.session.reading():
            theme, background = self.session.snapshot()
            table = render_table(source_text, background, theme.is_dark, self.options.font_size)
            return tabular_document(
                table,
                language=language_token,
                font_name=self.options.font_name,
                stylesheet=highlighter.stylesheet(),
                color_for_class=highlighter.color_for_class,
            )

    def diagnostic(self, language_token: str, payload: str | None) -> StyledDocument:
        """Build the fixed-style error document for a failed render."""
        message = f"Could not render source code in ({language_token}): received {payload or 'nil'}"
        try:
            languages = self.session.highlighter.supported_languages()
        except Exception as exc:  # listing only aids debugging
            logger.debug("Could not list supported languages: %s", exc)
            languages = []
        if languages:
            message += "\nAvailable languages: " + ", ".join(languages)
        return StyledDocument(
            spans=(StyledSpan(message, color=DIAGNOSTIC_COLOR),),
            kind=DocumentKind.DIAGNOSTIC,
            language=language_token,
            font_name=self.options.font_name,
            font_size=self.options.font_size,
        )


__all__ = ["DIAGNOSTIC_COLOR", "RenderingPipeline"]
