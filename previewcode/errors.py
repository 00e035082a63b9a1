"""Failure taxonomy shared by the preview and thumbnail paths.

Every error carries a ``FailureReason`` so hosts can report a distinct code.
Only ``UnknownLanguageRendered`` is recovered locally (by the pipeline).
"""

from __future__ import annotations

from enum import Enum


class FailureReason(str, Enum):
    """Reason codes reported to the host for a failed request."""

    FILE_UNREADABLE = "file-unreadable"
    DECODE_FAILURE = "decode-failure"
    HIGHLIGHTER_UNAVAILABLE = "highlighter-unavailable"
    UNKNOWN_LANGUAGE_RENDERED = "unknown-language-rendered"
    GRAPHICS_ALLOCATION_FAILURE = "graphics-allocation-failure"
    GRAPHICS_DRAW_FAILURE = "graphics-draw-failure"


class RenderError(Exception):
    """Base class for all rendering failures."""

    reason: FailureReason = FailureReason.GRAPHICS_DRAW_FAILURE

    def __init__(self, message: str = "", *, payload: str | None = None) -> None:
        super().__init__(message or self.reason.value)
        self.payload = payload


class FileUnreadable(RenderError):
    reason = FailureReason.FILE_UNREADABLE


class DecodeFailure(RenderError):
    reason = FailureReason.DECODE_FAILURE


class HighlighterUnavailable(RenderError):
    """The highlighting engine failed to load; signals a broken install."""

    reason = FailureReason.HIGHLIGHTER_UNAVAILABLE


class UnknownLanguageRendered(RenderError):
    """The engine has no grammar for the requested language token."""

    reason = FailureReason.UNKNOWN_LANGUAGE_RENDERED


class GraphicsAllocationFailure(RenderError):
    reason = FailureReason.GRAPHICS_ALLOCATION_FAILURE


class GraphicsDrawFailure(RenderError):
    reason = FailureReason.GRAPHICS_DRAW_FAILURE


__all__ = [
    "FailureReason",
    "RenderError",
    "FileUnreadable",
    "DecodeFailure",
    "HighlighterUnavailable",
    "UnknownLanguageRendered",
    "GraphicsAllocationFailure",
    "GraphicsDrawFailure",
]
