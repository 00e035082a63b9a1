"""Thumbnail generation: request state machine and canvas composition.

A request moves ``IDLE -> FILE_LOADED -> LANGUAGE_RESOLVED -> BODY_RENDERED
-> (TAG_RENDERED) -> COMPOSITED -> DONE``; any ``RenderError`` ends it in
``FAILED`` with a reason code and no image. There are no retries.
"""

from __future__ import annotations

import logging
from collections.abc import Iterator
from contextlib import ExitStack, contextmanager
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path

from PIL import Image

from .appearance import host_draws_type_label
from .config import Preferences, load_preferences
from .constants import THUMBNAIL_ASPECT, THUMBNAIL_LINE_COUNT, THUMBNAIL_TAG_FRACTION
from .errors import FailureReason, GraphicsDrawFailure, RenderError
from .filetype import type_identifier_for_path
from .highlighter import PygmentsHighlighter
from .language import extension_for_path, resolve_language
from .pipeline import RenderingPipeline
from .raster import allocate_bitmap, render_body_bitmap, render_tag_bitmap
from .session import HighlighterFactory, RenderSession
from .source import leading_lines, read_source

logger = logging.getLogger(__name__)


class ThumbnailState(str, Enum):
    IDLE = "idle"
    FILE_LOADED = "file-loaded"
    LANGUAGE_RESOLVED = "language-resolved"
    BODY_RENDERED = "body-rendered"
    TAG_RENDERED = "tag-rendered"
    COMPOSITED = "composited"
    DONE = "done"
    FAILED = "failed"


@dataclass(frozen=True)
class ThumbnailLayout:
    """Frames for one composition, in output pixels."""

    canvas_size: tuple[float, float]
    scale: float

    @property
    def pixel_size(self) -> tuple[int, int]:
        width, height = self.canvas_size
        return max(1, int(round(width * self.scale))), max(1, int(round(height * self.scale)))

    @property
    def body_frame(self) -> tuple[int, int, int, int]:
        width, height = self.pixel_size
        return 0, 0, width, height

    @property
    def tag_frame(self) -> tuple[int, int, int, int]:
        """Bottom strip of the canvas the tag is drawn into."""
        width, height = self.pixel_size
        tag_height = max(1, int(round(height * THUMBNAIL_TAG_FRACTION)))
        return 0, height - tag_height, width, height


def canvas_size_for_height(max_height: float) -> tuple[float, float]:
    """Thumbnail frame for the host's maximum height, at the fixed aspect."""
    return THUMBNAIL_ASPECT * max_height, float(max_height)


@contextmanager
def drawing_context(pixel_size: tuple[int, int]) -> Iterator[tuple[Image.Image, ExitStack]]:
    """Allocate the output canvas and an exit stack for intermediates.

    Intermediates registered on the stack are released on every exit path;
    the canvas is released only when the block fails.
    """
    canvas = allocate_bitmap(pixel_size, "RGBA", (0, 0, 0, 0))
    with ExitStack() as intermediates:
        try:
            yield canvas, intermediates
        except BaseException:
            canvas.close()
            raise


def _scaled(image: Image.Image, size: tuple[int, int], intermediates: ExitStack) -> Image.Image:
    converted = image.convert("RGBA")
    intermediates.callback(converted.close)
    resized = converted.resize(size, Image.Resampling.LANCZOS)
    intermediates.callback(resized.close)
    return resized


def compose(
    body: Image.Image,
    tag: Image.Image | None,
    canvas_size: tuple[float, float],
    scale: float,
) -> Image.Image:
    """Lay ``body`` over the whole canvas and ``tag`` over its bottom strip."""
    layout = ThumbnailLayout(canvas_size=canvas_size, scale=scale)
    with drawing_context(layout.pixel_size) as (canvas, intermediates):
        try:
            left, top, right, bottom = layout.body_frame
            canvas.alpha_composite(_scaled(body, (right - left, bottom - top), intermediates), dest=(left, top))
            if tag is not None:
                left, top, right, bottom = layout.tag_frame
                canvas.alpha_composite(_scaled(tag, (right - left, bottom - top), intermediates), dest=(left, top))
        except (OSError, ValueError) as exc:
            raise GraphicsDrawFailure(f"cannot compose thumbnail: {exc}") from exc
    return canvas


@dataclass(frozen=True)
class ThumbnailReply:
    """Outcome of one thumbnail request: an image, or a failure reason."""

    image: Image.Image | None
    state: ThumbnailState
    failure: FailureReason | None = None
    message: str = ""

    @property
    def ok(self) -> bool:
        return self.image is not None and self.failure is None


_FAILURE_LOG_MESSAGES = {
    FailureReason.FILE_UNREADABLE: "Could not access file %s",
    FailureReason.DECODE_FAILURE: "Could not decode file %s",
    FailureReason.HIGHLIGHTER_UNAVAILABLE: "Highlighter unavailable, installation may be damaged (rendering %s)",
}


@dataclass
class ThumbnailJob:
    """One thumbnail request for ``path``."""

    path: Path
    max_height: float
    scale: float = 1.0
    include_tag: bool | None = None
    type_identifier: str | None = None
    preferences: Preferences | None = None
    highlighter_factory: HighlighterFactory = PygmentsHighlighter
    state: ThumbnailState = ThumbnailState.IDLE
    history: list[ThumbnailState] = field(default_factory=lambda: [ThumbnailState.IDLE])

    def _advance(self, state: ThumbnailState) -> None:
        self.state = state
        self.history.append(state)

    def _wants_tag(self) -> bool:
        if self.include_tag is not None:
            return self.include_tag
        return not host_draws_type_label()

    def run(self) -> ThumbnailReply:
        try:
            image = self._run()
        except RenderError as exc:
            self._advance(ThumbnailState.FAILED)
            template = _FAILURE_LOG_MESSAGES.get(exc.reason, "Could not render thumbnail for %s")
            logger.error(template, self.path)
            return ThumbnailReply(None, self.state, exc.reason, str(exc))
        self._advance(ThumbnailState.DONE)
        return ThumbnailReply(image, self.state)

    def _run(self) -> Image.Image:
        path = Path(self.path)
        text = read_source(path)
        self._advance(ThumbnailState.FILE_LOADED)

        session = RenderSession.create(
            self.preferences or load_preferences(),
            is_thumbnail=True,
            highlighter_factory=self.highlighter_factory,
        )
        identifier = self.type_identifier or type_identifier_for_path(path)
        resolution = resolve_language(
            identifier,
            extension_for_path(path),
            default_language=session.options.default_language,
        )
        self._advance(ThumbnailState.LANGUAGE_RESOLVED)

        document = RenderingPipeline(session).render(
            leading_lines(text, THUMBNAIL_LINE_COUNT),
            resolution.token,
        )
        with ExitStack() as bitmaps:
            body = render_body_bitmap(document, session.background_color, session.highlighter.foreground_color)
            bitmaps.callback(body.close)
            self._advance(ThumbnailState.BODY_RENDERED)

            tag = None
            if self._wants_tag():
                tag = render_tag_bitmap(resolution.tag)
                bitmaps.callback(tag.close)
                self._advance(ThumbnailState.TAG_RENDERED)

            image = compose(body, tag, canvas_size_for_height(self.max_height), self.scale)
            self._advance(ThumbnailState.COMPOSITED)
        return image


def generate_thumbnail(
    path: Path,
    max_height: float,
    scale: float = 1.0,
    **options,
) -> ThumbnailReply:
    """Run a single thumbnail request; see ``ThumbnailJob`` for options."""
    return ThumbnailJob(Path(path), max_height, scale, **options).run()


__all__ = [
    "ThumbnailState",
    "ThumbnailLayout",
    "ThumbnailReply",
    "ThumbnailJob",
    "canvas_size_for_height",
    "drawing_context",
    "compose",
    "generate_thumbnail",
]
