"""Syntax-highlighted previews and thumbnails for source files.

``main`` runs the command-line interface; the rendering API lives in
``previewcode.preview`` and ``previewcode.thumbnail``.
"""

from __future__ import annotations

__version__ = "0.1.0"


def main(*args, **kwargs):
    """Run the CLI, importing it on first use."""
    from .cli import main as _main

    return _main(*args, **kwargs)


__all__ = ["__version__", "main"]
