"""Host appearance queries used by ``auto`` display mode and tag layout."""

from __future__ import annotations

import os
import platform
import subprocess
import sys

from .constants import HOST_LABEL_MIN_MACOS


def _macos_is_light() -> bool:
    """Read the global ``AppleInterfaceStyle`` default; unset means light."""
    try:
        completed = subprocess.run(
            ["defaults", "read", "-g", "AppleInterfaceStyle"],
            capture_output=True,
            text=True,
            timeout=2,
            check=False,
        )
    except (OSError, subprocess.SubprocessError):
        return True
    if completed.returncode != 0:
        return True
    return completed.stdout.strip().lower() != "dark"


def _colorfgbg_is_light(value: str | None) -> bool | None:
    """Interpret ``COLORFGBG`` (``"fg;bg"``); ``None`` when inconclusive."""
    if not value:
        return None
    background = value.split(";")[-1].strip()
    if not background.isdigit():
        return None
    index = int(background)
    return index == 7 or index >= 9


def system_is_light() -> bool:
    """Return whether the host currently presents a light appearance."""
    if sys.platform == "darwin":
        return _macos_is_light()
    from_terminal = _colorfgbg_is_light(os.environ.get("COLORFGBG"))
    return True if from_terminal is None else from_terminal


def macos_major_version() -> int | None:
    release = platform.mac_ver()[0]
    if not release:
        return None
    head = release.split(".")[0]
    return int(head) if head.isdigit() else None


def host_draws_type_label() -> bool:
    """Return whether the host renders its own type label on thumbnails.

    Newer macOS releases badge thumbnails natively, so no tag is drawn there.
    """
    if sys.platform != "darwin":
        return False
    major = macos_major_version()
    return major is not None and major >= HOST_LABEL_MIN_MACOS


__all__ = [
    "system_is_light",
    "macos_major_version",
    "host_draws_type_label",
]
