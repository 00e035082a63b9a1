"""Source loading, decoding, and sanitization.

Files are read once per request, never cached. Encoding is detected with
chardet and falls back to UTF-8; undecodable content is a ``DecodeFailure``.
"""

from __future__ import annotations

import re
from pathlib import Path

import chardet

from .errors import DecodeFailure, FileUnreadable

_CONTROL_RE = re.compile(r"[\x00-\x08\x0b\x0c\x0e-\x1f\x7f-\x9f]")


def detect_encoding(data: bytes) -> str:
    """Return the detected encoding name, or ``utf-8`` when undetermined."""
    if not data:
        return "utf-8"
    detected = chardet.detect(data).get("encoding")
    return detected or "utf-8"


def decode_source(data: bytes) -> str:
    """Decode ``data`` strictly with its detected encoding.

    A UTF-8 byte-order mark is dropped.
    """
    encoding = detect_encoding(data)
    try:
        text = data.decode(encoding)
    except (UnicodeDecodeError, LookupError) as exc:
        raise DecodeFailure(f"cannot decode as {encoding}: {exc}") from exc
    return text.removeprefix("\ufeff")


def read_source(path: Path) -> str:
    """Read and decode ``path``.

    Raises ``FileUnreadable`` for missing/inaccessible paths and
    ``DecodeFailure`` when the bytes cannot be decoded.
    """
    try:
        data = Path(path).read_bytes()
    except OSError as exc:
        raise FileUnreadable(f"could not access {path}: {exc}") from exc
    return decode_source(data)


def leading_lines(text: str, count: int) -> str:
    """Keep the first ``count`` lines, each newline-terminated."""
    if count <= 0:
        return ""
    lines = text.split("\n")
    return "".join(line + "\n" for line in lines[:count])


def _escape_control(match: re.Match[str]) -> str:
    return f"\\x{ord(match.group()):02x}"


def sanitize_terminal_text(source: str) -> str:
    """Show control characters in previewed source as ``\\xNN`` literals.

    Tabs, newlines and carriage returns pass through; everything else in the
    C0 and C1 ranges (plus DEL) is made visible instead of reaching the terminal.
    """
    return _CONTROL_RE.sub(_escape_control, source)


__all__ = [
    "detect_encoding",
    "decode_source",
    "read_source",
    "leading_lines",
    "sanitize_terminal_text",
]
