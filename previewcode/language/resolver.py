"""Resolve a file's type identifier and extension to a language.

Resolution is a pure function of its inputs: overrides first, then generic
``<vendor>.<name>-source|-header|-script`` decomposition, then aliasing.
It never fails; unresolvable identifiers yield the default language.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import PurePath

from ..constants import DEFAULT_LANGUAGE
from .aliases import apply_alias
from .rules import OVERRIDE_RULES, OverrideRule, match_override

GENERIC_SUFFIXES: tuple[str, ...] = ("-source", "-header", "-script")


@dataclass(frozen=True)
class LanguageResolution:
    """Both outputs of one resolution pass."""

    token: str
    tag: str


def normalize_extension(extension: str) -> str:
    """Lower-case an extension and drop any leading dot."""
    return extension.strip().lower().lstrip(".")


def extension_for_path(path: str | PurePath) -> str:
    return normalize_extension(PurePath(path).suffix)


def decompose_type_identifier(type_identifier: str, default: str = DEFAULT_LANGUAGE) -> str:
    """Extract the raw language name from a generic type identifier.

    Only the final dotted component is inspected, and the first of
    ``-source``, ``-header``, ``-script`` found in it ends the name:
    ``public.objective-c-source`` -> ``objective-c``.
    """
    final_component = type_identifier.split(".")[-1]
    for suffix in GENERIC_SUFFIXES:
        index = final_component.find(suffix)
        if index >= 0:
            return final_component[:index]
    return default


def resolve_language(
    type_identifier: str,
    extension: str,
    *,
    default_language: str = DEFAULT_LANGUAGE,
    rules: tuple[OverrideRule, ...] = OVERRIDE_RULES,
) -> LanguageResolution:
    """Resolve token and display tag for ``type_identifier``/``extension``."""
    identifier = type_identifier.strip().lower()
    ext = normalize_extension(extension)

    override = match_override(identifier, rules)
    if override is not None:
        return LanguageResolution(token=override.language, tag=override.language)

    raw_name = decompose_type_identifier(identifier, default_language)
    return LanguageResolution(
        token=apply_alias(raw_name, ext, for_display_tag=False),
        tag=apply_alias(raw_name, ext, for_display_tag=True),
    )


def resolve(
    type_identifier: str,
    extension: str,
    for_display_tag: bool = False,
    *,
    default_language: str = DEFAULT_LANGUAGE,
) -> str:
    """Return the highlighter token, or the display tag when requested."""
    resolution = resolve_language(type_identifier, extension, default_language=default_language)
    return resolution.tag if for_display_tag else resolution.token


__all__ = [
    "GENERIC_SUFFIXES",
    "LanguageResolution",
    "normalize_extension",
    "extension_for_path",
    "decompose_type_identifier",
    "resolve_language",
    "resolve",
]
