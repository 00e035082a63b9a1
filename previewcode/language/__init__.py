"""Language classification: type identifier + extension -> token and tag."""

from __future__ import annotations

from .aliases import ALIASES, LanguageAlias, apply_alias
from .resolver import (
    LanguageResolution,
    decompose_type_identifier,
    extension_for_path,
    resolve,
    resolve_language,
)
from .rules import OVERRIDE_RULES, MatchKind, OverrideRule, match_override

__all__ = [
    "ALIASES",
    "LanguageAlias",
    "apply_alias",
    "LanguageResolution",
    "decompose_type_identifier",
    "extension_for_path",
    "resolve",
    "resolve_language",
    "OVERRIDE_RULES",
    "MatchKind",
    "OverrideRule",
    "match_override",
]
