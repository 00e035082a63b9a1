"""Ordered override rules for type identifiers that break the generic pattern.

Each rule is a tagged predicate (exact, prefix, suffix, contains) paired with
the language it yields. Rules are evaluated in table order; first match wins.
Identifiers are expected to be lower-cased before matching.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class MatchKind(str, Enum):
    """How a rule pattern is compared against a type identifier."""

    EXACT = "exact"
    PREFIX = "prefix"
    SUFFIX = "suffix"
    CONTAINS = "contains"


@dataclass(frozen=True)
class OverrideRule:
    """One override: ``kind`` + ``pattern`` selects, ``language`` is the result.

    Overrides yield the same value for the highlighter token and the display
    tag; they bypass the alias table.
    """

    kind: MatchKind
    pattern: str
    language: str

    def matches(self, type_identifier: str) -> bool:
        if self.kind is MatchKind.EXACT:
            return type_identifier == self.pattern
        if self.kind is MatchKind.PREFIX:
            return type_identifier.startswith(self.pattern)
        if self.kind is MatchKind.SUFFIX:
            return type_identifier.endswith(self.pattern)
        return self.pattern in type_identifier


def _exact(pattern: str, language: str) -> OverrideRule:
    return OverrideRule(MatchKind.EXACT, pattern, language)


def _prefix(pattern: str, language: str) -> OverrideRule:
    return OverrideRule(MatchKind.PREFIX, pattern, language)


def _suffix(pattern: str, language: str) -> OverrideRule:
    return OverrideRule(MatchKind.SUFFIX, pattern, language)


def _contains(pattern: str, language: str) -> OverrideRule:
    return OverrideRule(MatchKind.CONTAINS, pattern, language)


OVERRIDE_RULES: tuple[OverrideRule, ...] = (
    _prefix("com.apple.applescript", "applescript"),
    _exact("com.apple.property-list", "xml"),
    _exact("public.script", "bash"),
    _exact("org.n8gray.bat", "bash"),
    _exact("public.css", "css"),
    _exact("public.comma-separated-values-text", "csv-data"),
    _exact("com.custom.csv-data", "csv-data"),
    _exact("com.custom.ssv-data", "ssv-data"),
    _exact("com.custom.ios-data", "cisco"),
    _exact("com.custom.eos-data", "cisco"),
    _exact("com.bps.env", "bash"),
    _exact("com.bps.conf", "makefile"),
    _suffix(".terraform-vars", "toml"),
    _suffix(".c-sharp", "c#"),
    # Xcode project files
    _suffix(".entitlements-property-list", "xml"),
    _suffix(".interfacebuilder.document.cocoa", "xml"),
    _suffix("interfacebuilder.document.storyboard", "xml"),
    _suffix(".typescript", "typescript"),
    _contains("asciidoc", "makefile"),
    _suffix(".tug", "tex"),
    _suffix(".lua", "lua"),
    _suffix(".clojure", "clojure"),
    _suffix(".javascript-xml", "javascript"),
)


def match_override(
    type_identifier: str,
    rules: tuple[OverrideRule, ...] = OVERRIDE_RULES,
) -> OverrideRule | None:
    """Return the first rule matching ``type_identifier``, if any."""
    for rule in rules:
        if rule.matches(type_identifier):
            return rule
    return None


__all__ = [
    "MatchKind",
    "OverrideRule",
    "OVERRIDE_RULES",
    "match_override",
]
