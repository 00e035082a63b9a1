"""Alias table mapping raw language names to highlighter tokens and tags.

Raw names come from decomposing a type identifier (``objective-c``,
``c-plus-plus``). The highlighter and the thumbnail tag want different
spellings for several of them, so each alias carries both.
"""

from __future__ import annotations

from dataclasses import dataclass

SHELL_FAMILY = frozenset({"shell", "zsh", "csh", "ksh", "tcsh", "bat", "cmd", "bash", "sh"})


@dataclass(frozen=True)
class LanguageAlias:
    """Replacement spellings for one raw language name.

    ``None`` leaves that output unchanged. ``extensions`` restricts the alias
    to files whose (lower-cased, dot-less) extension is listed.
    """

    raw: str
    token: str | None = None
    tag: str | None = None
    extensions: frozenset[str] | None = None

    def applies_to(self, raw_name: str, extension: str) -> bool:
        if raw_name != self.raw:
            return False
        return self.extensions is None or extension in self.extensions


ALIASES: tuple[LanguageAlias, ...] = (
    LanguageAlias("objective-c", token="objectivec", tag="obj-c"),
    LanguageAlias("objective-c-plus-plus", token="objectivec", tag="obj-c++"),
    LanguageAlias("c-plus-plus", token="cpp", tag="c++"),
    *(LanguageAlias(name, token="bash") for name in sorted(SHELL_FAMILY)),
    LanguageAlias("pascal", token="delphi"),
    LanguageAlias("assembly", token="arm", tag="ARM", extensions=frozenset({"s"})),
    LanguageAlias("assembly", token="x86asm", tag="x86-64", extensions=frozenset({"asm", "nasm"})),
    LanguageAlias("nasm-assembly", token="x86asm", tag="x86-64"),
    LanguageAlias("6809-assembly", token="x86asm", tag="6809"),
    LanguageAlias("latex", token="tex"),
    LanguageAlias("csharp", tag="c#"),
    LanguageAlias("fsharp", tag="f#"),
    LanguageAlias("brainfuck", tag="brainf**k"),
    LanguageAlias("terraform", token="go"),
    LanguageAlias("make", token="makefile", tag="makefile"),
    LanguageAlias("vuejs", token="javascript", tag="javascript"),
)


def apply_alias(raw_name: str, extension: str, for_display_tag: bool) -> str:
    """Return the token (or tag) spelling for ``raw_name``.

    Unmatched names, and aliases without a spelling for the requested output,
    pass through unchanged.
    """
    for alias in ALIASES:
        if not alias.applies_to(raw_name, extension):
            continue
        replacement = alias.tag if for_display_tag else alias.token
        return replacement if replacement is not None else raw_name
    return raw_name


__all__ = [
    "SHELL_FAMILY",
    "LanguageAlias",
    "ALIASES",
    "apply_alias",
]
