"""Grammar scripts bundled with the package.

Each script is Python source defining a Pygments ``CustomLexer`` class and is
handed verbatim to ``Highlighter.register_language``.
"""

from __future__ import annotations

from importlib import resources

BUNDLED_GRAMMARS: tuple[str, ...] = ("cisco",)


def load_grammar_script(name: str) -> str:
    """Return the source text of the bundled grammar ``name``."""
    return resources.files(__name__).joinpath(f"{name}.py").read_text(encoding="utf-8")


__all__ = ["BUNDLED_GRAMMARS", "load_grammar_script"]
