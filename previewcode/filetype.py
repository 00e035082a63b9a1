"""Type identifiers for local files.

Stands in for the host's file-type detection service: maps well-known file
names and extensions to dotted identifiers in the host vocabulary. Anything
unknown becomes ``public.data``, which resolves to the default language.
"""

from __future__ import annotations

from pathlib import PurePath

GENERIC_TYPE_IDENTIFIER = "public.data"

FILENAME_TYPES: dict[str, str] = {
    "makefile": "public.make-source",
    "gnumakefile": "public.make-source",
    ".env": "com.bps.env",
    "dockerfile": "com.custom.dockerfile-source",
}

EXTENSION_TYPES: dict[str, str] = {
    "c": "public.c-source",
    "h": "public.c-header",
    "cc": "public.c-plus-plus-source",
    "cpp": "public.c-plus-plus-source",
    "cxx": "public.c-plus-plus-source",
    "hh": "public.c-plus-plus-header",
    "hpp": "public.c-plus-plus-header",
    "m": "public.objective-c-source",
    "mm": "public.objective-c-plus-plus-source",
    "swift": "public.swift-source",
    "py": "public.python-script",
    "rb": "public.ruby-script",
    "pl": "public.perl-script",
    "php": "public.php-script",
    "sh": "public.shell-script",
    "bash": "public.bash-script",
    "zsh": "public.zsh-script",
    "csh": "public.csh-script",
    "ksh": "public.ksh-script",
    "tcsh": "public.tcsh-script",
    "command": "public.script",
    "bat": "org.n8gray.bat",
    "cmd": "com.microsoft.cmd-script",
    "js": "com.netscape.javascript-source",
    "mjs": "com.netscape.javascript-source",
    "jsx": "com.facebook.javascript-xml",
    "ts": "com.microsoft.typescript",
    "tsx": "com.microsoft.typescript",
    "vue": "com.custom.vuejs-source",
    "java": "com.sun.java-source",
    "kt": "org.kotlinlang.kotlin-source",
    "go": "org.golang.go-source",
    "rs": "org.rust-lang.rust-source",
    "cs": "com.microsoft.c-sharp",
    "fs": "com.microsoft.fsharp-source",
    "pas": "com.embarcadero.pascal-source",
    "s": "public.assembly-source",
    "asm": "public.assembly-source",
    "nasm": "public.nasm-assembly-source",
    "6809": "com.custom.6809-assembly-source",
    "lua": "org.lua.lua",
    "clj": "org.clojure.clojure",
    "tex": "org.tug",
    "ltx": "org.latex-project.latex-source",
    "adoc": "org.asciidoc",
    "asciidoc": "org.asciidoc",
    "mk": "public.make-source",
    "conf": "com.bps.conf",
    "tf": "com.hashicorp.terraform-source",
    "tfvars": "com.hashicorp.terraform-vars",
    "bf": "com.custom.brainfuck-source",
    "css": "public.css",
    "csv": "public.comma-separated-values-text",
    "ssv": "com.custom.ssv-data",
    "ios": "com.custom.ios-data",
    "eos": "com.custom.eos-data",
    "plist": "com.apple.property-list",
    "entitlements": "com.apple.xcode.entitlements-property-list",
    "xib": "com.apple.interfacebuilder.document.cocoa",
    "storyboard": "com.apple.interfacebuilder.document.storyboard",
    "applescript": "com.apple.applescript.text",
    "sql": "public.sql-source",
    "yaml": "public.yaml-source",
    "yml": "public.yaml-source",
    "toml": "public.toml-source",
}


def type_identifier_for_path(path: str | PurePath) -> str:
    """Return the dotted type identifier for ``path``.

    File names are checked before extensions so ``Makefile`` and ``.env``
    resolve without one.
    """
    pure = PurePath(path)
    by_name = FILENAME_TYPES.get(pure.name.lower())
    if by_name is not None:
        return by_name
    extension = pure.suffix.lower().lstrip(".")
    return EXTENSION_TYPES.get(extension, GENERIC_TYPE_IDENTIFIER)


__all__ = [
    "GENERIC_TYPE_IDENTIFIER",
    "FILENAME_TYPES",
    "EXTENSION_TYPES",
    "type_identifier_for_path",
]
