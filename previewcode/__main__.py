"""Module entrypoint for ``python -m previewcode``.

All argument parsing and dispatch happen in ``previewcode.cli``.
"""

from .cli import main


if __name__ == "__main__":
    main()
