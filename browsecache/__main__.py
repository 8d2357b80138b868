"""Module entrypoint for ``python -m browsecache``.

All argument parsing happens in ``browsecache.cli``.
"""

from .cli import main


if __name__ == "__main__":
    raise SystemExit(main())
