"""Module entrypoint for ``python -m lazyast``.

All argument parsing and runtime setup happen in ``lazyast.cli``.
"""

from .cli import main


if __name__ == "__main__":
    main()
