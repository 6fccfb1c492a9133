"""Module entrypoint for ``python -m peekfm``.

All argument parsing and runtime setup happen in ``peekfm.cli``.
"""

from .cli import main


if __name__ == "__main__":
    main()
