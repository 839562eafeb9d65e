"""Entry point for ``python -m wrac_client``."""

from .cli import main

if __name__ == "__main__":
    main()
