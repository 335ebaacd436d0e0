"""Entry point for ``python -m stockstats``."""

from stockstats.cli import main

if __name__ == "__main__":
    main()
