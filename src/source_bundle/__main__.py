"""Allow running as ``python -m source_bundle``."""

from .cli import main

if __name__ == "__main__":
    main()
