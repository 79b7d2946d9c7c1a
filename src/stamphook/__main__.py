"""Entry point for `python -m stamphook`."""

from stamphook.cli import main

if __name__ == "__main__":
    main()
