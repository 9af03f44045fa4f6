"""Entry point for 'python -m inkpost' command."""

from inkpost.cli import main

if __name__ == "__main__":
    main()
