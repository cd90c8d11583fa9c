"""Allow ``python -m streakkeeper``."""

from .cli import main

if __name__ == "__main__":
    main()
