"""Allow ``python -m hurry``."""

import sys

from hurry.cli import main

if __name__ == "__main__":
    sys.exit(main())
