"""Allow ``python -m objlang``."""

import sys

from objlang.cli import main

if __name__ == "__main__":
    sys.exit(main())
