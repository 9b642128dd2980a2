"""Entry point for ``python -m vaultbar``."""

import sys

from vaultbar.cli import main

if __name__ == "__main__":
    sys.exit(main())
