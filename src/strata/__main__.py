"""Allow ``python -m strata``."""
from __future__ import annotations

import sys

from strata.cli._dispatcher import main

if __name__ == "__main__":
    sys.exit(main())
