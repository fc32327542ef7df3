"""Allow running the hook with ``python -m dnshook``."""

import sys

from dnshook.cli import main

sys.exit(main())
