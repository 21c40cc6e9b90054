"""Allow running as ``python -m annotrain``."""

import sys

from .cli import main

sys.exit(main())
