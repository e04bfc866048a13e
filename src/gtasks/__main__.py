"""Allow running as ``python -m gtasks``."""

import sys

from gtasks.cli import main

sys.exit(main())
