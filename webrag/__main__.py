"""Allow `python -m webrag`."""

import sys

from webrag.cli import main

sys.exit(main())
