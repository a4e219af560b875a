"""Allow ``python -m x_influx``."""

import sys

from x_influx.cli import main

sys.exit(main())
