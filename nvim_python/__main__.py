"""Allow ``python -m nvim_python``."""

import sys

from nvim_python.cli import main

sys.exit(main())
