"""Allow ``python -m stacklens``."""

import sys

from stacklens.app import main

sys.exit(main())
