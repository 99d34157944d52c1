"""Allow ``python -m content_cache``."""

import sys

from content_cache.cli import main

sys.exit(main())
