"""Allow ``python -m agentpro``."""

import sys

from agentpro.cli._dispatcher import main

sys.exit(main())
