from __future__ import annotations

import sys

from workflow_conformance.cli import main

sys.exit(main())
