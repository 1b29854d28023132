"""E2E test fixtures — mock provisioner only, no AWS account needed."""

from __future__ import annotations

import os
import sys

sys.path.insert(0, os.path.join(os.path.dirname(__file__), "..", ".."))
