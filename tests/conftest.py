# -----------------------------------------------------------------------------
# Author: Frank Campbell Bogle
# Created: 2025-11-12
# Updated: 2026-02-11
# Description: conftest.py
# -----------------------------------------------------------------------------

import sys
from pathlib import Path

# add project root (packages) and tests dir (shared fakes) to sys.path
ROOT = Path(__file__).resolve().parents[1]
sys.path.insert(0, str(ROOT))
sys.path.insert(0, str(Path(__file__).resolve().parent))
