"""
Root conftest.py - Set up Python path before test collection.

Lets the top-level modules (agent_platform, image_bot_service) and packages
import without an installed distribution.
"""

import sys
from pathlib import Path

impl_root = Path(__file__).parent
sys.path.insert(0, str(impl_root))
