"""
Tests for PongNet
=================

Run all tests:
    pytest tests/
"""

import os

# Pygame runs without a display in tests
os.environ.setdefault("SDL_VIDEODRIVER", "dummy")

# Suppress pygame's pkg_resources deprecation warning (pygame issue #4557)
import warnings
warnings.filterwarnings("ignore", category=UserWarning, module="pygame.pkgdata")
