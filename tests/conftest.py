"""
Pytest configuration for the test suite.

This file is automatically loaded by pytest and applies configuration
to all tests in the tests/ directory.
"""

import os
import sys

import numpy as np
import pytest
import torch

os.environ.setdefault("SDL_VIDEODRIVER", "dummy")
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from config import Config


def pytest_configure(config):
    """Configure pytest with custom markers and settings."""
    config.addinivalue_line(
        "markers", "slow: marks tests as slow (deselect with '-m \"not slow\"')"
    )


@pytest.fixture
def config():
    """Small, CPU-only test configuration."""
    cfg = Config()
    cfg.FORCE_CPU = True
    return cfg


@pytest.fixture
def rng():
    """Deterministic random source for the heuristic labeler."""
    return np.random.default_rng(1234)


@pytest.fixture(autouse=True)
def seed_torch():
    """Make weight initialization deterministic in every test."""
    torch.manual_seed(0)
    np.random.seed(0)
    yield
