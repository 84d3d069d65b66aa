import sys
import os
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

import random

import pytest


@pytest.fixture
def seeded_rng():
    """Factory for deterministic rng(n) -> bytes sources."""
    def make(seed: int = 0):
        return random.Random(seed).randbytes
    return make
