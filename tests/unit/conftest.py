"""
Unit test fixtures.

All unit tests should be:
- Fast (< 100ms)
- Isolated (in-memory repository, default policy)
- Deterministic (same result every time)
"""

import pytest
from datetime import datetime


@pytest.fixture
def fixed_time():
    """Fixed datetime for deterministic tests."""
    return datetime(2024, 1, 15, 12, 0, 0)


@pytest.fixture
def clients(engine):
    """
    Register n fresh clients at the initial trust level.

    Usage:
        c1, c2 = clients(2)
    """
    def run(n: int):
        return [engine.register_client() for _ in range(n)]

    return run


@pytest.fixture
def policy_data():
    """Raw policy mapping as it would appear in trust_policy.yaml."""
    return {
        "initial_trust": 0.4,
        "edit_tolerance": 0.1,
        "vote_weight_cap": 0.9,
        "vote_weight_ramp": 10,
    }
