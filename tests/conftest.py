"""
Shared fixtures.
"""

import pytest

from intake.core.config import Settings


@pytest.fixture
def settings():
    """Settings with simulated latency disabled and no .env file."""
    return Settings(_env_file=None, simulate_latency=False, redis_url=None)
