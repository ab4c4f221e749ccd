"""
Pytest configuration and fixtures for reproducible testing.

Simulators never touch the global NumPy RNG; randomness is passed in as a
Generator, so tests take the ``rng`` fixture for deterministic draws.
"""
import pytest
import numpy as np


def pytest_configure(config):
    config.addinivalue_line("markers", "slow: long-running simulation tests")


@pytest.fixture(scope="function")
def rng():
    """Fresh seeded Generator for each test function.

    Example:
        def test_something(rng):
            data = rng.standard_normal(100)
    """
    return np.random.default_rng(42)
