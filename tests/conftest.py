"""Pytest configuration and shared fixtures for numsolve tests.

This module provides:
- A deterministic RNG fixture for numpy
- A call-counting wrapper for checking evaluation budgets
"""

import os
from typing import Callable

import numpy as np
import pytest


class CallCounter:
    """Wrap a function and count how often it is called."""

    def __init__(self, fun: Callable):
        self.fun = fun
        self.calls = 0
        self.points: list = []

    def __call__(self, x):
        self.calls += 1
        self.points.append(x)
        return self.fun(x)


@pytest.fixture(scope="function")
def rng() -> np.random.Generator:
    """Provide a deterministic numpy RNG for tests.

    Uses seed from TEST_RNG_SEED environment variable (default: 0).
    """
    seed = int(os.environ.get("TEST_RNG_SEED", "0"))
    return np.random.default_rng(seed)


@pytest.fixture
def counted() -> Callable[[Callable], CallCounter]:
    """Factory fixture wrapping a function in a :class:`CallCounter`."""
    return CallCounter
