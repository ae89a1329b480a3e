"""Pytest configuration and shared fixtures for fnt tests.

This module provides:
- Deterministic RNG fixtures for numpy
- A helper that runs a bare method through the next/value/done loop
"""

import os
from typing import Callable, Optional

import numpy as np
import pytest

from fnt import logging as fnt_logging
from fnt.methods import Method


def _seed() -> int:
    return int(os.environ.get("TEST_RNG_SEED", "0"))


@pytest.fixture(scope="function")
def rng() -> np.random.Generator:
    """Provide a deterministic numpy RNG for tests.

    Uses seed from TEST_RNG_SEED environment variable (default: 0).

    Returns:
        A seeded numpy.random.Generator instance.
    """
    return np.random.default_rng(_seed())


@pytest.fixture(scope="function")
def rng_seed() -> int:
    """Integer seed for methods that own their generator."""
    return _seed()


@pytest.fixture(scope="function", autouse=True)
def restore_default_verbosity():
    """Undo set_verbosity() calls made by a test."""
    previous = fnt_logging.get_verbosity()
    yield
    fnt_logging.set_verbosity(previous)


def run_method(
    method: Method,
    fun: Callable[[np.ndarray], float],
    grad: Optional[Callable[[np.ndarray], np.ndarray]] = None,
    max_evaluations: int = 10_000,
) -> int:
    """Drive ``method`` until done; return the number of evaluations."""
    evaluations = 0
    while not method.done():
        assert evaluations < max_evaluations, "method did not finish"
        x = method.next().values
        if grad is None:
            method.value(x, fun(x))
        else:
            method.value_gradient(x, fun(x), grad(x))
        evaluations += 1
    return evaluations


@pytest.fixture
def run() -> Callable[..., int]:
    return run_method
