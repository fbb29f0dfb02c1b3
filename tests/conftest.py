"""Shared fixtures: a cheap Sphere problem and seeded engines."""

import numpy as np
import pytest

from swarmops.core import FunctionProblem
from swarmops.prng import MersenneTwister, Sampler


def sphere(x):
    return float(np.sum(np.asarray(x) ** 2))


def sphere_gradient(x):
    return 2.0 * np.asarray(x)


@pytest.fixture
def sphere_problem():
    """Five-dimensional Sphere on [-10, 10]."""
    return FunctionProblem(sphere, [(-10.0, 10.0)] * 5, gradient=sphere_gradient, name="Sphere")


@pytest.fixture
def engine():
    return MersenneTwister(42)


@pytest.fixture
def rng(engine):
    return Sampler(engine)
