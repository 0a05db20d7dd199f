"""Shared fixtures for the solver tests."""

import random

import pytest

from tsp_engine import DistanceMatrix

SCENARIO = [
    [0, 10, 15, 20],
    [10, 0, 35, 25],
    [15, 35, 0, 30],
    [20, 25, 30, 0],
]


@pytest.fixture
def scenario():
    """4-city instance whose optimum is 80 (0-1-3-2-0 or its reverse)."""
    return DistanceMatrix(SCENARIO)


@pytest.fixture
def rng():
    return random.Random(1234)


@pytest.fixture(params=[5, 7, 9])
def random_problem(request):
    return DistanceMatrix.random(request.param, seed=request.param)
