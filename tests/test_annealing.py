import math

import pytest

from tsp_engine import DistanceMatrix
from tsp_engine.solvers import AnnealingConfig, HeldKarpSolver, Neighbourhood, SimulatedAnnealingSolver
from tsp_engine.solvers.annealing import acceptance_probability
from tsp_engine.solvers.heuristics import random_neighbour, random_tour


def test_acceptance_probability():
    assert acceptance_probability(-5, 10.0) == 1.0
    assert acceptance_probability(0, 10.0) == 1.0
    assert acceptance_probability(10, 10.0) == pytest.approx(math.exp(-1))
    assert acceptance_probability(10, 0.0) == 0.0


def test_random_neighbour_keeps_tour_valid(rng):
    problem = DistanceMatrix.random(8, seed=4)
    tour = random_tour(problem, rng)
    for move in Neighbourhood:
        neighbour = random_neighbour(problem, tour, move, rng)
        assert neighbour.is_valid(8)
        assert neighbour.distance == problem.path_dist(neighbour)
        assert neighbour.cities != tour.cities


@pytest.mark.parametrize("move", list(Neighbourhood))
def test_reaches_optimum_on_small_problem(move):
    problem = DistanceMatrix.random(6, seed=21)
    optimum = HeldKarpSolver(problem).solve().distance
    cfg = AnnealingConfig(cooling_rate=0.05, iterations=200, neighbourhood=move)
    tour = SimulatedAnnealingSolver(problem, cfg, seed=8).solve()
    assert tour.is_valid(6)
    assert tour.distance == problem.path_dist(tour)
    assert tour.distance == optimum


def test_seed_makes_runs_repeatable(random_problem):
    cfg = AnnealingConfig(cooling_rate=0.2, iterations=50)
    a = SimulatedAnnealingSolver(random_problem, cfg, seed=42).solve()
    b = SimulatedAnnealingSolver(random_problem, cfg, seed=42).solve()
    assert a == b


def test_time_limit_mode(scenario):
    cfg = AnnealingConfig(iterations=20, time_limit=0.05)
    tour = SimulatedAnnealingSolver(scenario, cfg, seed=0).solve()
    assert tour.distance == 80


def test_tiny_problems():
    for size in (1, 2):
        tour = SimulatedAnnealingSolver(DistanceMatrix.random(size, seed=size), seed=1).solve()
        assert tour.is_valid(size)


@pytest.mark.parametrize("field,value", [("cooling_rate", 0.0), ("cooling_rate", 1.0), ("end_temperature", 0), ("iterations", 0)])
def test_invalid_config(field, value):
    with pytest.raises(ValueError):
        AnnealingConfig(**{field: value})
