import importlib
import random
import typing

import numpy as np
import pytest

from tsp_engine import DistanceMatrix, ProblemEmpty
from tsp_engine.solvers import (
    SOLVERS,
    BranchAndBoundSolver,
    BruteForceSolver,
    HeldKarpSolver,
)

EXACT = [BruteForceSolver, BranchAndBoundSolver, HeldKarpSolver]


def test_solvers_package_imports():
    solvers = importlib.import_module("tsp_engine.solvers")
    assert sorted(solvers.SOLVERS) == ["annealing", "bf", "bnb", "dp", "genetic", "tabu"]
    hints = typing.get_type_hints(solvers.Solver._solve)
    assert hints["rng"] is random.Random
    assert solvers.HeldKarpSolver().random(4, seed=0).size == 4


@pytest.mark.parametrize("solver_cls", EXACT)
def test_scenario_optimum(solver_cls, scenario):
    tour = solver_cls(scenario).solve()
    assert tour.distance == 80
    assert tour.cities in ([0, 1, 3, 2, 0], [0, 2, 3, 1, 0])
    assert scenario.path_dist(tour) == 80


@pytest.mark.parametrize("solver_cls", list(SOLVERS.values()))
def test_empty_problem_raises(solver_cls):
    with pytest.raises(ProblemEmpty):
        solver_cls().solve()
    with pytest.raises(ProblemEmpty):
        solver_cls().solve(DistanceMatrix())


@pytest.mark.parametrize("size", range(2, 11))
def test_exact_solvers_agree(size):
    problem = DistanceMatrix.random(size, seed=100 + size)
    tours = [cls(problem).solve() for cls in EXACT]
    for tour in tours:
        assert tour.is_valid(size)
        assert problem.path_dist(tour) == tour.distance
    assert len({t.distance for t in tours}) == 1


@pytest.mark.parametrize("solver_cls", EXACT)
def test_single_city(solver_cls):
    tour = solver_cls(DistanceMatrix([[5]])).solve()
    assert tour.cities == [0, 0]
    assert tour.distance == 0


@pytest.mark.parametrize("solver_cls", EXACT)
def test_three_cities_asymmetric(solver_cls):
    problem = DistanceMatrix([[0, 1, 50], [50, 0, 1], [1, 50, 0]])
    tour = solver_cls(problem).solve()
    assert tour.cities == [0, 1, 2, 0]
    assert tour.distance == 3


def test_branch_and_bound_keeps_first_of_equal_tours():
    # every tour costs 4
    problem = DistanceMatrix(np.ones((4, 4), dtype=int))
    tour = BranchAndBoundSolver(problem).solve()
    assert tour.distance == 4
    # deepest-first stack pops the highest-numbered child first
    assert tour.cities == [0, 3, 2, 1, 0]


def test_held_karp_tables_consistent(random_problem):
    cost, succ = HeldKarpSolver.tables(random_problem)
    cities = HeldKarpSolver.reconstruct(succ, random_problem.size)
    assert random_problem.tour_distance(cities) == int(cost[1, 0])


def test_held_karp_size_limit():
    solver = HeldKarpSolver(DistanceMatrix.random(HeldKarpSolver.max_cities + 1, seed=0))
    with pytest.raises(ValueError):
        solver.solve()


def test_set_problem_and_random():
    solver = BruteForceSolver()
    problem = solver.random(5, seed=9)
    assert solver.problem is problem
    first = solver.solve()
    solver.set_problem(DistanceMatrix.random(6, seed=9))
    assert solver.solve().is_valid(6)
    assert first.is_valid(5)
