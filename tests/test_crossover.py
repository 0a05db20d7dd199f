import random

import pytest

from tsp_engine import Tour
from tsp_engine.solvers import Crossover
from tsp_engine.solvers.genome import (
    crossover,
    mutate,
    non_wrapping_order_crossover,
    order_crossover,
    partially_mapped_crossover,
)

P1 = [1, 2, 3, 4, 5, 6, 7, 8, 9]
P2 = [9, 3, 7, 8, 2, 6, 5, 1, 4]


def test_order_crossover_wraps_from_segment_end():
    child = order_crossover(P1, P2, 3, 5)
    # after position 5 parent2 reads 5 1 4 9 3 7 8 2 6; 4, 5 and 6 are taken
    assert child == [7, 8, 2, 4, 5, 6, 1, 9, 3]
    assert child[3:6] == [4, 5, 6]
    assert child[6:] + child[:3] == [1, 9, 3, 7, 8, 2]


def test_partially_mapped_crossover_follows_mapping_chains():
    child = partially_mapped_crossover(P1, P2, 3, 5)
    # mapping 4->8, 5->2, 6->6; parent2's 5 at position 6 chases 5->2
    assert child == [9, 3, 7, 4, 5, 6, 2, 1, 8]


def test_non_wrapping_order_crossover_slides_survivors():
    child = non_wrapping_order_crossover(P1, P2, 3, 5)
    # survivors of parent2 in order: 9 3 7 8 2 1
    assert child == [9, 3, 7, 4, 5, 6, 8, 2, 1]


@pytest.mark.parametrize("op", [order_crossover, partially_mapped_crossover, non_wrapping_order_crossover])
@pytest.mark.parametrize("start,end", [(0, 0), (0, 8), (2, 6), (8, 8), (4, 7)])
def test_children_are_permutations_keeping_segment(op, start, end):
    child = op(P1, P2, start, end)
    assert sorted(child) == sorted(P1)
    assert child[start : end + 1] == P1[start : end + 1]


@pytest.mark.parametrize("operator", list(Crossover))
def test_tour_crossover_keeps_origin(operator, rng):
    p1 = Tour([0, 1, 2, 3, 4, 5, 0])
    p2 = Tour([0, 5, 3, 1, 4, 2, 0])
    for _ in range(20):
        child = crossover(p1, p2, operator, rng)
        assert child.is_valid(6)
        assert child.distance is None


def test_crossover_of_trivial_tours(rng):
    child = crossover(Tour([0, 0]), Tour([0, 0]), Crossover.PMX, rng)
    assert child.cities == [0, 0]


def test_mutate_inverts_interior():
    tour = Tour([0, 1, 2, 3, 4, 5, 0])
    mutate(tour, random.Random(3))
    assert tour.is_valid(6)
    assert tour.cities != [0, 1, 2, 3, 4, 5, 0]
