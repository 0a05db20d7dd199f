import enum
import random
from typing import Iterator, Tuple

from ..problem import DistanceMatrix
from ..tour import Tour
from .base import tour_length


class Neighbourhood(enum.Enum):
    SWAP = "swap"
    INSERT = "insert"
    INVERT = "invert"

    @property
    def symmetric(self) -> bool:
        # move(x, y) and move(y, x) give the same tour
        return self is not Neighbourhood.INSERT


def apply_move(tour: Tour, move: Neighbourhood, x: int, y: int) -> None:
    if move is Neighbourhood.SWAP:
        tour.swap(x, y)
    elif move is Neighbourhood.INSERT:
        tour.insert(x, y)
    elif move is Neighbourhood.INVERT:
        tour.invert(x, y)
    else:
        raise ValueError(f"Unknown neighbourhood {move!r}")


def neighbourhood_moves(size: int, move: Neighbourhood) -> Iterator[Tuple[int, int]]:
    """
    Distinct 2-city moves over the interior positions [1, size - 1].

    Symmetric moves are yielded once with x < y. For INSERT, moving x to x - 1
    equals moving x - 1 to x, so only the latter is kept.
    """
    for x in range(1, size):
        for y in range(1, size):
            if x == y:
                continue
            if move.symmetric and x > y:
                continue
            if move is Neighbourhood.INSERT and y == x - 1:
                continue
            yield x, y


def nearest_neighbor_tour(problem: DistanceMatrix, start: int = 0) -> Tour:
    size = problem.size
    tour = [start]
    unvisited = set(range(size))
    unvisited.remove(start)
    current = start
    while unvisited:
        # ties go to the lowest city index
        nxt = min(sorted(unvisited), key=lambda city: problem.dist(current, city))
        tour.append(nxt)
        unvisited.remove(nxt)
        current = nxt
    tour.append(start)
    return Tour(tour, problem.tour_distance(tour))


def random_tour(problem: DistanceMatrix, rng: random.Random) -> Tour:
    interior = list(range(1, problem.size))
    rng.shuffle(interior)
    cities = [0] + interior + [0]
    return Tour(cities, problem.tour_distance(cities))


def random_positions(size: int, rng: random.Random) -> Tuple[int, int]:
    x = rng.randint(1, size - 1)
    y = rng.randint(1, size - 1)
    while y == x:
        y = rng.randint(1, size - 1)
    return x, y


def random_neighbour(problem: DistanceMatrix, tour: Tour, move: Neighbourhood, rng: random.Random) -> Tour:
    """Copy of ``tour`` with one random move applied; needs at least two interior cities."""
    x, y = random_positions(problem.size, rng)
    neighbour = tour.copy()
    apply_move(neighbour, move, x, y)
    neighbour.distance = tour_length(problem, neighbour)
    return neighbour
