import math
import random
from typing import List, Tuple

import numpy as np

from ..problem import DistanceMatrix
from ..tour import Tour
from .base import Solver, tour_length


class BruteForceSolver(Solver):
    """Evaluates every ordering of the interior cities; optimal by exhaustion."""

    name = "bf"

    def _solve(self, problem: DistanceMatrix, rng: random.Random) -> Tour:
        size = problem.size
        path = Tour.identity(size)
        path.distance = tour_length(problem, path)
        best = path.copy()
        while path.permute(1, size - 1):
            path.distance = tour_length(problem, path)
            if path.distance < best.distance:
                best = path.copy()
        return best


# stack frame: (city, distance so far, depth)
Node = Tuple[int, int, int]


class BranchAndBoundSolver(Solver):
    """
    Depth-first search over partial tours with an explicit stack.

    A child is dropped as soon as its partial distance reaches the best complete
    tour found so far, so the bound only tightens. Equal-length tours found later
    do not replace the incumbent.
    """

    name = "bnb"

    def _solve(self, problem: DistanceMatrix, rng: random.Random) -> Tour:
        size = problem.size
        rows = problem.rows
        best = Tour()
        best_dist = math.inf
        current = Tour([-1] * size + [0])
        stack: List[Node] = [(0, 0, 0)]

        while stack:
            city, dist, level = stack.pop()
            current.cities[level] = city
            next_level = level + 1

            if level == size - 1:
                total = dist + rows[city][0]
                if total < best_dist:
                    best = current.copy()
                    best_dist = total
                continue

            for nxt in range(1, size):
                if nxt == city or current.in_path(nxt, next_level):
                    continue
                next_dist = dist + rows[city][nxt]
                if next_dist >= best_dist:
                    continue
                stack.append((nxt, next_dist, next_level))

        best.distance = tour_length(problem, best)
        return best


class HeldKarpSolver(Solver):
    """
    Subset dynamic programming over (city, visited set) states.

    ``cost[mask, city]`` is the cheapest way to leave ``city`` having visited
    exactly ``mask`` (origin bit always set), visit the rest and get back to the
    origin. Masks are filled from the full set downwards so every lookup of
    ``mask | bit`` is already final; ``succ`` keeps the arg-min next city for
    walking the tour back out of the tables.
    """

    name = "dp"
    max_cities = 22

    def _solve(self, problem: DistanceMatrix, rng: random.Random) -> Tour:
        size = problem.size
        if size > self.max_cities:
            raise ValueError(
                f"Held-Karp needs O(N * 2^N) memory; {size} cities exceeds the limit of {self.max_cities}."
            )
        cost, succ = self.tables(problem)
        cities = self.reconstruct(succ, size)
        tour = Tour(cities, int(cost[1, 0]))
        self.log(f"optimum {tour.distance}")
        return tour

    @staticmethod
    def tables(problem: DistanceMatrix) -> Tuple[np.ndarray, np.ndarray]:
        size = problem.size
        dist = problem.matrix
        full = (1 << size) - 1
        bits = 1 << np.arange(size, dtype=np.int64)
        cost = np.full((full + 1, size), -1, dtype=np.int64)
        succ = np.full((full + 1, size), -1, dtype=np.int64)

        cost[full, :] = dist[:, 0]
        # only odd masks contain the origin
        for mask in range(full - 2, 0, -2):
            unvisited = np.flatnonzero((bits & mask) == 0)
            reachable = cost[mask | bits[unvisited], unvisited]
            for city in np.flatnonzero((bits & mask) != 0):
                candidates = dist[city, unvisited] + reachable
                k = int(np.argmin(candidates))
                cost[mask, city] = candidates[k]
                succ[mask, city] = unvisited[k]
        return cost, succ

    @staticmethod
    def reconstruct(succ: np.ndarray, size: int) -> List[int]:
        cities = [0]
        city, mask = 0, 1
        while succ[mask, city] != -1:
            city = int(succ[mask, city])
            mask |= 1 << city
            cities.append(city)
        cities.append(0)
        if len(cities) != size + 1:
            raise RuntimeError("Held-Karp tables do not describe a full tour.")
        return cities
