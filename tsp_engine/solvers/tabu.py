import random
from dataclasses import dataclass
from typing import List, Optional, Tuple

from ..problem import DistanceMatrix
from ..tour import Tour
from .base import ConfigurableSolver, Deadline, tour_length
from .heuristics import (
    Neighbourhood,
    apply_move,
    nearest_neighbor_tour,
    neighbourhood_moves,
    random_tour,
)


@dataclass
class TabuConfig:
    iterations: int = 1000
    cadence: int = 10
    neighbourhood: Neighbourhood = Neighbourhood.SWAP
    reset_threshold: int = 50
    stop_threshold: int = 200
    time_limit: Optional[float] = None

    def __post_init__(self):
        self.neighbourhood = Neighbourhood(self.neighbourhood)
        if self.iterations < 0:
            raise ValueError("iterations must be non-negative.")
        if self.cadence < 0:
            raise ValueError("cadence must be non-negative.")
        if self.reset_threshold < 1 or self.stop_threshold < 1:
            raise ValueError("thresholds must be positive.")


class TabuList:
    """Per-move counters of iterations left before the move is legal again."""

    def __init__(self, size: int):
        self.size = size
        self.counters: List[List[int]] = [[0] * size for _ in range(size)]

    def is_tabu(self, x: int, y: int) -> bool:
        return self.counters[x][y] > 0

    def forbid(self, x: int, y: int, cadence: int, symmetric: bool = True) -> None:
        self.counters[x][y] = cadence
        if symmetric:
            self.counters[y][x] = cadence

    def tick(self) -> None:
        for row in self.counters:
            for j, left in enumerate(row):
                if left:
                    row[j] = left - 1

    def reset(self) -> None:
        for row in self.counters:
            row[:] = [0] * self.size


class TabuSearchSolver(ConfigurableSolver):
    """
    Steepest-descent over non-tabu neighbours starting from the greedy tour.

    The best neighbour is always taken, even when worse than the current tour.
    After ``reset_threshold`` iterations without a new best the search jumps to a
    random tour with a clean tabu list; after ``stop_threshold`` it gives up.
    """

    name = "tabu"
    config_cls = TabuConfig

    def best_neighbour(self, problem: DistanceMatrix, tour: Tour, tabu: TabuList) -> Tuple[Optional[Tour], Optional[Tuple[int, int]]]:
        move = self.config.neighbourhood
        best: Optional[Tour] = None
        best_move = None
        for x, y in neighbourhood_moves(problem.size, move):
            if tabu.is_tabu(x, y):
                continue
            neighbour = tour.copy()
            apply_move(neighbour, move, x, y)
            neighbour.distance = tour_length(problem, neighbour)
            if best is None or neighbour.distance < best.distance:
                best = neighbour
                best_move = (x, y)
        return best, best_move

    def _solve(self, problem: DistanceMatrix, rng: random.Random) -> Tour:
        cfg = self.config
        current = nearest_neighbor_tour(problem)
        best = current.copy()
        if problem.size < 3:
            return best

        tabu = TabuList(problem.size)
        deadline = Deadline(cfg.time_limit)
        stall = 0
        since_reset = 0
        iteration = 0
        while (deadline.active and not deadline.expired()) or (not deadline.active and iteration < cfg.iterations):
            iteration += 1
            neighbour, move = self.best_neighbour(problem, current, tabu)
            if neighbour is not None:
                current = neighbour
                tabu.forbid(*move, cfg.cadence, symmetric=cfg.neighbourhood.symmetric)

            if current.shorter_than(best):
                best = current.copy()
                stall = 0
                since_reset = 0
            else:
                stall += 1
                since_reset += 1
            tabu.tick()

            if not deadline.active and stall >= cfg.stop_threshold:
                self.log(f"no improvement for {stall} iterations, stopping at {iteration}")
                break
            if since_reset >= cfg.reset_threshold:
                self.log(f"restart at iteration {iteration}, best={best.distance}")
                current = random_tour(problem, rng)
                tabu.reset()
                since_reset = 0
        return best
