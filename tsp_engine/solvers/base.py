from __future__ import annotations

import dataclasses
import math
import random
import time
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import List, Optional, Sequence

import torch

from ..errors import ProblemEmpty
from ..problem import DistanceMatrix
from ..tour import Tour


def tour_length(problem: DistanceMatrix, tour: Tour) -> int:
    return problem.tour_distance(tour.cities)


def tour_lengths_torch(dist: torch.Tensor, tours: Sequence[Tour]) -> List[int]:
    """Lengths of equally sized tours in one gather on ``dist``'s device."""
    if not tours:
        return []
    idx = torch.tensor([t.cities for t in tours], device=dist.device, dtype=torch.long)
    a = idx[:, :-1]
    b = idx[:, 1:]
    return dist[a, b].sum(dim=1).tolist()


def log(msg: str) -> None:
    ts = time.strftime("%H:%M:%S")
    print(f"[{ts}] {msg}", flush=True)


class Solver(ABC):
    """
    Holds a problem instance and turns it into a tour with ``solve``.

    Passing a problem to ``solve`` replaces the held one first.
    """

    name: str = "base"

    def __init__(self, problem: Optional[DistanceMatrix] = None, seed: Optional[int] = None, verbose: bool = False):
        self.problem = problem if problem is not None else DistanceMatrix()
        self.seed = seed
        self.verbose = verbose

    def set_problem(self, problem: DistanceMatrix) -> None:
        self.problem = problem

    def random(self, size: int, seed: Optional[int] = None) -> DistanceMatrix:
        self.problem = DistanceMatrix.random(size, seed=seed)
        return self.problem

    def solve(self, problem: Optional[DistanceMatrix] = None) -> Tour:
        if problem is not None:
            self.set_problem(problem)
        if self.problem.empty:
            raise ProblemEmpty()
        return self._solve(self.problem, random.Random(self.seed))

    @abstractmethod
    def _solve(self, problem: DistanceMatrix, rng: random.Random) -> Tour:
        raise NotImplementedError

    def log(self, msg: str) -> None:
        if self.verbose:
            log(f"{self.name}: {msg}")


class ConfigurableSolver(Solver):
    """Solver whose tuning knobs live in a dataclass config."""

    config_cls = None

    def __init__(self, problem: Optional[DistanceMatrix] = None, config=None, seed: Optional[int] = None, verbose: bool = False):
        super().__init__(problem, seed=seed, verbose=verbose)
        self.config = config if config is not None else self.config_cls()

    def configure(self, **overrides) -> None:
        # replace() rejects unknown fields and reruns __post_init__ validation.
        self.config = dataclasses.replace(self.config, **overrides)


class Deadline:
    """Wall-clock time limit; never expires when ``limit`` is None."""

    def __init__(self, limit: Optional[float]):
        self.limit = limit
        self.start = time.perf_counter()

    @property
    def active(self) -> bool:
        return self.limit is not None

    def expired(self) -> bool:
        return self.active and time.perf_counter() - self.start > self.limit


@dataclass
class SolveResult:
    tour: Tour
    length: float
    solver_name: str
    optimum: Optional[float]
    runtime: float = 0.0

    @property
    def gap(self) -> float:
        if self.optimum is None or math.isclose(self.optimum, 0.0):
            return float("inf")
        return (self.length - self.optimum) / self.optimum
