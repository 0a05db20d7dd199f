import math
import random
from dataclasses import dataclass
from typing import Optional

from ..problem import DistanceMatrix
from ..tour import Tour
from .base import ConfigurableSolver, Deadline
from .heuristics import Neighbourhood, random_neighbour, random_tour


@dataclass
class AnnealingConfig:
    initial_temperature: float = 100.0
    end_temperature: float = 0.1
    cooling_rate: float = 0.01
    iterations: int = 450
    neighbourhood: Neighbourhood = Neighbourhood.INVERT
    time_limit: Optional[float] = None

    def __post_init__(self):
        self.neighbourhood = Neighbourhood(self.neighbourhood)
        if self.initial_temperature <= 0 or self.end_temperature <= 0:
            raise ValueError("temperatures must be positive.")
        if not 0.0 < self.cooling_rate < 1.0:
            raise ValueError("cooling_rate must be in (0, 1).")
        if self.iterations < 1:
            raise ValueError("iterations must be positive.")


def acceptance_probability(delta: int, temperature: float) -> float:
    if delta <= 0:
        return 1.0
    if temperature <= 0:
        return 0.0
    return math.exp(-delta / temperature)


class SimulatedAnnealingSolver(ConfigurableSolver):
    """
    Random-neighbour walk from a random tour with Metropolis acceptance.

    Each temperature level runs ``iterations`` steps, then the temperature is
    multiplied by ``1 - cooling_rate``. Without a time limit the run ends once the
    temperature drops to ``end_temperature``.
    """

    name = "annealing"
    config_cls = AnnealingConfig

    def _solve(self, problem: DistanceMatrix, rng: random.Random) -> Tour:
        cfg = self.config
        current = random_tour(problem, rng)
        best = current.copy()
        if problem.size < 3:
            return best

        deadline = Deadline(cfg.time_limit)
        temperature = cfg.initial_temperature
        levels = 0
        while (deadline.active and not deadline.expired()) or (not deadline.active and temperature > cfg.end_temperature):
            for _ in range(cfg.iterations):
                candidate = random_neighbour(problem, current, cfg.neighbourhood, rng)
                delta = candidate.distance - current.distance
                if delta <= 0:
                    current = candidate
                    if current.distance < best.distance:
                        best = current.copy()
                elif acceptance_probability(delta, temperature) > rng.random():
                    current = candidate
            temperature *= 1 - cfg.cooling_rate
            levels += 1
        self.log(f"{levels} temperature levels, final temperature {temperature:.4f}, best={best.distance}")
        return best
