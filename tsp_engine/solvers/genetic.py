import random
from dataclasses import dataclass
from typing import List, Optional

import torch

from ..problem import DistanceMatrix
from ..tour import Tour
from .base import ConfigurableSolver, Deadline, tour_lengths_torch
from .genome import Crossover, crossover, mutate
from .heuristics import random_tour


@dataclass
class GeneticConfig:
    population_size: int = 100
    elite_size: int = 20
    mutation_rate: float = 0.01
    generations: int = 500
    crossover: Crossover = Crossover.OX
    time_limit: Optional[float] = None
    device: str = "cpu"

    def __post_init__(self):
        self.crossover = Crossover(self.crossover)
        if self.population_size < 1:
            raise ValueError("population_size must be positive.")
        if not 0 <= self.elite_size <= self.population_size:
            raise ValueError("elite_size must be between 0 and population_size.")
        if not 0.0 <= self.mutation_rate <= 1.0:
            raise ValueError("mutation_rate must be in [0, 1].")
        if self.generations < 0:
            raise ValueError("generations must be non-negative.")


def selection_weights(population: List[Tour]) -> List[float]:
    """Roulette weights: the complement of each tour's share of the total distance."""
    total = sum(t.distance for t in population)
    if total == 0:
        return [1.0] * len(population)
    weights = [1.0 - t.distance / total for t in population]
    if sum(weights) <= 0:
        return [1.0] * len(population)
    return weights


class GeneticSolver(ConfigurableSolver):
    """
    Generational GA over tours.

    The population is kept sorted by distance. Each generation the elite prefix
    is copied through untouched, the rest of the mating pool is drawn by roulette
    wheel, consecutive pool members are recombined (the last with the first) and
    each child is inverted-mutated with probability ``mutation_rate``.
    """

    name = "genetic"
    config_cls = GeneticConfig

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.population: List[Tour] = []
        self.generation = 0

    def init_population(self, problem: DistanceMatrix, rng: random.Random) -> None:
        self.population = [random_tour(problem, rng) for _ in range(self.config.population_size)]
        self.population.sort(key=lambda t: t.distance)
        self.generation = 0

    def select(self, rng: random.Random) -> List[Tour]:
        cfg = self.config
        elites = self.population[: cfg.elite_size]
        rest = cfg.population_size - cfg.elite_size
        if rest == 0:
            return list(elites)
        drawn = rng.choices(self.population, weights=selection_weights(self.population), k=rest)
        return list(elites) + drawn

    def breed(self, pool: List[Tour], rng: random.Random) -> List[Tour]:
        cfg = self.config
        children = []
        for i in range(cfg.elite_size, len(pool)):
            child = crossover(pool[i], pool[(i + 1) % len(pool)], cfg.crossover, rng)
            if rng.random() < cfg.mutation_rate:
                mutate(child, rng)
            children.append(child)
        return children

    def step(self, dist: torch.Tensor, rng: random.Random) -> None:
        cfg = self.config
        pool = self.select(rng)
        children = self.breed(pool, rng)
        for child, length in zip(children, tour_lengths_torch(dist, children)):
            child.distance = int(length)
        self.population = [t.copy() for t in self.population[: cfg.elite_size]] + children
        self.population.sort(key=lambda t: t.distance)
        self.generation += 1

    def best(self) -> Tour:
        return self.population[0]

    def _solve(self, problem: DistanceMatrix, rng: random.Random) -> Tour:
        cfg = self.config
        dist = problem.tensor(cfg.device)
        self.init_population(problem, rng)
        best = self.best().copy()
        deadline = Deadline(cfg.time_limit)
        while (deadline.active and not deadline.expired()) or (not deadline.active and self.generation < cfg.generations):
            self.step(dist, rng)
            if self.best().shorter_than(best):
                best = self.best().copy()
                self.log(f"gen {self.generation}: best={best.distance}")
        return best
