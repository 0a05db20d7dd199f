from .annealing import AnnealingConfig, SimulatedAnnealingSolver
from .base import Solver, SolveResult, tour_length, tour_lengths_torch
from .exact import BranchAndBoundSolver, BruteForceSolver, HeldKarpSolver
from .genetic import GeneticConfig, GeneticSolver
from .genome import Crossover
from .heuristics import Neighbourhood, nearest_neighbor_tour, random_tour
from .tabu import TabuConfig, TabuList, TabuSearchSolver

SOLVERS = {
    cls.name: cls
    for cls in (
        BruteForceSolver,
        BranchAndBoundSolver,
        HeldKarpSolver,
        TabuSearchSolver,
        SimulatedAnnealingSolver,
        GeneticSolver,
    )
}

__all__ = [
    "Solver",
    "SolveResult",
    "SOLVERS",
    "tour_length",
    "tour_lengths_torch",
    "BruteForceSolver",
    "BranchAndBoundSolver",
    "HeldKarpSolver",
    "TabuSearchSolver",
    "TabuConfig",
    "TabuList",
    "SimulatedAnnealingSolver",
    "AnnealingConfig",
    "GeneticSolver",
    "GeneticConfig",
    "Crossover",
    "Neighbourhood",
    "nearest_neighbor_tour",
    "random_tour",
]
