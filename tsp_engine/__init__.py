"""
Exact and metaheuristic solvers for the travelling salesman problem on dense directed graphs.
"""

from .errors import IndexOutOfRange, ProblemEmpty, ProblemSourceUnavailable, TSPError
from .problem import DistanceMatrix
from .tour import Tour

__all__ = [
    "DistanceMatrix",
    "Tour",
    "TSPError",
    "ProblemEmpty",
    "ProblemSourceUnavailable",
    "IndexOutOfRange",
    "data",
    "evaluation",
    "solvers",
]
