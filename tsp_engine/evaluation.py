import time
from dataclasses import dataclass, field
from typing import Callable, List, Optional, Sequence

from .problem import DistanceMatrix
from .solvers.base import SolveResult, Solver, log, tour_length, tour_lengths_torch
from .tour import Tour

Hook = Optional[Callable[[], None]]


@dataclass
class Timing:
    solver_name: str
    runtimes: List[float] = field(default_factory=list)
    tour: Optional[Tour] = None

    @property
    def mean(self) -> float:
        if not self.runtimes:
            return float("nan")
        return sum(self.runtimes) / len(self.runtimes)


def time_solver(solver: Solver, runs: int, pre: Hook = None, post: Hook = None, verbose: bool = False) -> Timing:
    """Run ``solver.solve()`` ``runs`` times; only the solve call itself is timed."""
    timing = Timing(solver_name=solver.name)
    for i in range(runs):
        if verbose:
            log(f"{solver.name}: run {i + 1}/{runs}")
        if pre is not None:
            pre()
        start = time.perf_counter()
        tour = solver.solve()
        timing.runtimes.append(time.perf_counter() - start)
        if post is not None:
            post()
        timing.tour = tour
    return timing


def evaluate_solver(solver: Solver, problem: DistanceMatrix, optimum: Optional[float] = None) -> SolveResult:
    start = time.perf_counter()
    tour = solver.solve(problem)
    runtime = time.perf_counter() - start
    length = tour_length(problem, tour)
    if length != tour.distance:
        raise RuntimeError(f"{solver.name} reported distance {tour.distance} for a tour of length {length}.")
    return SolveResult(tour=tour, length=length, solver_name=solver.name, optimum=optimum, runtime=runtime)


def verify_lengths(problem: DistanceMatrix, tours: Sequence[Tour], device="cpu") -> bool:
    """Cross-check cached tour distances against a batched torch evaluation."""
    lengths = tour_lengths_torch(problem.tensor(device), tours)
    return all(int(length) == t.distance for length, t in zip(lengths, tours))


def benchmark(
    solvers: Sequence[Solver],
    sizes: Sequence[int],
    runs: int,
    seed: Optional[int] = None,
    verbose: bool = False,
) -> List[dict]:
    """Mean solve time per (solver, size); each run gets a fresh random problem."""
    rows = []
    for size in sizes:
        for solver in solvers:
            counter = iter(range(runs))

            def regenerate(solver=solver, size=size, counter=counter):
                run_seed = None if seed is None else seed + size * 1000 + next(counter)
                solver.random(size, seed=run_seed)

            timing = time_solver(solver, runs, pre=regenerate, verbose=verbose)
            if timing.tour is not None and not verify_lengths(solver.problem, [timing.tour]):
                raise RuntimeError(f"{solver.name} returned an inconsistent tour distance.")
            rows.append({"solver": solver.name, "size": size, "runs": runs, "mean": timing.mean})
            if verbose:
                log(f"{solver.name} n={size}: mean {timing.mean:.6f}s over {runs} runs")
    return rows
