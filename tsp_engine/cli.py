import argparse
import cmd
import shlex
import sys
from typing import List, Optional

from .data import load_problem, save_matrix
from .errors import TSPError
from .evaluation import benchmark, evaluate_solver
from .problem import DistanceMatrix
from .solvers import (
    SOLVERS,
    AnnealingConfig,
    Crossover,
    GeneticConfig,
    Neighbourhood,
    Solver,
    TabuConfig,
)
from .solvers.base import log


def build_solver(args) -> Solver:
    name = args.algorithm
    seed = getattr(args, "seed", None)
    verbose = getattr(args, "verbose", False)
    time_limit = getattr(args, "time_limit", None)
    if name == "tabu":
        cfg = TabuConfig(
            iterations=args.iterations,
            cadence=args.cadence,
            neighbourhood=args.neighbourhood or TabuConfig.neighbourhood,
            reset_threshold=args.reset_threshold,
            stop_threshold=args.stop_threshold,
            time_limit=time_limit,
        )
        return SOLVERS[name](config=cfg, seed=seed, verbose=verbose)
    if name == "annealing":
        cfg = AnnealingConfig(
            initial_temperature=args.initial_temperature,
            end_temperature=args.end_temperature,
            cooling_rate=args.cooling_rate,
            iterations=args.temperature_iterations,
            neighbourhood=args.neighbourhood or AnnealingConfig.neighbourhood,
            time_limit=time_limit,
        )
        return SOLVERS[name](config=cfg, seed=seed, verbose=verbose)
    if name == "genetic":
        cfg = GeneticConfig(
            population_size=args.population_size,
            elite_size=args.elite_size,
            mutation_rate=args.mutation_rate,
            generations=args.generations,
            crossover=Crossover(args.crossover),
            time_limit=time_limit,
            device=args.device,
        )
        return SOLVERS[name](config=cfg, seed=seed, verbose=verbose)
    return SOLVERS[name](seed=seed, verbose=verbose)


def _problem_from_args(args) -> DistanceMatrix:
    if args.file:
        log(f"loading problem from {args.file}")
        return load_problem(args.file)
    log(f"generating random problem of size {args.random}")
    return DistanceMatrix.random(args.random, seed=args.seed)


def solve(args) -> None:
    problem = _problem_from_args(args)
    solver = build_solver(args)
    result = evaluate_solver(solver, problem)
    log(f"{solver.name} finished in {result.runtime:.4f}s")
    print(result.tour)


def run_benchmark(args) -> None:
    solver = build_solver(args)
    rows = benchmark([solver], args.sizes, args.runs, seed=args.seed, verbose=True)
    for row in rows:
        print(f"{row['solver']:>10} n={row['size']:<4} runs={row['runs']:<4} mean={row['mean']:.6f}s")


def generate(args) -> None:
    problem = DistanceMatrix.random(args.size, seed=args.seed)
    save_matrix(problem, args.out)
    log(f"wrote {args.size}-city problem to {args.out}")


class TSPShell(cmd.Cmd):
    """Interactive loop over one held problem."""

    intro = "TSP shell. Type help or ? to list commands."
    prompt = "tsp> "

    def __init__(self, args=None, stdin=None, stdout=None):
        super().__init__(stdin=stdin, stdout=stdout)
        if stdin is not None:
            self.use_rawinput = False
        self.args = args if args is not None else build_parser().parse_args(["shell"])
        self.problem = DistanceMatrix()

    def _print(self, text) -> None:
        self.stdout.write(f"{text}\n")

    def onecmd(self, line):
        try:
            return super().onecmd(line)
        except (TSPError, ValueError) as exc:
            self._print(f"error: {exc}")
            return False

    def _run(self, algorithm: str) -> None:
        args = argparse.Namespace(**vars(self.args))
        args.algorithm = algorithm
        result = evaluate_solver(build_solver(args), self.problem)
        self._print(result.tour)
        self._print(f"time: {result.runtime:.4f}s")

    def do_load(self, arg):
        """load PATH: read a problem file"""
        self.problem = load_problem(arg.strip())
        self._print(f"loaded {self.problem.size} cities")

    def do_random(self, arg):
        """random N: generate a random problem with N cities"""
        self.problem = DistanceMatrix.random(int(arg))
        self._print(f"generated {self.problem.size} cities")

    def do_print(self, arg):
        """print: show the distance matrix"""
        self.stdout.write(str(self.problem))

    def do_bf(self, arg):
        """bf: brute force"""
        self._run("bf")

    def do_bnb(self, arg):
        """bnb: branch and bound"""
        self._run("bnb")

    def do_dp(self, arg):
        """dp: Held-Karp dynamic programming"""
        self._run("dp")

    def do_tabu(self, arg):
        """tabu: tabu search"""
        self._run("tabu")

    def do_annealing(self, arg):
        """annealing: simulated annealing"""
        self._run("annealing")

    def do_genetic(self, arg):
        """genetic: genetic algorithm"""
        self._run("genetic")

    def do_benchmark(self, arg):
        """benchmark ALGORITHM RUNS SIZE [SIZE ...]: mean solve time on random problems"""
        parts = shlex.split(arg)
        if len(parts) < 3:
            raise ValueError("usage: benchmark ALGORITHM RUNS SIZE [SIZE ...]")
        args = argparse.Namespace(**vars(self.args))
        args.algorithm = parts[0]
        if args.algorithm not in SOLVERS:
            raise ValueError(f"unknown algorithm {args.algorithm}")
        rows = benchmark([build_solver(args)], [int(s) for s in parts[2:]], int(parts[1]), seed=args.seed)
        for row in rows:
            self._print(f"{row['solver']} n={row['size']} mean={row['mean']:.6f}s")

    def do_quit(self, arg):
        """quit: leave the shell"""
        return True

    do_EOF = do_quit


def shell(args) -> None:
    TSPShell(args).cmdloop()


def _add_tuning(p: argparse.ArgumentParser) -> None:
    p.add_argument("--seed", type=int, default=None)
    p.add_argument("--verbose", action="store_true")
    p.add_argument("--time-limit", type=float, default=None, help="Seconds; overrides iteration counts")
    p.add_argument("--neighbourhood", choices=[n.value for n in Neighbourhood], default=None)

    tabu = p.add_argument_group("tabu search")
    tabu.add_argument("--iterations", type=int, default=TabuConfig.iterations)
    tabu.add_argument("--cadence", type=int, default=TabuConfig.cadence)
    tabu.add_argument("--reset-threshold", type=int, default=TabuConfig.reset_threshold)
    tabu.add_argument("--stop-threshold", type=int, default=TabuConfig.stop_threshold)

    sa = p.add_argument_group("simulated annealing")
    sa.add_argument("--initial-temperature", type=float, default=AnnealingConfig.initial_temperature)
    sa.add_argument("--end-temperature", type=float, default=AnnealingConfig.end_temperature)
    sa.add_argument("--cooling-rate", type=float, default=AnnealingConfig.cooling_rate)
    sa.add_argument("--temperature-iterations", type=int, default=AnnealingConfig.iterations)

    ga = p.add_argument_group("genetic algorithm")
    ga.add_argument("--population-size", type=int, default=GeneticConfig.population_size)
    ga.add_argument("--elite-size", type=int, default=GeneticConfig.elite_size)
    ga.add_argument("--mutation-rate", type=float, default=GeneticConfig.mutation_rate)
    ga.add_argument("--generations", type=int, default=GeneticConfig.generations)
    ga.add_argument("--crossover", choices=[c.value for c in Crossover], default=GeneticConfig.crossover.value)
    ga.add_argument("--device", default=GeneticConfig.device)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="tsp-engine", description="TSP solvers CLI")
    subparsers = parser.add_subparsers(dest="command", required=True)

    solve_parser = subparsers.add_parser("solve", help="Solve one problem and print the tour")
    solve_parser.add_argument("--algorithm", choices=sorted(SOLVERS), required=True)
    source = solve_parser.add_mutually_exclusive_group(required=True)
    source.add_argument("--file", default=None)
    source.add_argument("--random", type=int, default=None, metavar="N")
    _add_tuning(solve_parser)
    solve_parser.set_defaults(func=solve)

    bench_parser = subparsers.add_parser("benchmark", help="Average solve time on random problems")
    bench_parser.add_argument("--algorithm", choices=sorted(SOLVERS), required=True)
    bench_parser.add_argument("--sizes", type=int, nargs="+", required=True)
    bench_parser.add_argument("--runs", type=int, default=10)
    _add_tuning(bench_parser)
    bench_parser.set_defaults(func=run_benchmark)

    gen_parser = subparsers.add_parser("generate", help="Write a random problem file")
    gen_parser.add_argument("size", type=int)
    gen_parser.add_argument("--out", required=True)
    gen_parser.add_argument("--seed", type=int, default=None)
    gen_parser.set_defaults(func=generate)

    shell_parser = subparsers.add_parser("shell", help="Interactive shell")
    _add_tuning(shell_parser)
    shell_parser.set_defaults(func=shell)
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    try:
        args.func(args)
    except (TSPError, ValueError) as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
