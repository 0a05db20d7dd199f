from dataclasses import dataclass
from pathlib import Path
from typing import List, Union

import tsplib95
from tsplib95.exceptions import TsplibError

from .errors import ProblemSourceUnavailable
from .problem import DistanceMatrix

PathLike = Union[str, Path]

PROBLEM_SUFFIXES = (".txt", ".tsp", ".atsp")


@dataclass
class Instance:
    name: str
    path: Path
    problem: DistanceMatrix


def _read_text(path: Path) -> str:
    try:
        return path.read_text()
    except OSError as exc:
        raise ProblemSourceUnavailable(f"Cannot open problem source {path}: {exc}") from exc


def parse_matrix(text: str) -> DistanceMatrix:
    """Parse ``N`` followed by ``N*N`` row-major integers."""
    tokens = text.split()
    if not tokens:
        raise ValueError("Problem source is empty.")
    try:
        values = [int(tok) for tok in tokens]
    except ValueError as exc:
        raise ValueError(f"Problem source contains a non-integer token: {exc}") from exc
    size = values[0]
    if size < 0:
        raise ValueError("Problem size must be non-negative.")
    body = values[1:]
    if len(body) < size * size:
        raise ValueError(f"Expected {size * size} distances, found {len(body)}.")
    rows = [body[i * size : (i + 1) * size] for i in range(size)]
    return DistanceMatrix(rows)


def format_matrix(problem: DistanceMatrix) -> str:
    lines = [str(problem.size)]
    lines.extend(" ".join(str(d) for d in row) for row in problem.rows)
    return "\n".join(lines) + "\n"


def load_matrix(path: PathLike) -> DistanceMatrix:
    return parse_matrix(_read_text(Path(path)))


def save_matrix(problem: DistanceMatrix, path: PathLike) -> None:
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(format_matrix(problem))


def load_tsplib(path: PathLike) -> DistanceMatrix:
    text = _read_text(Path(path))
    try:
        problem = tsplib95.parse(text)
        graph = problem.get_graph()
    except (TsplibError, IndexError, KeyError, TypeError, ValueError) as exc:
        raise ValueError(f"Malformed TSPLIB problem {path}: {exc}") from exc
    return DistanceMatrix.from_graph(graph)


def load_problem(path: PathLike) -> DistanceMatrix:
    path = Path(path)
    if path.suffix.lower() in (".tsp", ".atsp"):
        return load_tsplib(path)
    return load_matrix(path)


def load_instances(root: PathLike) -> List[Instance]:
    root = Path(root)
    if not root.is_dir():
        raise ProblemSourceUnavailable(f"{root} is not a directory.")
    instances: List[Instance] = []
    for p in sorted(root.iterdir()):
        if p.suffix.lower() not in PROBLEM_SUFFIXES:
            continue
        instances.append(Instance(name=p.stem, path=p, problem=load_problem(p)))
    return instances
