"""
Recombination and mutation of tours.

The operators work on the interior of a tour (positions 1..N-1); the origin at
both ends is never moved. Every crossover keeps ``parent1[start:end + 1]`` in
place and fills the other positions from ``parent2``.
"""

import enum
import random
from typing import Callable, Dict, List, Optional, Sequence, Tuple

from ..tour import Tour
from .heuristics import Neighbourhood, apply_move, random_positions

Genes = List[int]


class Crossover(enum.Enum):
    OX = "ox"
    PMX = "pmx"
    NWOX = "nwox"


def random_segment(length: int, rng: random.Random) -> Tuple[int, int]:
    a = rng.randrange(length)
    b = rng.randrange(length)
    return min(a, b), max(a, b)


def order_crossover(parent1: Sequence[int], parent2: Sequence[int], start: int, end: int) -> Genes:
    """OX: after the kept segment, continue with parent2's cities in parent2's order, wrapping."""
    n = len(parent1)
    child: List[Optional[int]] = [None] * n
    child[start : end + 1] = parent1[start : end + 1]
    used = set(parent1[start : end + 1])
    donors = [parent2[(end + 1 + k) % n] for k in range(n)]
    fill = [city for city in donors if city not in used]
    for k, city in enumerate(fill):
        child[(end + 1 + k) % n] = city
    return child


def partially_mapped_crossover(parent1: Sequence[int], parent2: Sequence[int], start: int, end: int) -> Genes:
    """PMX: outside the segment take parent2's city, chasing parent1 -> parent2 mappings on conflict."""
    n = len(parent1)
    child = list(parent2)
    child[start : end + 1] = parent1[start : end + 1]
    mapping: Dict[int, int] = {parent1[i]: parent2[i] for i in range(start, end + 1)}
    segment = set(parent1[start : end + 1])
    for i in list(range(start)) + list(range(end + 1, n)):
        city = parent2[i]
        while city in segment:
            city = mapping[city]
        child[i] = city
    return child


def non_wrapping_order_crossover(parent1: Sequence[int], parent2: Sequence[int], start: int, end: int) -> Genes:
    """
    NWOX: parent2's cities that clash with the kept segment become holes; the
    survivors slide outward, keeping their order, until the holes line up with
    [start, end], which then takes parent1's segment.
    """
    segment = set(parent1[start : end + 1])
    survivors = [city for city in parent2 if city not in segment]
    return survivors[:start] + list(parent1[start : end + 1]) + survivors[start:]


OPERATORS: Dict[Crossover, Callable[[Sequence[int], Sequence[int], int, int], Genes]] = {
    Crossover.OX: order_crossover,
    Crossover.PMX: partially_mapped_crossover,
    Crossover.NWOX: non_wrapping_order_crossover,
}


def crossover(parent1: Tour, parent2: Tour, operator: Crossover, rng: random.Random) -> Tour:
    genes1 = parent1.cities[1:-1]
    genes2 = parent2.cities[1:-1]
    if not genes1:
        return Tour(parent1.cities)
    start, end = random_segment(len(genes1), rng)
    child = OPERATORS[Crossover(operator)](genes1, genes2, start, end)
    return Tour([0] + child + [0])


def mutate(tour: Tour, rng: random.Random) -> None:
    """Invert a random interior sub-range in place; distance is left stale."""
    if tour.size < 3:
        return
    x, y = random_positions(tour.size, rng)
    apply_move(tour, Neighbourhood.INVERT, x, y)
