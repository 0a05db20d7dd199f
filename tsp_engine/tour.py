from typing import Iterator, List, Optional, Sequence

from .errors import IndexOutOfRange


class Tour:
    """
    Closed tour over N cities stored as N + 1 positions, origin at both ends.

    ``distance`` is a cache: moves do not update it, callers recompute it through
    the owning ``DistanceMatrix``. A tour built without cities is the "no tour yet"
    sentinel and has ``distance`` set to None.
    """

    def __init__(self, cities: Optional[Sequence[int]] = None, distance: Optional[int] = None):
        self.cities: List[int] = list(cities) if cities is not None else []
        self.distance = distance

    @classmethod
    def identity(cls, size: int) -> "Tour":
        """0 - 1 - ... - (size-1) - 0"""
        return cls(list(range(size)) + [0])

    @property
    def size(self) -> int:
        return max(len(self.cities) - 1, 0)

    @property
    def empty(self) -> bool:
        return not self.cities

    def _check(self, index: int) -> None:
        if not 0 <= index < len(self.cities):
            raise IndexOutOfRange(f"position {index} outside tour of length {len(self.cities)}")

    def __len__(self) -> int:
        return len(self.cities)

    def __iter__(self) -> Iterator[int]:
        return iter(self.cities)

    def __getitem__(self, index: int) -> int:
        self._check(index)
        return self.cities[index]

    def __setitem__(self, index: int, city: int) -> None:
        self._check(index)
        self.cities[index] = city

    def __eq__(self, other) -> bool:
        if not isinstance(other, Tour):
            return NotImplemented
        return self.cities == other.cities and self.distance == other.distance

    def copy(self) -> "Tour":
        return Tour(self.cities, self.distance)

    def shorter_than(self, other: "Tour") -> bool:
        """Strict comparison where an unset distance loses to any real tour."""
        if self.distance is None:
            return False
        return other.distance is None or self.distance < other.distance

    def in_path(self, city: int, limit: int) -> bool:
        return city in self.cities[:limit]

    def permute(self, start: int, end: int) -> bool:
        """
        Step positions [start, end] to their next lexicographic permutation
        (Knuth's Algorithm L). Returns False once the range is already at its
        last permutation, leaving it untouched.
        """
        if end - start < 1:
            return False
        self._check(start)
        self._check(end)
        path = self.cities
        i = end - 1
        while path[i] > path[i + 1]:
            i -= 1
            if i < start:
                return False
        j = end
        while path[i] > path[j]:
            j -= 1
        path[i], path[j] = path[j], path[i]
        path[i + 1 : end + 1] = reversed(path[i + 1 : end + 1])
        return True

    def swap(self, x: int, y: int) -> None:
        self._check(x)
        self._check(y)
        self.cities[x], self.cities[y] = self.cities[y], self.cities[x]

    def insert(self, x: int, y: int) -> None:
        """Move the city at position x to position y, shifting the ones between."""
        self._check(x)
        self._check(y)
        self.cities.insert(y, self.cities.pop(x))

    def invert(self, x: int, y: int) -> None:
        self._check(x)
        self._check(y)
        if x > y:
            x, y = y, x
        self.cities[x : y + 1] = reversed(self.cities[x : y + 1])

    def is_valid(self, size: int) -> bool:
        if len(self.cities) != size + 1:
            return False
        return (
            self.cities[0] == 0
            and self.cities[size] == 0
            and sorted(self.cities[:size]) == list(range(size))
        )

    def __repr__(self) -> str:
        return f"Tour({self.cities!r}, distance={self.distance!r})"

    def __str__(self) -> str:
        return " - ".join(map(str, self.cities)) + f" ({self.distance})"
