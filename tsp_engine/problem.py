from typing import List, Optional, Sequence

import networkx as nx
import numpy as np
import torch


class DistanceMatrix:
    """
    Dense N x N matrix of non-negative integer distances between cities.

    The matrix is frozen once built; solvers only read from it. The diagonal is
    stored as zero whatever the source provides.
    """

    def __init__(self, weights: Optional[Sequence[Sequence[int]]] = None):
        if weights is None:
            mat = np.zeros((0, 0), dtype=np.int64)
        else:
            raw = np.asarray(weights)
            if raw.size == 0:
                mat = np.zeros((0, 0), dtype=np.int64)
            elif raw.dtype.kind not in "iu":
                raise ValueError("Distances must be integers.")
            else:
                mat = raw.astype(np.int64)
        if mat.ndim != 2 or mat.shape[0] != mat.shape[1]:
            raise ValueError("Distance matrix must be square.")
        if (mat < 0).any():
            raise ValueError("Distances must be non-negative.")
        np.fill_diagonal(mat, 0)
        mat.flags.writeable = False
        self.matrix = mat
        # Plain nested lists are much faster than numpy scalars in the solver loops.
        self.rows: List[List[int]] = mat.tolist()

    @property
    def size(self) -> int:
        return self.matrix.shape[0]

    @property
    def empty(self) -> bool:
        return self.size <= 0

    def dist(self, i: int, j: int) -> int:
        return self.rows[i][j]

    def tour_distance(self, cities: Sequence[int]) -> int:
        rows = self.rows
        return sum(rows[a][b] for a, b in zip(cities, cities[1:]))

    def path_dist(self, tour) -> int:
        return self.tour_distance(tour.cities)

    @classmethod
    def random(cls, size: int, seed: Optional[int] = None) -> "DistanceMatrix":
        if size < 0:
            raise ValueError("Size must be non-negative.")
        rng = np.random.default_rng(seed)
        return cls(rng.integers(0, 100, size=(size, size), endpoint=True))

    @classmethod
    def from_graph(cls, graph: nx.Graph, weight: str = "weight") -> "DistanceMatrix":
        nodes = sorted(graph.nodes())
        if not nodes:
            return cls()
        idx_map = {n: i for i, n in enumerate(nodes)}
        mat = np.zeros((len(nodes), len(nodes)), dtype=np.int64)
        for u, v, w in graph.edges(data=weight, default=0):
            mat[idx_map[u], idx_map[v]] = round(w)
            if not graph.is_directed():
                mat[idx_map[v], idx_map[u]] = round(w)
        return cls(mat)

    def to_graph(self) -> nx.DiGraph:
        graph = nx.DiGraph()
        graph.add_nodes_from(range(self.size))
        for i in range(self.size):
            for j in range(self.size):
                if i != j:
                    graph.add_edge(i, j, weight=self.rows[i][j])
        return graph

    def tensor(self, device="cpu") -> torch.Tensor:
        return torch.as_tensor(self.matrix.copy(), dtype=torch.long, device=device)

    def __eq__(self, other) -> bool:
        if not isinstance(other, DistanceMatrix):
            return NotImplemented
        return np.array_equal(self.matrix, other.matrix)

    def __repr__(self) -> str:
        return f"DistanceMatrix(size={self.size})"

    def __str__(self) -> str:
        return "".join("".join(f"{d:>3}" for d in row) + "\n" for row in self.rows)
