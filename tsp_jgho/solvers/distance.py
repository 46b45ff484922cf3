from typing import Iterable, List, Sequence, Tuple

import networkx as nx
import numpy as np


class DistanceMatrix:
    """Symmetric Euclidean distance lookup built once per point set.

    ``values`` is the read-only numpy array; ``rows`` mirrors it as nested
    lists for scalar lookups inside the operator loops.
    """

    def __init__(self, values: np.ndarray):
        values = np.array(values, dtype=float)
        if values.ndim != 2 or values.shape[0] != values.shape[1]:
            raise ValueError(f"distance matrix must be square, got shape {values.shape}")
        if not np.allclose(values, values.T):
            raise ValueError("distance matrix must be symmetric")
        if np.any(np.diag(values) != 0.0):
            raise ValueError("distance matrix must have a zero diagonal")
        if np.any(values < 0.0):
            raise ValueError("distances must be non-negative")
        # averaging leaves d[i][j] == d[j][i] exact for near-symmetric input
        values = (values + values.T) / 2.0
        values.setflags(write=False)
        self.values = values
        self.rows: List[List[float]] = values.tolist()

    @classmethod
    def from_points(cls, points: Iterable) -> "DistanceMatrix":
        coords = _coordinates(points)
        if len(coords) == 0:
            return cls(np.zeros((0, 0)))
        delta = coords[:, None, :] - coords[None, :, :]
        return cls(np.hypot(delta[..., 0], delta[..., 1]))

    @property
    def n(self) -> int:
        return self.values.shape[0]

    def __len__(self) -> int:
        return self.n

    def __getitem__(self, key: Tuple[int, int]) -> float:
        i, j = key
        return self.rows[i][j]

    def distance(self, i: int, j: int) -> float:
        return self.rows[i][j]

    def tour_length(self, tour: Sequence[int]) -> float:
        if len(tour) == 0:
            return 0.0
        idx = np.asarray(tour, dtype=np.intp)
        return float(self.values[idx, np.roll(idx, -1)].sum())

    def nearest(self, origin: int, candidates: Iterable[int]) -> int:
        # First candidate wins ties; -1 when there is nothing to choose from.
        row = self.rows[origin]
        best = -1
        best_dist = float("inf")
        for city in candidates:
            d = row[city]
            if d < best_dist:
                best_dist = d
                best = city
        return best

    def to_graph(self) -> nx.Graph:
        graph = nx.Graph()
        graph.add_nodes_from(range(self.n))
        for i in range(self.n):
            for j in range(i + 1, self.n):
                graph.add_edge(i, j, weight=self.rows[i][j])
        return graph


def _coordinates(points: Iterable) -> np.ndarray:
    coords = []
    for p in points:
        if hasattr(p, "x") and hasattr(p, "y"):
            coords.append((float(p.x), float(p.y)))
        else:
            x, y = p
            coords.append((float(x), float(y)))
    return np.asarray(coords, dtype=float).reshape(-1, 2)
