import hashlib
import random
from dataclasses import dataclass, field
from typing import Iterable, Optional, Sequence, Tuple

from .solvers.distance import DistanceMatrix


@dataclass(frozen=True)
class Point:
    id: int
    x: float
    y: float
    name: Optional[str] = None


@dataclass(frozen=True)
class Instance:
    name: str
    points: Tuple[Point, ...]
    optimum: Optional[float] = None
    _matrix: Optional[DistanceMatrix] = field(default=None, init=False, repr=False, compare=False)

    @property
    def size(self) -> int:
        return len(self.points)

    @property
    def matrix(self) -> DistanceMatrix:
        # Built lazily, then shared by every algorithm run on this instance.
        if self._matrix is None:
            object.__setattr__(self, "_matrix", DistanceMatrix.from_points(self.points))
        return self._matrix

    @property
    def fingerprint(self) -> str:
        h = hashlib.sha256()
        for p in self.points:
            h.update(f"{p.x!r},{p.y!r};".encode())
        return h.hexdigest()[:12]


def points_from_coordinates(coords: Iterable[Sequence[float]]) -> Tuple[Point, ...]:
    return tuple(Point(id=i, x=float(x), y=float(y)) for i, (x, y) in enumerate(coords))


def random_instance(
    count: int,
    seed: int = 0,
    width: float = 1000.0,
    height: float = 1000.0,
    name: Optional[str] = None,
) -> Instance:
    rng = random.Random(seed)
    coords = [(rng.uniform(0.0, width), rng.uniform(0.0, height)) for _ in range(count)]
    return Instance(name=name or f"random{count}-s{seed}", points=points_from_coordinates(coords))


def square_instance(side: float = 10.0) -> Instance:
    coords = [(0.0, 0.0), (0.0, side), (side, side), (side, 0.0)]
    return Instance(name="square", points=points_from_coordinates(coords), optimum=4 * side)
