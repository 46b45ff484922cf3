from dataclasses import dataclass
from typing import Iterable, List, Optional, Sequence, Tuple

from ..exceptions import StaleFitnessError
from .distance import DistanceMatrix


Tour = Tuple[int, ...]


@dataclass(frozen=True)
class Chromosome:
    """A tour plus its cached length; ``length is None`` means unscored."""

    genes: Tour
    length: Optional[float] = None

    def __post_init__(self):
        if not isinstance(self.genes, tuple):
            object.__setattr__(self, "genes", tuple(int(g) for g in self.genes))

    @classmethod
    def scored(cls, genes: Sequence[int], matrix: DistanceMatrix) -> "Chromosome":
        genes = tuple(int(g) for g in genes)
        return cls(genes, matrix.tour_length(genes))

    @property
    def key(self) -> Tour:
        return self.genes

    @property
    def is_scored(self) -> bool:
        return self.length is not None

    def evaluate(self, matrix: DistanceMatrix) -> "Chromosome":
        if self.is_scored:
            return self
        return Chromosome(self.genes, matrix.tour_length(self.genes))

    def __len__(self) -> int:
        return len(self.genes)


def by_length(chromosome: Chromosome) -> float:
    if chromosome.length is None:
        raise StaleFitnessError(f"chromosome {chromosome.genes[:8]}... has not been evaluated")
    return chromosome.length


def evaluate_all(chromosomes: Iterable[Chromosome], matrix: DistanceMatrix) -> List[Chromosome]:
    return [c.evaluate(matrix) for c in chromosomes]


def sort_by_length(chromosomes: Iterable[Chromosome]) -> List[Chromosome]:
    return sorted(chromosomes, key=by_length)


def count_duplicates(chromosomes: Sequence[Chromosome]) -> int:
    return len(chromosomes) - len({c.key for c in chromosomes})


def diversity_ratio(chromosomes: Sequence[Chromosome]) -> float:
    if not chromosomes:
        return 0.0
    return len({c.key for c in chromosomes}) / len(chromosomes)


def is_permutation(genes: Sequence[int], n: int) -> bool:
    return len(genes) == n and sorted(genes) == list(range(n))


@dataclass(frozen=True)
class Population:
    """Immutable view of one generation; every statistic is derived on demand."""

    chromosomes: Tuple[Chromosome, ...]
    generation: int = 0

    def __post_init__(self):
        chromosomes = tuple(self.chromosomes)
        if not chromosomes:
            raise ValueError("a population needs at least one chromosome")
        for c in chromosomes:
            by_length(c)
        object.__setattr__(self, "chromosomes", chromosomes)

    def __len__(self) -> int:
        return len(self.chromosomes)

    def __iter__(self):
        return iter(self.chromosomes)

    @property
    def size(self) -> int:
        return len(self.chromosomes)

    @property
    def lengths(self) -> List[float]:
        return [c.length for c in self.chromosomes]

    @property
    def best(self) -> Chromosome:
        return min(self.chromosomes, key=by_length)

    @property
    def worst(self) -> Chromosome:
        return max(self.chromosomes, key=by_length)

    @property
    def average(self) -> float:
        return sum(self.lengths) / len(self.chromosomes)

    @property
    def diversity(self) -> float:
        return diversity_ratio(self.chromosomes)

    def sorted(self) -> List[Chromosome]:
        return sort_by_length(self.chromosomes)


# Name used by reporting collaborators.
PopulationSnapshot = Population
