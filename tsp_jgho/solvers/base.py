import logging
import random
import time
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Callable, List, Optional, Tuple

from ..config import AlgorithmParams
from ..exceptions import InvalidInputError
from .distance import DistanceMatrix
from .population import Chromosome, Population, evaluate_all

_logger = logging.getLogger(__name__)

MIN_CITIES = 3


@dataclass(frozen=True)
class GenerationStats:
    generation: int
    best_length: float
    average_length: float
    worst_length: float
    diversity: float
    # Wall time differs between otherwise identical seeded runs.
    elapsed: float = field(default=0.0, compare=False)

    @classmethod
    def from_population(cls, population: Population, elapsed: float) -> "GenerationStats":
        return cls(
            generation=population.generation,
            best_length=population.best.length,
            average_length=population.average,
            worst_length=population.worst.length,
            diversity=population.diversity,
            elapsed=elapsed,
        )


StepCallback = Callable[[Population, GenerationStats], None]


class Algorithm(ABC):
    """Stepping contract shared by every optimizer.

    Subclasses build generation 0 in ``_seed`` and produce the next list of
    chromosomes in ``_advance``; this class owns the generation counter,
    timing, statistics and the stopping policy.
    """

    name: str = "base"

    def __init__(
        self,
        matrix: DistanceMatrix,
        params: AlgorithmParams,
        rng: Optional[random.Random] = None,
        clock: Callable[[], float] = time.perf_counter,
    ):
        self.matrix = matrix
        self.params = params
        self.rng = rng or random.Random(params.random_seed)
        self.clock = clock
        self._population: Optional[Population] = None
        self._history: List[GenerationStats] = []
        self._best_length = float("inf")
        self._stagnant = 0
        self._clear()

    @property
    def n(self) -> int:
        return self.matrix.n

    @property
    def generation(self) -> int:
        return self._require_population().generation

    @property
    def history(self) -> Tuple[GenerationStats, ...]:
        return tuple(self._history)

    @property
    def best(self) -> Chromosome:
        return self._require_population().best

    @property
    def is_initialized(self) -> bool:
        return self._population is not None

    def validate(self) -> None:
        if self.n < MIN_CITIES:
            raise InvalidInputError(f"need at least {MIN_CITIES} points to build a tour, got {self.n}")
        self.params.validate()

    def initialize(self) -> Population:
        self.validate()
        self.reset()
        start = self.clock()
        chromosomes = evaluate_all(self._seed(), self.matrix)
        self._commit(chromosomes, 0, self.clock() - start)
        return self._population

    def run_generation(self) -> Population:
        current = self._require_population()
        start = self.clock()
        chromosomes = evaluate_all(self._advance(current), self.matrix)
        self._commit(chromosomes, current.generation + 1, self.clock() - start)
        return self._population

    def get_population(self) -> Population:
        return self._require_population()

    def get_stats(self) -> GenerationStats:
        self._require_population()
        return self._history[-1]

    def reset(self) -> None:
        self._population = None
        self._history = []
        self._best_length = float("inf")
        self._stagnant = 0
        self._clear()

    def should_stop(self) -> bool:
        return self.stop_reason() is not None

    def stop_reason(self) -> Optional[str]:
        population = self._require_population()
        if population.generation >= self.params.max_generations:
            return f"reached {self.params.max_generations} generations"
        if (
            self.params.early_stop_diversity is not None
            and population.diversity < self.params.early_stop_diversity
        ):
            return f"diversity {population.diversity:.4f} below threshold"
        if self.params.stagnation_limit is not None and self._stagnant >= self.params.stagnation_limit:
            return f"no improvement for {self._stagnant} generations"
        return None

    def run(self, generations: Optional[int] = None, callback: Optional[StepCallback] = None) -> Population:
        if not self.is_initialized:
            self.initialize()
        steps = 0
        while generations is None or steps < generations:
            reason = self.stop_reason()
            if reason is not None:
                _logger.info("%s stopped at generation %d: %s", self.name, self.generation, reason)
                break
            population = self.run_generation()
            steps += 1
            if callback:
                callback(population, self.get_stats())
        return self.get_population()

    def _commit(self, chromosomes: List[Chromosome], generation: int, elapsed: float) -> None:
        population = Population(tuple(chromosomes), generation)
        stats = GenerationStats.from_population(population, elapsed)
        if stats.best_length < self._best_length:
            self._best_length = stats.best_length
            self._stagnant = 0
        elif generation > 0:
            self._stagnant += 1
        self._population = population
        self._history.append(stats)
        _logger.debug(
            "%s gen %d: best=%.2f avg=%.2f div=%.3f (%.4fs)",
            self.name,
            generation,
            stats.best_length,
            stats.average_length,
            stats.diversity,
            elapsed,
        )

    def _require_population(self) -> Population:
        if self._population is None:
            raise RuntimeError(f"{self.name} has not been initialized")
        return self._population

    def _clear(self) -> None:
        """Drop algorithm-specific state (pheromones, trial counters)."""

    @abstractmethod
    def _seed(self) -> List[Chromosome]:
        raise NotImplementedError

    @abstractmethod
    def _advance(self, population: Population) -> List[Chromosome]:
        raise NotImplementedError
