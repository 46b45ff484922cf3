import logging
import math
import random
from dataclasses import dataclass, field
from typing import Callable, Dict, List, Optional

from .config import AlgorithmParams
from .solvers.base import Algorithm, GenerationStats
from .solvers.distance import DistanceMatrix
from .solvers.heuristics import christofides_tour
from .solvers.population import Chromosome
from .solvers.registry import algorithm_names, create_algorithm

_logger = logging.getLogger(__name__)


@dataclass
class BenchmarkConfig:
    algorithms: List[str] = field(default_factory=algorithm_names)
    generations: Optional[int] = None
    random_seed: int = 123


@dataclass
class BenchmarkResult:
    name: str
    best: Chromosome
    total_time: float
    generations: int
    reference_length: Optional[float] = None

    @property
    def best_length(self) -> float:
        return self.best.length

    @property
    def gap(self) -> float:
        if self.reference_length is None or math.isclose(self.reference_length, 0.0):
            return float("inf")
        return (self.best_length - self.reference_length) / self.reference_length


def reference_length(matrix: DistanceMatrix) -> float:
    return matrix.tour_length(christofides_tour(matrix))


class Benchmark:
    """Steps several algorithms in lockstep on one shared distance matrix.

    Every algorithm gets the same parameters and its own ``random.Random``
    seeded from ``config.random_seed`` plus its position, so a benchmark is
    reproducible as a whole.
    """

    def __init__(
        self,
        matrix: DistanceMatrix,
        params: AlgorithmParams,
        config: Optional[BenchmarkConfig] = None,
        optimum: Optional[float] = None,
    ):
        self.matrix = matrix
        self.params = params
        self.cfg = config or BenchmarkConfig()
        self.algorithms: Dict[str, Algorithm] = {}
        self.generation = 0
        self._reference: Optional[float] = optimum

    @property
    def generations(self) -> int:
        return self.cfg.generations if self.cfg.generations is not None else self.params.max_generations

    @property
    def reference(self) -> float:
        if self._reference is None:
            self._reference = reference_length(self.matrix)
        return self._reference

    @property
    def histories(self) -> Dict[str, List[GenerationStats]]:
        return {name: list(algo.history) for name, algo in self.algorithms.items()}

    def initialize(self) -> None:
        self.algorithms = {}
        for idx, name in enumerate(self.cfg.algorithms):
            rng = random.Random(self.cfg.random_seed + idx)
            algo = create_algorithm(name, self.matrix, self.params, rng=rng)
            algo.initialize()
            self.algorithms[name] = algo
        self.generation = 0

    def step(self) -> None:
        if not self.algorithms:
            raise RuntimeError("benchmark has not been initialized")
        for algo in self.algorithms.values():
            algo.run_generation()
        self.generation += 1

    def run(self, callback: Optional[Callable[["Benchmark"], None]] = None) -> List[BenchmarkResult]:
        if not self.algorithms:
            self.initialize()
        while self.generation < self.generations:
            self.step()
            if callback:
                callback(self)
        results = self.results()
        if results:
            _logger.info(
                "benchmark finished after %d generations; winner %s (%.2f)",
                self.generation,
                results[0].name,
                results[0].best_length,
            )
        return results

    def results(self) -> List[BenchmarkResult]:
        results = []
        for name, algo in self.algorithms.items():
            results.append(
                BenchmarkResult(
                    name=name,
                    best=algo.best,
                    total_time=sum(s.elapsed for s in algo.history),
                    generations=algo.generation,
                    reference_length=self.reference,
                )
            )
        results.sort(key=lambda r: r.best_length)
        return results
