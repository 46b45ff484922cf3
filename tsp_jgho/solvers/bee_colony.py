import logging
from typing import List

from .base import Algorithm
from .heuristics import random_tour
from .population import Chromosome, Population

_logger = logging.getLogger(__name__)


class ABCTSP(Algorithm):
    name = "abc"

    def _clear(self) -> None:
        self.trials: List[int] = []

    @property
    def colony_size(self) -> int:
        return max(1, self.params.population_size // 2)

    @property
    def limit(self) -> int:
        return self.params.population_size * self.n // 2

    def _seed(self) -> List[Chromosome]:
        self.trials = [0] * self.colony_size
        return [self._random_source() for _ in range(self.colony_size)]

    def _advance(self, population: Population) -> List[Chromosome]:
        sources = list(population.chromosomes)
        self._employed_phase(sources)
        self._onlooker_phase(sources)
        self._scout_phase(sources)
        return sources

    def _random_source(self) -> Chromosome:
        return Chromosome.scored(random_tour(self.n, self.rng), self.matrix)

    def _neighbour(self, source: Chromosome) -> Chromosome:
        genes = list(source.genes)
        i = self.rng.randrange(self.n)
        j = self.rng.randrange(self.n)
        if self.rng.random() < 0.5:
            genes[i], genes[j] = genes[j], genes[i]
        else:
            i, j = sorted((i, j))
            genes[i : j + 1] = genes[i : j + 1][::-1]
        return Chromosome.scored(genes, self.matrix)

    def _exploit(self, sources: List[Chromosome], idx: int) -> None:
        candidate = self._neighbour(sources[idx])
        if candidate.length < sources[idx].length:
            sources[idx] = candidate
            self.trials[idx] = 0
        else:
            self.trials[idx] += 1

    def _employed_phase(self, sources: List[Chromosome]) -> None:
        for idx in range(len(sources)):
            self._exploit(sources, idx)

    def selection_probabilities(self, sources: List[Chromosome]) -> List[float]:
        longest = max(s.length for s in sources)
        fitness = [longest - s.length + 1.0 for s in sources]
        total = sum(fitness)
        return [f / total for f in fitness]

    def _onlooker_phase(self, sources: List[Chromosome]) -> None:
        # Onlookers sweep the sources cyclically, each accepting with its probability.
        probabilities = self.selection_probabilities(sources)
        spent = 0
        idx = 0
        while spent < len(sources):
            if self.rng.random() < probabilities[idx]:
                self._exploit(sources, idx)
                spent += 1
            idx = (idx + 1) % len(sources)

    def _scout_phase(self, sources: List[Chromosome]) -> None:
        for idx in range(len(sources)):
            if self.trials[idx] >= self.limit:
                _logger.debug("abandoning source %d after %d trials", idx, self.trials[idx])
                sources[idx] = self._random_source()
                self.trials[idx] = 0
