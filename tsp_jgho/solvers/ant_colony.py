import random
import time
from typing import Callable, List, Optional, Sequence

import numpy as np

from ..config import AlgorithmParams, AntColonyParams
from .base import Algorithm
from .distance import DistanceMatrix
from .heuristics import three_opt
from .operators import roulette_pick
from .population import Chromosome, Population, sort_by_length


class PACO3Opt(Algorithm):
    name = "paco3opt"

    def __init__(
        self,
        matrix: DistanceMatrix,
        params: AlgorithmParams,
        rng: Optional[random.Random] = None,
        clock: Callable[[], float] = time.perf_counter,
        aco_params: Optional[AntColonyParams] = None,
    ):
        self.aco = aco_params or AntColonyParams()
        super().__init__(matrix, params, rng, clock)
        self._visibility = (1.0 / (matrix.values + self.aco.epsilon)) ** self.aco.beta

    def validate(self) -> None:
        super().validate()
        self.aco.validate()

    def _clear(self) -> None:
        n = self.matrix.n
        self.pheromone = np.full((n, n), 1.0 / n if n else 0.0)

    def _seed(self) -> List[Chromosome]:
        return self._new_colony()

    def _advance(self, population: Population) -> List[Chromosome]:
        return self._new_colony()

    def _new_colony(self) -> List[Chromosome]:
        weights = (self.pheromone ** self.aco.alpha * self._visibility).tolist()
        colony = []
        for _ in range(self.params.population_size):
            tour = self.construct_tour(weights)
            tour = three_opt(self.matrix, tour, self.aco.max_three_opt_passes)
            colony.append(Chromosome.scored(tour, self.matrix))
        self.update_pheromone(colony)
        return colony

    def construct_tour(self, weights: Sequence[Sequence[float]]) -> List[int]:
        current = self.rng.randrange(self.n)
        tour = [current]
        unvisited = [city for city in range(self.n) if city != current]
        while unvisited:
            row = weights[current]
            pick = roulette_pick([row[city] for city in unvisited], self.rng)
            current = unvisited.pop(pick)
            tour.append(current)
        return tour

    def update_pheromone(self, colony: Sequence[Chromosome]) -> None:
        self.pheromone *= 1.0 - self.aco.rho
        for ant in sort_by_length(colony)[: self.aco.elite_tours]:
            deposit = self.aco.q / max(ant.length, self.aco.epsilon)
            src = np.asarray(ant.genes, dtype=np.intp)
            dst = np.roll(src, -1)
            np.add.at(self.pheromone, (src, dst), deposit)
            np.add.at(self.pheromone, (dst, src), deposit)
