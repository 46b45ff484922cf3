import random
import time
from typing import Callable, List, Optional

from ..config import AlgorithmParams, StandardGAParams
from .base import Algorithm
from .distance import DistanceMatrix
from .heuristics import random_tour
from .operators import roulette_pick
from .population import Chromosome, Population


def order_crossover(parent1: Chromosome, parent2: Chromosome, rng: random.Random) -> Chromosome:
    """OX: keep a slice of parent1, fill the rest in parent2's order starting after the slice."""
    n = len(parent1.genes)
    start, end = sorted((rng.randrange(n), rng.randrange(n)))
    child = [-1] * n
    child[start : end + 1] = parent1.genes[start : end + 1]
    used = set(child[start : end + 1])
    fill = [(end + 1 + offset) % n for offset in range(n - (end - start + 1))]
    donors = [parent2.genes[(end + 1 + offset) % n] for offset in range(n)]
    donors = [city for city in donors if city not in used]
    for pos, city in zip(fill, donors):
        child[pos] = city
    return Chromosome(tuple(child))


def swap_with_rate(chromosome: Chromosome, rate: float, rng: random.Random) -> Chromosome:
    if rng.random() >= rate:
        return chromosome
    genes = list(chromosome.genes)
    i = rng.randrange(len(genes))
    j = rng.randrange(len(genes))
    genes[i], genes[j] = genes[j], genes[i]
    return Chromosome(tuple(genes))


class StandardGA(Algorithm):
    name = "standard_ga"

    def __init__(
        self,
        matrix: DistanceMatrix,
        params: AlgorithmParams,
        rng: Optional[random.Random] = None,
        clock: Callable[[], float] = time.perf_counter,
        ga_params: Optional[StandardGAParams] = None,
    ):
        super().__init__(matrix, params, rng, clock)
        self.ga_params = ga_params or StandardGAParams()

    def validate(self) -> None:
        super().validate()
        self.ga_params.validate()

    def _seed(self) -> List[Chromosome]:
        return [Chromosome(tuple(random_tour(self.n, self.rng))) for _ in range(self.params.population_size)]

    def _advance(self, population: Population) -> List[Chromosome]:
        size = self.params.population_size
        ranked = population.sorted()
        elites = ranked[: self.params.elite_count]

        longest = ranked[-1].length
        weights = [longest - c.length + 1.0 for c in ranked]
        selected = [ranked[roulette_pick(weights, self.rng)] for _ in range(size)]

        offspring = []
        while len(elites) + len(offspring) < size:
            p1 = selected[self.rng.randrange(len(selected))]
            p2 = selected[self.rng.randrange(len(selected))]
            child = order_crossover(p1, p2, self.rng)
            offspring.append(swap_with_rate(child, self.ga_params.mutation_rate, self.rng))
        return elites + offspring
