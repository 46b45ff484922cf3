import logging
from typing import List

from ..config import pfit, ps
from .base import Algorithm
from .heuristics import apply_two_opt_to_top, nearest_neighbor_tour, random_tour
from .operators import (
    crossover_population,
    jump_population,
    mutate_population,
    select_parents,
    unique,
)
from .population import Chromosome, Population, evaluate_all, sort_by_length

_logger = logging.getLogger(__name__)


class GAJGHO(Algorithm):
    name = "gajgho"

    def _seed(self) -> List[Chromosome]:
        size = self.params.population_size
        greedy = min(int(size * self.params.greedy_seed_fraction), self.n)
        chromosomes = [Chromosome(tuple(nearest_neighbor_tour(self.matrix, start))) for start in range(greedy)]
        while len(chromosomes) < size:
            chromosomes.append(Chromosome(tuple(random_tour(self.n, self.rng))))
        return chromosomes

    def _advance(self, population: Population) -> List[Chromosome]:
        p = self.params
        t = population.generation
        size = p.population_size
        pfit_t = pfit(p, t)
        ps_t = ps(p, t)

        parents = select_parents(population.chromosomes, size, pfit_t, p.beta, self.rng)
        offspring = crossover_population(parents, self.matrix, self.rng, size)
        offspring, diversity = unique(offspring, self.n, self.rng)
        offspring = evaluate_all(offspring, self.matrix)
        offspring = mutate_population(offspring, ps_t, p.beta, self.matrix, self.rng)
        offspring = jump_population(offspring, p.pjg, p.q, self.matrix, self.rng)
        offspring = apply_two_opt_to_top(offspring, self.matrix, int(size * p.two_opt_fraction))
        _logger.debug("gen %d: pfit=%.4f ps=%.4f offspring diversity=%.3f", t, pfit_t, ps_t, diversity)
        return self._with_elites(population, offspring)

    def _with_elites(self, previous: Population, offspring: List[Chromosome]) -> List[Chromosome]:
        size = self.params.population_size
        elites = previous.sorted()[: self.params.elite_count]
        survivors = sort_by_length(offspring)[: size - len(elites)]
        return sort_by_length(survivors + elites)
