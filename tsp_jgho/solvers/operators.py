import random
from typing import List, Optional, Sequence, Tuple

from .distance import DistanceMatrix
from .heuristics import random_tour
from .population import Chromosome, by_length, diversity_ratio


SUCCESSOR = 1
PREDECESSOR = -1
DIRECTIONS = (SUCCESSOR, PREDECESSOR)

SWAP = "swap"
INVERSE = "inverse"
HEURISTIC = "heuristic"


# --- selection ---------------------------------------------------------------


def linear_fitness(size: int) -> List[float]:
    return [(size - rank) / size for rank in range(size)]


def nonlinear_fitness(size: int, beta: float) -> List[float]:
    return [beta * (1.0 - beta) ** rank for rank in range(size)]


def roulette_pick(weights: Sequence[float], rng: random.Random) -> int:
    total = sum(weights)
    if total <= 0.0:
        return rng.randrange(len(weights))
    spin = rng.random() * total
    cumulative = 0.0
    for idx, w in enumerate(weights):
        cumulative += w
        if cumulative >= spin:
            return idx
    return len(weights) - 1


def select_parents(
    population: Sequence[Chromosome],
    count: int,
    pfit: float,
    beta: float,
    rng: random.Random,
) -> List[Chromosome]:
    ranked = sorted(population, key=by_length)
    size = len(ranked)
    linear = linear_fitness(size)
    nonlinear = nonlinear_fitness(size, beta)
    parents = []
    for _ in range(count):
        weights = linear if rng.random() <= pfit else nonlinear
        parents.append(ranked[roulette_pick(weights, rng)])
    return parents


# --- crossover ---------------------------------------------------------------


def bidirectional_heuristic_crossover(
    parent1: Chromosome,
    parent2: Chromosome,
    matrix: DistanceMatrix,
    rng: random.Random,
    direction: Optional[int] = None,
    start: Optional[int] = None,
) -> Chromosome:
    genes1 = parent1.genes
    genes2 = parent2.genes
    n = len(genes1)
    if direction is None:
        direction = SUCCESSOR if rng.random() < 0.5 else PREDECESSOR
    if start is None:
        start = genes1[rng.randrange(n)]
    pos1 = {city: idx for idx, city in enumerate(genes1)}
    pos2 = {city: idx for idx, city in enumerate(genes2)}

    visited = [False] * n
    offspring = [start]
    visited[start] = True
    current = start
    while len(offspring) < n:
        candidates = [
            city
            for city in (
                genes1[(pos1[current] + direction) % n],
                genes2[(pos2[current] + direction) % n],
            )
            if not visited[city]
        ]
        if not candidates:
            candidates = [city for city in range(n) if not visited[city]]
        nxt = matrix.nearest(current, candidates)
        offspring.append(nxt)
        visited[nxt] = True
        current = nxt
    return Chromosome.scored(offspring, matrix)


def crossover_population(
    parents: Sequence[Chromosome],
    matrix: DistanceMatrix,
    rng: random.Random,
    count: Optional[int] = None,
) -> List[Chromosome]:
    target = count if count is not None else len(parents)
    offspring: List[Chromosome] = []
    for i in range(0, target, 2):
        p1 = parents[i % len(parents)]
        p2 = parents[(i + 1) % len(parents)]
        offspring.append(bidirectional_heuristic_crossover(p1, p2, matrix, rng))
        if len(offspring) < target:
            offspring.append(bidirectional_heuristic_crossover(p2, p1, matrix, rng))
    return offspring


# --- mutation ----------------------------------------------------------------


def swap_mutation(chromosome: Chromosome, rng: random.Random) -> Chromosome:
    genes = list(chromosome.genes)
    n = len(genes)
    i = rng.randrange(n)
    j = rng.randrange(n)
    while j == i and n > 1:
        j = rng.randrange(n)
    genes[i], genes[j] = genes[j], genes[i]
    return Chromosome(tuple(genes))


def inverse_mutation(chromosome: Chromosome, rng: random.Random) -> Chromosome:
    genes = list(chromosome.genes)
    n = len(genes)
    i, j = sorted((rng.randrange(n), rng.randrange(n)))
    genes[i : j + 1] = genes[i : j + 1][::-1]
    return Chromosome(tuple(genes))


def heuristic_mutation(chromosome: Chromosome, matrix: DistanceMatrix, rng: random.Random) -> Chromosome:
    genes = list(chromosome.genes)
    n = len(genes)
    pos = rng.randrange(n)
    city = genes[pos]
    neighbours = {(pos - 1) % n, pos, (pos + 1) % n}
    nearest = matrix.nearest(city, (genes[i] for i in range(n) if i not in neighbours))
    if nearest < 0:
        # every other city is already adjacent
        return chromosome
    genes.remove(nearest)
    genes.insert(genes.index(city) + 1, nearest)
    return Chromosome(tuple(genes))


def choose_mutation(ps: float, beta: float, rng: random.Random) -> str:
    mu = rng.random()
    if mu <= ps:
        return SWAP
    if mu <= ps + beta:
        return INVERSE
    return HEURISTIC


def combination_mutation(
    chromosome: Chromosome,
    ps: float,
    beta: float,
    matrix: DistanceMatrix,
    rng: random.Random,
) -> Chromosome:
    kind = choose_mutation(ps, beta, rng)
    if kind == SWAP:
        return swap_mutation(chromosome, rng)
    if kind == INVERSE:
        return inverse_mutation(chromosome, rng)
    return heuristic_mutation(chromosome, matrix, rng)


def mutate_population(
    chromosomes: Sequence[Chromosome],
    ps: float,
    beta: float,
    matrix: DistanceMatrix,
    rng: random.Random,
) -> List[Chromosome]:
    return [combination_mutation(c, ps, beta, matrix, rng).evaluate(matrix) for c in chromosomes]


# --- jumping gene ------------------------------------------------------------


def jump_genes(chromosome: Chromosome, q: int, rng: random.Random) -> Chromosome:
    marked = []
    pool = []
    for city in chromosome.genes:
        if rng.random() < 0.5:
            marked.append(city)
        else:
            pool.append(city)
    segment = marked[:q]
    pool.extend(marked[q:])
    at = rng.randrange(len(pool) + 1)
    return Chromosome(tuple(pool[:at] + segment + pool[at:]))


def jumping_gene(chromosome: Chromosome, pjg: float, q: int, rng: random.Random) -> Chromosome:
    if rng.random() > pjg:
        return chromosome
    return jump_genes(chromosome, q, rng)


def jump_population(
    chromosomes: Sequence[Chromosome],
    pjg: float,
    q: int,
    matrix: DistanceMatrix,
    rng: random.Random,
) -> List[Chromosome]:
    return [jumping_gene(c, pjg, q, rng).evaluate(matrix) for c in chromosomes]


# --- unique ------------------------------------------------------------------


def unique(
    chromosomes: Sequence[Chromosome],
    n: int,
    rng: random.Random,
) -> Tuple[List[Chromosome], float]:
    seen = set()
    result = []
    for c in chromosomes:
        # repeats become fresh, unscored tours
        if c.key in seen:
            result.append(Chromosome(tuple(random_tour(n, rng))))
        else:
            seen.add(c.key)
            result.append(c)
    return result, diversity_ratio(result)
