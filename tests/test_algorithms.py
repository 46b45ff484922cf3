"""Stepping contract shared by GA-JGHO and the comparators."""

import logging
import random

import numpy as np
import pytest

from tsp_jgho.config import AlgorithmParams
from tsp_jgho.exceptions import InvalidInputError, UnknownAlgorithmError
from tsp_jgho.data import points_from_coordinates, random_instance
from tsp_jgho.solvers import (
    ABCTSP,
    ALGORITHMS,
    GAJGHO,
    PACO3Opt,
    Algorithm,
    Chromosome,
    DistanceMatrix,
    StandardGA,
    create_algorithm,
    nearest_neighbor_tour,
    random_tour,
)
from tsp_jgho.solvers.population import is_permutation
from tsp_jgho.solvers.standard_ga import order_crossover


class Frozen(Algorithm):
    """Never changes its population; used to drive the stopping policy."""

    name = "frozen"

    def __init__(self, matrix, params, rng=None, identical=False):
        super().__init__(matrix, params, rng)
        self.identical = identical

    def _seed(self):
        if self.identical:
            return [Chromosome(tuple(range(self.n)))] * self.params.population_size
        return [Chromosome(tuple(random_tour(self.n, self.rng))) for _ in range(self.params.population_size)]

    def _advance(self, population):
        return list(population.chromosomes)


@pytest.mark.parametrize("name", sorted(ALGORITHMS))
def test_every_generation_holds_valid_tours(name, matrix, small_params):
    algo = create_algorithm(name, matrix, small_params, rng=random.Random(5))
    algo.initialize()
    for _ in range(4):
        population = algo.run_generation()
        assert 1.0 / population.size <= population.diversity <= 1.0
        for c in population:
            assert is_permutation(c.genes, matrix.n)
            assert c.length == pytest.approx(matrix.tour_length(c.genes))
    assert algo.generation == 4
    assert [s.generation for s in algo.history] == [0, 1, 2, 3, 4]


@pytest.mark.parametrize("name", sorted(ALGORITHMS))
def test_same_seed_same_history(name, matrix, small_params, fake_clock):
    runs = []
    for _ in range(2):
        algo = create_algorithm(name, matrix, small_params, rng=random.Random(99))
        algo.clock = fake_clock()
        algo.run(generations=3)
        runs.append((algo.history, algo.best.genes))
    assert runs[0] == runs[1]


def test_default_rng_uses_params_seed(matrix, small_params):
    a = GAJGHO(matrix, small_params)
    b = GAJGHO(matrix, small_params)
    a.run(generations=2)
    b.run(generations=2)
    assert a.history == b.history


@pytest.mark.parametrize("cls", [GAJGHO, StandardGA])
def test_elitism_never_loses_the_best(cls, matrix, small_params):
    algo = cls(matrix, small_params, rng=random.Random(2))
    algo.run(generations=10)
    bests = [s.best_length for s in algo.history]
    assert all(later <= earlier + 1e-9 for earlier, later in zip(bests, bests[1:]))


@pytest.mark.parametrize("seed", range(20))
def test_gajgho_solves_the_square(square, seed):
    params = AlgorithmParams(population_size=20, max_generations=50)
    algo = GAJGHO(square.matrix, params, rng=random.Random(seed))
    final = algo.run()
    assert final.generation == 50
    assert final.best.length == pytest.approx(40.0)


def test_gajgho_greedy_seeding(matrix):
    params = AlgorithmParams(population_size=10, greedy_seed_fraction=0.5)
    population = GAJGHO(matrix, params, rng=random.Random(0)).initialize()
    assert population.size == 10
    for start in range(5):
        assert population.chromosomes[start].genes == tuple(nearest_neighbor_tour(matrix, start))


def test_too_few_points_rejected():
    matrix = DistanceMatrix.from_points(points_from_coordinates([(0, 0), (1, 1)]))
    for cls in ALGORITHMS.values():
        with pytest.raises(InvalidInputError):
            cls(matrix, AlgorithmParams(population_size=4)).initialize()


def test_bad_params_rejected_on_initialize(matrix):
    algo = GAJGHO(matrix, AlgorithmParams(population_size=0))
    with pytest.raises(InvalidInputError):
        algo.initialize()
    assert not algo.is_initialized


def test_stepping_requires_initialize(matrix, small_params):
    algo = StandardGA(matrix, small_params)
    with pytest.raises(RuntimeError):
        algo.run_generation()
    with pytest.raises(RuntimeError):
        algo.get_population()
    with pytest.raises(RuntimeError):
        algo.get_stats()


def test_reset_discards_state(matrix, small_params):
    algo = GAJGHO(matrix, small_params, rng=random.Random(1))
    algo.run(generations=2)
    assert len(algo.history) == 3
    algo.reset()
    assert not algo.is_initialized
    assert algo.history == ()
    with pytest.raises(RuntimeError):
        algo.get_population()
    algo.initialize()
    assert algo.generation == 0


def test_stops_at_max_generations(matrix):
    algo = StandardGA(matrix, AlgorithmParams(population_size=8, max_generations=3), rng=random.Random(0))
    assert algo.run().generation == 3
    assert algo.should_stop()


def test_low_diversity_stops_before_first_step(matrix):
    params = AlgorithmParams(population_size=200, early_stop_diversity=0.01)
    algo = Frozen(matrix, params, identical=True)
    algo.initialize()
    assert algo.get_stats().diversity == pytest.approx(1 / 200)
    assert algo.should_stop()
    assert algo.run().generation == 0


def test_stagnation_limit_stops_run(matrix):
    params = AlgorithmParams(population_size=6, stagnation_limit=3, max_generations=50)
    algo = Frozen(matrix, params, rng=random.Random(0))
    assert algo.run().generation == 3


def test_stagnation_disabled_by_default(matrix):
    algo = Frozen(matrix, AlgorithmParams(population_size=6, max_generations=7), rng=random.Random(0))
    assert algo.run().generation == 7


def test_run_callback_sees_each_step(matrix, small_params):
    seen = []
    algo = GAJGHO(matrix, small_params, rng=random.Random(0))
    algo.run(generations=3, callback=lambda population, stats: seen.append((population.generation, stats.generation)))
    assert seen == [(1, 1), (2, 2), (3, 3)]


def test_stats_track_population(matrix, small_params):
    algo = StandardGA(matrix, small_params, rng=random.Random(0))
    population = algo.initialize()
    stats = algo.get_stats()
    assert stats.best_length == population.best.length
    assert stats.worst_length == population.worst.length
    assert stats.average_length == pytest.approx(population.average)
    assert stats.diversity == population.diversity


def test_unknown_algorithm(matrix, small_params):
    with pytest.raises(UnknownAlgorithmError) as excinfo:
        create_algorithm("simulated_annealing", matrix, small_params)
    assert "gajgho" in str(excinfo.value)


def test_abc_colony_and_limit(matrix, small_params):
    algo = ABCTSP(matrix, small_params, rng=random.Random(0))
    population = algo.initialize()
    assert algo.colony_size == 5
    assert population.size == 5
    assert algo.limit == 10 * matrix.n // 2
    assert algo.trials == [0] * 5


def test_abc_scout_replaces_exhausted_source(matrix, small_params):
    algo = ABCTSP(matrix, small_params, rng=random.Random(0))
    sources = list(algo.initialize().chromosomes)
    exhausted = sources[2]
    algo.trials[2] = algo.limit
    algo._scout_phase(sources)
    assert algo.trials[2] == 0
    assert sources[2] is not exhausted
    assert is_permutation(sources[2].genes, matrix.n)


@pytest.mark.parametrize("seed", range(10))
def test_order_crossover_keeps_slice_and_fills_in_second_parent_order(seed):
    n = 8
    p1 = Chromosome(tuple(range(n)))
    p2 = Chromosome((5, 2, 7, 0, 3, 6, 1, 4))
    draw = random.Random(seed)
    start, end = sorted((draw.randrange(n), draw.randrange(n)))

    child = order_crossover(p1, p2, random.Random(seed)).genes
    assert is_permutation(child, n)
    assert child[start : end + 1] == p1.genes[start : end + 1]

    kept = set(p1.genes[start : end + 1])
    gaps = [(end + 1 + k) % n for k in range(n - (end - start + 1))]
    donors = [p2.genes[(end + 1 + k) % n] for k in range(n)]
    assert [child[pos] for pos in gaps] == [city for city in donors if city not in kept]


def test_onlookers_spend_one_trial_per_source(matrix, small_params):
    algo = ABCTSP(matrix, small_params, rng=random.Random(0))
    sources = list(algo.initialize().chromosomes)
    visits = []
    exploit = algo._exploit

    def counting(srcs, idx):
        visits.append(idx)
        exploit(srcs, idx)

    algo._exploit = counting
    algo._onlooker_phase(sources)
    assert len(visits) == len(sources)
    assert sum(algo.trials) <= len(sources)


def test_abc_selection_probabilities(matrix, small_params):
    algo = ABCTSP(matrix, small_params, rng=random.Random(0))
    sources = list(algo.initialize().chromosomes)
    probabilities = algo.selection_probabilities(sources)
    assert sum(probabilities) == pytest.approx(1.0)
    best = min(range(len(sources)), key=lambda i: sources[i].length)
    assert probabilities[best] == max(probabilities)


def test_aco_pheromone_starts_uniform_and_stays_symmetric(matrix, small_params):
    algo = PACO3Opt(matrix, small_params, rng=random.Random(0))
    assert np.allclose(algo.pheromone, 1.0 / matrix.n)
    algo.run(generations=2)
    assert np.allclose(algo.pheromone, algo.pheromone.T)
    assert np.all(algo.pheromone > 0)


def test_aco_update_evaporates_unused_edges(small_params):
    matrix = random_instance(6, seed=3).matrix
    algo = PACO3Opt(matrix, small_params, rng=random.Random(0))
    before = algo.pheromone.copy()
    colony = [Chromosome.scored([0, 1, 2, 3, 4, 5], matrix)]
    algo.update_pheromone(colony)
    rho = algo.aco.rho
    assert algo.pheromone[0, 3] == pytest.approx(before[0, 3] * (1 - rho))
    deposit = algo.aco.q / colony[0].length
    assert algo.pheromone[0, 1] == pytest.approx(before[0, 1] * (1 - rho) + deposit)
    assert algo.pheromone[5, 0] == pytest.approx(algo.pheromone[0, 5])


def test_aco_reset_restores_pheromone(matrix, small_params):
    algo = PACO3Opt(matrix, small_params, rng=random.Random(0))
    algo.run(generations=1)
    algo.reset()
    assert np.allclose(algo.pheromone, 1.0 / matrix.n)


def test_stop_is_logged_once_by_run(matrix, caplog):
    caplog.set_level(logging.INFO, logger="tsp_jgho.solvers.base")
    algo = Frozen(matrix, AlgorithmParams(population_size=200), identical=True)
    algo.initialize()
    for _ in range(3):
        assert algo.should_stop()
    assert caplog.records == []
    assert "diversity" in algo.stop_reason()

    algo.run()
    stops = [r for r in caplog.records if "stopped" in r.getMessage()]
    assert len(stops) == 1
    assert "diversity" in stops[0].getMessage()
