from ..exceptions import InvalidInputError, StaleFitnessError, UnknownAlgorithmError
from .ant_colony import PACO3Opt
from .base import Algorithm, GenerationStats
from .bee_colony import ABCTSP
from .distance import DistanceMatrix
from .gajgho import GAJGHO
from .heuristics import (
    christofides_tour,
    is_two_opt_optimal,
    nearest_neighbor_tour,
    random_tour,
    three_opt,
    two_opt,
)
from .population import Chromosome, Population, PopulationSnapshot, Tour, diversity_ratio
from .registry import ALGORITHMS, algorithm_names, create_algorithm
from .standard_ga import StandardGA

__all__ = [
    "Algorithm",
    "GenerationStats",
    "DistanceMatrix",
    "Chromosome",
    "Population",
    "PopulationSnapshot",
    "Tour",
    "diversity_ratio",
    "GAJGHO",
    "StandardGA",
    "ABCTSP",
    "PACO3Opt",
    "ALGORITHMS",
    "algorithm_names",
    "create_algorithm",
    "InvalidInputError",
    "StaleFitnessError",
    "UnknownAlgorithmError",
    "random_tour",
    "nearest_neighbor_tour",
    "christofides_tour",
    "two_opt",
    "is_two_opt_optimal",
    "three_opt",
]
