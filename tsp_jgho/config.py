from dataclasses import dataclass, replace
from typing import Optional

from .exceptions import InvalidInputError


@dataclass(frozen=True)
class AlgorithmParams:
    population_size: int = 100
    max_generations: int = 100
    elite_count: int = 2
    pfit_max: float = 0.76
    pfit_min: float = 0.0657
    ps_max: float = 0.5446
    ps_min: float = 0.1607
    beta: float = 0.292
    pjg: float = 0.6464
    q: int = 19
    two_opt_fraction: float = 0.2
    greedy_seed_fraction: float = 0.0
    early_stop_diversity: Optional[float] = 0.01
    stagnation_limit: Optional[int] = None
    random_seed: int = 123

    def replace(self, **changes) -> "AlgorithmParams":
        return replace(self, **changes)

    def validate(self) -> None:
        if self.population_size < 1:
            raise InvalidInputError(f"population_size must be positive, got {self.population_size}")
        if self.max_generations < 1:
            raise InvalidInputError(f"max_generations must be positive, got {self.max_generations}")
        if not 0 <= self.elite_count < self.population_size:
            raise InvalidInputError(
                f"elite_count must be in [0, population_size), got {self.elite_count}"
            )
        for name in ("pfit_max", "pfit_min", "ps_max", "ps_min", "pjg", "two_opt_fraction", "greedy_seed_fraction"):
            _check_unit(name, getattr(self, name))
        if self.pfit_min > self.pfit_max:
            raise InvalidInputError("pfit_min must not exceed pfit_max")
        if self.ps_min > self.ps_max:
            raise InvalidInputError("ps_min must not exceed ps_max")
        if not 0.0 < self.beta < 1.0:
            raise InvalidInputError(f"beta must be in (0, 1), got {self.beta}")
        if self.q < 1:
            raise InvalidInputError(f"q must be at least 1, got {self.q}")
        if self.early_stop_diversity is not None:
            _check_unit("early_stop_diversity", self.early_stop_diversity)
        if self.stagnation_limit is not None and self.stagnation_limit < 1:
            raise InvalidInputError(f"stagnation_limit must be positive, got {self.stagnation_limit}")


@dataclass(frozen=True)
class StandardGAParams:
    mutation_rate: float = 0.2

    def validate(self) -> None:
        _check_unit("mutation_rate", self.mutation_rate)


@dataclass(frozen=True)
class AntColonyParams:
    alpha: float = 1.0
    beta: float = 2.0
    rho: float = 0.5
    q: float = 100.0
    elite_tours: int = 5
    max_three_opt_passes: int = 10
    epsilon: float = 0.001

    def validate(self) -> None:
        _check_unit("rho", self.rho)
        if self.q <= 0:
            raise InvalidInputError(f"q must be positive, got {self.q}")
        if self.elite_tours < 1:
            raise InvalidInputError(f"elite_tours must be positive, got {self.elite_tours}")
        if self.max_three_opt_passes < 0:
            raise InvalidInputError("max_three_opt_passes must not be negative")
        if self.epsilon <= 0:
            raise InvalidInputError(f"epsilon must be positive, got {self.epsilon}")


def progress(generation: int, max_generations: int) -> float:
    return min(max(generation / max_generations, 0.0), 1.0)


def pfit(params: AlgorithmParams, generation: int) -> float:
    return params.pfit_max - (params.pfit_max - params.pfit_min) * progress(generation, params.max_generations)


def ps(params: AlgorithmParams, generation: int) -> float:
    return params.ps_max - (params.ps_max - params.ps_min) * progress(generation, params.max_generations)


def _check_unit(name: str, value: float) -> None:
    if not 0.0 <= value <= 1.0:
        raise InvalidInputError(f"{name} must be in [0, 1], got {value}")
