import random

import pytest

from tsp_jgho.config import AlgorithmParams
from tsp_jgho.data import random_instance, square_instance


@pytest.fixture
def rng():
    return random.Random(1234)


@pytest.fixture
def instance():
    return random_instance(12, seed=42)


@pytest.fixture
def matrix(instance):
    return instance.matrix


@pytest.fixture
def square():
    return square_instance()


@pytest.fixture
def small_params():
    return AlgorithmParams(population_size=10, max_generations=20, elite_count=2, q=4)


class FakeClock:
    def __init__(self, step: float = 0.5):
        self.now = 0.0
        self.step = step

    def __call__(self) -> float:
        self.now += self.step
        return self.now


@pytest.fixture
def fake_clock():
    return FakeClock
