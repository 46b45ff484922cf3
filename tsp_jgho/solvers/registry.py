import random
from typing import Dict, List, Optional, Type

from ..config import AlgorithmParams
from ..exceptions import UnknownAlgorithmError
from .ant_colony import PACO3Opt
from .base import Algorithm
from .bee_colony import ABCTSP
from .distance import DistanceMatrix
from .gajgho import GAJGHO
from .standard_ga import StandardGA


ALGORITHMS: Dict[str, Type[Algorithm]] = {
    GAJGHO.name: GAJGHO,
    StandardGA.name: StandardGA,
    ABCTSP.name: ABCTSP,
    PACO3Opt.name: PACO3Opt,
}


def algorithm_names() -> List[str]:
    return list(ALGORITHMS)


def create_algorithm(
    name: str,
    matrix: DistanceMatrix,
    params: AlgorithmParams,
    rng: Optional[random.Random] = None,
    **options,
) -> Algorithm:
    try:
        cls = ALGORITHMS[name]
    except KeyError:
        raise UnknownAlgorithmError(name, ALGORITHMS) from None
    return cls(matrix, params, rng, **options)
