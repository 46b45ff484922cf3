import random
from typing import List, Sequence

from networkx.algorithms.approximation import christofides

from .distance import DistanceMatrix
from .population import Chromosome, sort_by_length


IMPROVEMENT_TOLERANCE = 1e-10


def random_tour(n: int, rng: random.Random) -> List[int]:
    tour = list(range(n))
    rng.shuffle(tour)
    return tour


def nearest_neighbor_tour(matrix: DistanceMatrix, start: int) -> List[int]:
    tour = [start]
    unvisited = [city for city in range(matrix.n) if city != start]
    current = start
    while unvisited:
        nxt = matrix.nearest(current, unvisited)
        tour.append(nxt)
        unvisited.remove(nxt)
        current = nxt
    return tour


def christofides_tour(matrix: DistanceMatrix) -> List[int]:
    if matrix.n < 3:
        return list(range(matrix.n))
    cycle = christofides(matrix.to_graph(), weight="weight")
    # networkx closes the cycle by repeating the start node.
    return list(cycle[:-1])


def two_opt(matrix: DistanceMatrix, tour: Sequence[int], tolerance: float = IMPROVEMENT_TOLERANCE) -> List[int]:
    best = list(tour)
    n = len(best)
    if n < 4:
        return best
    d = matrix.rows
    improved = True
    while improved:
        improved = False
        for i in range(n - 2):
            a = best[i]
            b = best[i + 1]
            # (0, 1) and (n-1, 0) share city 0, so skip j = n-1 when i = 0.
            for j in range(i + 2, n if i > 0 else n - 1):
                c = best[j]
                e = best[(j + 1) % n]
                delta = d[a][c] + d[b][e] - d[a][b] - d[c][e]
                if delta < -tolerance:
                    best[i + 1 : j + 1] = best[i + 1 : j + 1][::-1]
                    b = best[i + 1]
                    improved = True
    return best


def is_two_opt_optimal(matrix: DistanceMatrix, tour: Sequence[int], tolerance: float = IMPROVEMENT_TOLERANCE) -> bool:
    n = len(tour)
    d = matrix.rows
    for i in range(n - 2):
        a = tour[i]
        b = tour[i + 1]
        for j in range(i + 2, n if i > 0 else n - 1):
            c = tour[j]
            e = tour[(j + 1) % n]
            if d[a][c] + d[b][e] - d[a][b] - d[c][e] < -tolerance:
                return False
    return True


def three_opt(
    matrix: DistanceMatrix,
    tour: Sequence[int],
    max_passes: int = 10,
    tolerance: float = IMPROVEMENT_TOLERANCE,
) -> List[int]:
    """Bounded first-improvement 3-opt.

    The tour is cut after positions i < j < k into s1 = [..i], s2 = (i..j],
    s3 = (j..k], s4 = (k..]. Four re-linkings are tried in order: reverse s2,
    reverse s3, swap s2/s3, and reverse both in swapped order. Each pass
    adopts the first strictly shorter variant and restarts; the search stops
    when a pass finds nothing or ``max_passes`` moves have been made.
    """
    best = list(tour)
    n = len(best)
    if n < 4:
        return best
    d = matrix.rows
    for _ in range(max_passes):
        move = _first_three_opt_move(d, best, n, tolerance)
        if move is None:
            break
        case, i, j, k = move
        s1 = best[: i + 1]
        s2 = best[i + 1 : j + 1]
        s3 = best[j + 1 : k + 1]
        s4 = best[k + 1 :]
        if case == 0:
            best = s1 + s2[::-1] + s3 + s4
        elif case == 1:
            best = s1 + s2 + s3[::-1] + s4
        elif case == 2:
            best = s1 + s3 + s2 + s4
        else:
            best = s1 + s3[::-1] + s2[::-1] + s4
    return best


def _first_three_opt_move(d, tour, n, tolerance):
    for i in range(n - 2):
        a = tour[i]
        b = tour[i + 1]
        dab = d[a][b]
        for j in range(i + 1, n - 1):
            c = tour[j]
            g = tour[j + 1]
            dcg = d[c][g]
            # Reversing s2 does not depend on k; k = j+1 is the first triple that tries it.
            if d[a][c] + d[b][g] - dab - dcg < -tolerance:
                return 0, i, j, j + 1
            for k in range(j + 1, n):
                e = tour[k]
                # For k = n-1, f wraps to tour[0] and s4 is empty.
                f = tour[(k + 1) % n]
                def_ = d[e][f]
                if d[c][e] + d[g][f] - dcg - def_ < -tolerance:
                    return 1, i, j, k
                if d[a][g] + d[e][b] + d[c][f] - dab - dcg - def_ < -tolerance:
                    return 2, i, j, k
                if d[a][e] + d[b][f] - dab - def_ < -tolerance:
                    return 3, i, j, k
    return None


def apply_two_opt_to_top(chromosomes: Sequence[Chromosome], matrix: DistanceMatrix, k: int) -> List[Chromosome]:
    ranked = sort_by_length(chromosomes)
    for idx in range(min(k, len(ranked))):
        ranked[idx] = Chromosome.scored(two_opt(matrix, ranked[idx].genes), matrix)
    return ranked
