import argparse
import logging
import time
from typing import List, Optional

from tsp_jgho.benchmark import Benchmark, BenchmarkConfig, BenchmarkResult
from tsp_jgho.config import AlgorithmParams
from tsp_jgho.data import Instance, random_instance, square_instance
from tsp_jgho.exceptions import TSPError
from tsp_jgho.solvers import GenerationStats, Population, algorithm_names, create_algorithm


def log(msg: str) -> None:
    ts = time.strftime("%H:%M:%S")
    print(f"[{ts}] {msg}", flush=True)


def _instance(args) -> Instance:
    if args.square:
        return square_instance()
    return random_instance(args.cities, seed=args.seed)


def _params(args) -> AlgorithmParams:
    return AlgorithmParams(
        population_size=args.population,
        max_generations=args.generations,
        random_seed=args.seed,
    )


def _print_generation(name: str, stats: GenerationStats) -> None:
    print(
        f"[{name}] gen {stats.generation:4d} best={stats.best_length:10.2f} "
        f"avg={stats.average_length:10.2f} div={stats.diversity:.3f} t={stats.elapsed * 1000:.1f}ms"
    )


def run(args) -> None:
    instance = _instance(args)
    log(f"instance {instance.name} ({instance.size} cities, fingerprint {instance.fingerprint})")
    algo = create_algorithm(args.algorithm, instance.matrix, _params(args))
    algo.initialize()
    _print_generation(algo.name, algo.get_stats())

    def on_step(population: Population, stats: GenerationStats) -> None:
        _print_generation(algo.name, stats)

    final = algo.run(callback=on_step)
    best = final.best
    log(f"{algo.name} finished at generation {final.generation}: best={best.length:.2f}")
    print("tour: " + " ".join(str(city) for city in best.genes))


def _print_results(results: List[BenchmarkResult]) -> None:
    for rank, res in enumerate(results, start=1):
        print(
            f"{rank}. {res.name:<12} best={res.best_length:10.2f} gap={res.gap * 100:7.2f}% "
            f"time={res.total_time:.3f}s gens={res.generations}"
        )


def compare(args) -> None:
    instance = _instance(args)
    names = [name.strip() for name in args.algorithms.split(",") if name.strip()]
    log(f"comparing {', '.join(names)} on {instance.name} ({instance.size} cities)")
    cfg = BenchmarkConfig(algorithms=names, generations=args.generations, random_seed=args.seed)
    bench = Benchmark(instance.matrix, _params(args), cfg, optimum=instance.optimum)

    def on_step(b: Benchmark) -> None:
        if b.generation % args.report_every == 0 or b.generation == b.generations:
            tops = " | ".join(
                f"{name}={algo.get_stats().best_length:.2f}" for name, algo in b.algorithms.items()
            )
            log(f"gen {b.generation}: {tops}")

    results = bench.run(callback=on_step)
    log(f"reference length {bench.reference:.2f}")
    _print_results(results)


def _add_common(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("--cities", type=int, default=30)
    parser.add_argument("--square", action="store_true", help="Use the 4-city square (optimum 40)")
    parser.add_argument("--generations", type=int, default=100)
    parser.add_argument("--population", type=int, default=50)
    parser.add_argument("--seed", type=int, default=123)
    parser.add_argument("--verbose", action="store_true")


def main(argv: Optional[List[str]] = None) -> int:
    parser = argparse.ArgumentParser(description="TSP metaheuristics (GA-JGHO and comparators)")
    subparsers = parser.add_subparsers(dest="command", required=True)

    run_parser = subparsers.add_parser("run", help="Run a single algorithm")
    run_parser.add_argument("--algorithm", choices=algorithm_names(), default="gajgho")
    _add_common(run_parser)
    run_parser.set_defaults(func=run)

    compare_parser = subparsers.add_parser("compare", help="Run several algorithms in lockstep")
    compare_parser.add_argument("--algorithms", default=",".join(algorithm_names()))
    compare_parser.add_argument("--report-every", type=int, default=10)
    _add_common(compare_parser)
    compare_parser.set_defaults(func=compare)

    args = parser.parse_args(argv)
    if args.verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(asctime)s %(name)s %(levelname)s %(message)s")
    try:
        args.func(args)
    except TSPError as exc:
        print(f"error: {exc}")
        return 2
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
