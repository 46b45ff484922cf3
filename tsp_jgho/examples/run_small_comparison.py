from tsp_jgho.benchmark import Benchmark, BenchmarkConfig
from tsp_jgho.config import AlgorithmParams
from tsp_jgho.data import random_instance


def main():
    instance = random_instance(20, seed=7)
    params = AlgorithmParams(population_size=20, max_generations=15)
    cfg = BenchmarkConfig(random_seed=7)
    bench = Benchmark(instance.matrix, params, cfg)

    def report(b: Benchmark) -> None:
        line = " ".join(f"{name}={algo.get_stats().best_length:.1f}" for name, algo in b.algorithms.items())
        print(f"gen {b.generation}: {line}")

    for res in bench.run(callback=report):
        print(f"{res.name}: best={res.best_length:.2f} gap={res.gap:.2%}")


if __name__ == "__main__":
    main()
