"""
Population-based TSP metaheuristics (GA-JGHO, a standard GA, an artificial bee
colony and an ant colony with 3-opt) behind one stepping contract.
"""

__all__ = [
    "benchmark",
    "config",
    "data",
    "exceptions",
    "solvers",
]
