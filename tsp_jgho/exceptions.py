from typing import Iterable, Optional


class TSPError(Exception):
    pass


class InvalidInputError(TSPError, ValueError):
    pass


class StaleFitnessError(TSPError, ValueError):
    pass


class UnknownAlgorithmError(TSPError, ValueError):
    def __init__(self, name: str, available: Optional[Iterable[str]] = None):
        self.name = name
        self.available = sorted(available or [])
        message = f"Unknown algorithm '{name}'."
        if self.available:
            message += f" Available algorithms: {', '.join(self.available)}"
        super().__init__(message)
