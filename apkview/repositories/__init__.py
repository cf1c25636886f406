from .results_repository import ResultsRepository

__all__ = [
    "ResultsRepository",
]
