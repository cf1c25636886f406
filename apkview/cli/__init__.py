from .controller import main

__all__ = [
    "main",
]
