# API Routes module

from . import (
    artifacts,
    health,
)

__all__ = [
    "artifacts",
    "health",
]
