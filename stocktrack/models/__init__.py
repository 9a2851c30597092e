"""In-memory portfolio model classes."""

# Re-export model classes for convenient imports
from stocktrack.models.portfolio import (
    DEFAULT_CAPACITY,
    CapacityError,
    DuplicateSymbolError,
    NotFoundError,
    Portfolio,
    PortfolioError,
)
from stocktrack.models.position import Position

__all__ = [
    "DEFAULT_CAPACITY",
    "CapacityError",
    "DuplicateSymbolError",
    "NotFoundError",
    "Portfolio",
    "PortfolioError",
    "Position",
]
