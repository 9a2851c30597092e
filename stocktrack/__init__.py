"""stocktrack: a small command-line stock portfolio tracker.

Positions live in an in-memory Portfolio and are persisted to a flat text
file between runs.
"""

__version__ = "0.1.0"

from stocktrack.models import (
    CapacityError,
    DuplicateSymbolError,
    NotFoundError,
    Portfolio,
    PortfolioError,
    Position,
)
from stocktrack.operations import (
    InsufficientSharesError,
    PortfolioMetrics,
    buy,
    compute_metrics,
    render_metrics,
    render_view,
    sell,
    update_price,
    update_prices_bulk,
)
from stocktrack.parsing import ValidationError
from stocktrack.storage import (
    PortfolioFile,
    StorageError,
    StorageReadError,
    StorageWriteError,
)

__all__ = [
    "CapacityError",
    "DuplicateSymbolError",
    "InsufficientSharesError",
    "NotFoundError",
    "Portfolio",
    "PortfolioError",
    "PortfolioFile",
    "PortfolioMetrics",
    "Position",
    "StorageError",
    "StorageReadError",
    "StorageWriteError",
    "ValidationError",
    "buy",
    "compute_metrics",
    "render_metrics",
    "render_view",
    "sell",
    "update_price",
    "update_prices_bulk",
]
