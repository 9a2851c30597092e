"""Portfolio store.

An ordered, bounded collection of positions keyed by symbol. Order is the
order in which symbols were first bought; removal collapses the sequence.
"""

import logging
from collections.abc import Callable, Iterator

from stocktrack.models.position import Position

logger = logging.getLogger(__name__)

DEFAULT_CAPACITY = 100


class PortfolioError(Exception):
    """Base exception for portfolio store errors."""

    pass


class NotFoundError(PortfolioError):
    """Raised when a symbol is not held."""

    pass


class CapacityError(PortfolioError):
    """Raised when inserting into a full portfolio."""

    pass


class DuplicateSymbolError(PortfolioError):
    """Raised when inserting a symbol that is already held."""

    pass


class Portfolio:
    """Ordered collection of positions with a fixed capacity ceiling.

    Lookups are linear scans; the store is small and bounded.
    """

    def __init__(self, capacity: int = DEFAULT_CAPACITY):
        """Initialize an empty portfolio.

        Args:
            capacity: Maximum number of positions (default: 100)

        Raises:
            ValueError: If capacity is not positive
        """
        if capacity <= 0:
            raise ValueError(f"Capacity must be > 0, but got {capacity}")

        self.capacity = capacity
        self._positions: list[Position] = []

    def __len__(self) -> int:
        return len(self._positions)

    def __iter__(self) -> Iterator[Position]:
        return iter(self._positions)

    def __getitem__(self, index: int) -> Position:
        return self._positions[index]

    def __repr__(self):
        return f"Portfolio(size={len(self)}, capacity={self.capacity})"

    @property
    def is_full(self) -> bool:
        return len(self._positions) >= self.capacity

    def index_of(self, symbol: str) -> int | None:
        """Return the index of symbol, or None if it is not held.

        Symbols are stored uppercase; callers pass a normalized symbol.
        """
        for index, position in enumerate(self._positions):
            if position.symbol == symbol:
                return index
        return None

    def find(self, symbol: str) -> Position | None:
        index = self.index_of(symbol)
        return None if index is None else self._positions[index]

    def insert(self, position: Position) -> int:
        """Append a new position.

        Returns:
            Index of the inserted position

        Raises:
            CapacityError: If the portfolio is full
            DuplicateSymbolError: If the symbol is already held
            ValidationError: If the position is invalid
        """
        if self.is_full:
            raise CapacityError(
                f"Portfolio full ({self.capacity} positions), cannot add "
                f"{position.symbol}"
            )
        if self.index_of(position.symbol) is not None:
            raise DuplicateSymbolError(f"{position.symbol} is already held")

        position.validate()
        self._positions.append(position)
        logger.debug(f"Inserted {position.symbol} at index {len(self) - 1}")
        return len(self._positions) - 1

    def remove_at(self, index: int) -> Position:
        """Remove and return the position at index, keeping survivors in order.

        Raises:
            IndexError: If index is out of range
        """
        if index < 0 or index >= len(self._positions):
            raise IndexError(f"Position index out of range: {index}")

        position = self._positions.pop(index)
        logger.debug(f"Removed {position.symbol} from index {index}")
        return position

    def update(self, index: int, mutator: Callable[[Position], None]) -> Position:
        """Apply mutator to the position at index in place.

        Raises:
            IndexError: If index is out of range
        """
        if index < 0 or index >= len(self._positions):
            raise IndexError(f"Position index out of range: {index}")

        position = self._positions[index]
        mutator(position)
        return position

    def clear(self) -> None:
        self._positions.clear()
