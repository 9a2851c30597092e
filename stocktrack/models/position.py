"""Position model class

This model represents one held symbol in the portfolio.

Attributes:
- symbol: Uppercase ticker, unique within a portfolio
- quantity: Number of shares held (always > 0 inside a portfolio)
- average_buy_price: Volume-weighted average cost per share
- current_price: Last known market price per share
"""

from stocktrack.parsing import MAX_SYMBOL_LENGTH, ValidationError


class Position:
    def __init__(
        self,
        symbol: str,
        quantity: int,
        average_buy_price: float,
        current_price: float | None = None,
    ):
        self.symbol = symbol
        self.quantity = quantity
        self.average_buy_price = average_buy_price
        # A fresh position is marked at its buy price
        self.current_price = (
            average_buy_price if current_price is None else current_price
        )

    def __repr__(self):
        return (
            f"Position(symbol={self.symbol}, quantity={self.quantity}, "
            f"average_buy_price={self.average_buy_price}, "
            f"current_price={self.current_price})"
        )

    def __eq__(self, other):
        if not isinstance(other, Position):
            return NotImplemented
        return self.as_tuple() == other.as_tuple()

    def as_tuple(self) -> tuple[str, int, float, float]:
        return (
            self.symbol,
            self.quantity,
            self.average_buy_price,
            self.current_price,
        )

    @property
    def market_value(self) -> float:
        return self.current_price * self.quantity

    @property
    def cost_basis(self) -> float:
        return self.average_buy_price * self.quantity

    @property
    def pl_pct(self) -> float:
        """Unrealized P/L as a percentage of cost basis (0 when cost is 0)."""
        cost = self.cost_basis
        if cost == 0.0:
            return 0.0
        return (self.market_value - cost) / cost * 100.0

    def validate(self):
        """Validate the position"""
        errors = []

        if not self.symbol:
            errors.append("symbol is required")
        elif self.symbol != self.symbol.upper():
            errors.append(f"symbol must be uppercase, but got {self.symbol}")
        elif len(self.symbol) > MAX_SYMBOL_LENGTH:
            errors.append(
                f"symbol must be at most {MAX_SYMBOL_LENGTH} characters"
            )

        if not isinstance(self.quantity, int) or isinstance(self.quantity, bool):
            errors.append(f"quantity must be an integer, but got {self.quantity!r}")
        elif self.quantity <= 0:
            errors.append(f"quantity must be > 0, but got {self.quantity}")

        if self.average_buy_price < 0:
            errors.append(
                f"average_buy_price must be >= 0, but got {self.average_buy_price}"
            )
        if self.current_price < 0:
            errors.append(f"current_price must be >= 0, but got {self.current_price}")

        if errors:
            raise ValidationError(f"Validation failed: {', '.join(errors)}")
