"""Portfolio operations: buy, sell, price updates, metrics and views.

Each operation is a small transaction against a Portfolio passed in by the
caller. Inputs may arrive as raw strings (as read from the prompt) or as
already-typed numbers. Every operation validates fully before mutating, so
a failure leaves the portfolio unchanged.
"""

import logging
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any

from stocktrack.models.portfolio import CapacityError, NotFoundError, Portfolio
from stocktrack.models.position import Position
from stocktrack.parsing import (
    ValidationError,
    normalize_symbol,
    parse_decimal,
    parse_integer,
)

logger = logging.getLogger(__name__)

BULK_SYMBOL = "ALL"


class InsufficientSharesError(ValidationError):
    """Raised when selling more shares than are held."""

    pass


@dataclass(frozen=True)
class PortfolioMetrics:
    total_cost: float
    market_value: float
    unrealized_pnl: float
    return_pct: float


def _to_int(value: str | int, field: str) -> int:
    if isinstance(value, str):
        return parse_integer(value, field)
    if isinstance(value, bool) or not isinstance(value, int):
        raise ValidationError(f"Invalid {field}: {value!r}")
    return value


def _to_decimal(value: str | float, field: str) -> float:
    if isinstance(value, str):
        return parse_decimal(value, field)
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ValidationError(f"Invalid {field}: {value!r}")
    return float(value)


def check_quantity(quantity: str | int) -> int:
    """Parse a trade quantity and require it to be positive.

    Raises:
        ValidationError: If the quantity is unparsable or not > 0
    """
    qty = _to_int(quantity, "quantity")
    if qty <= 0:
        raise ValidationError("Quantity must be > 0")
    return qty


def buy(
    portfolio: Portfolio,
    symbol: str,
    quantity: str | int,
    price: str | float,
) -> Position:
    """Buy shares, adding a new position or averaging into an existing one.

    The buy price also becomes the position's current price.

    Args:
        portfolio: Portfolio to mutate
        symbol: Ticker symbol (normalized to uppercase)
        quantity: Number of shares, > 0
        price: Price per share, > 0

    Returns:
        The new or updated Position

    Raises:
        ValidationError: If any input is empty, unparsable or not positive
        CapacityError: If the symbol is new and the portfolio is full
    """
    symbol = normalize_symbol(symbol)

    qty = check_quantity(quantity)

    unit_price = _to_decimal(price, "price")
    if unit_price <= 0.0:
        raise ValidationError("Price must be > 0")

    index = portfolio.index_of(symbol)
    if index is not None:

        def apply_buy(position: Position) -> None:
            old_cost = position.quantity * position.average_buy_price
            new_cost = qty * unit_price
            position.quantity += qty
            position.average_buy_price = (old_cost + new_cost) / position.quantity
            position.current_price = unit_price

        position = portfolio.update(index, apply_buy)
        logger.info(
            f"Updated {symbol}: qty={position.quantity} "
            f"avg_buy={position.average_buy_price:.2f} "
            f"cur_price={position.current_price:.2f}"
        )
        return position

    if portfolio.is_full:
        raise CapacityError(f"Portfolio full! Cannot buy {symbol}")

    position = Position(symbol, qty, unit_price, unit_price)
    portfolio.insert(position)
    logger.info(f"Added {symbol} to portfolio (qty={qty} @ {unit_price:.2f})")
    return position


def sell(
    portfolio: Portfolio,
    symbol: str,
    quantity: str | int,
    price: str | float,
) -> dict[str, Any]:
    """Sell shares of a held symbol.

    The sell price becomes the position's current price. Selling the whole
    holding removes the position.

    Args:
        portfolio: Portfolio to mutate
        symbol: Ticker symbol, must be held
        quantity: Shares to sell, > 0 and <= shares held
        price: Executed price per share, >= 0

    Returns:
        Dictionary with sale results:
        {
            "symbol": str,
            "sold": int,
            "price": float,
            "remaining": int,
            "removed": bool
        }

    Raises:
        NotFoundError: If the symbol is not held
        ValidationError: If quantity or price is invalid
        InsufficientSharesError: If quantity exceeds shares held
    """
    symbol = normalize_symbol(symbol)

    index = portfolio.index_of(symbol)
    if index is None:
        raise NotFoundError(f"Stock not found: {symbol}")

    qty = check_quantity(quantity)

    unit_price = _to_decimal(price, "price")
    if unit_price < 0.0:
        raise ValidationError("Price must be >= 0")

    held = portfolio[index].quantity
    if qty > held:
        raise InsufficientSharesError(
            f"You don't have enough shares of {symbol} (held {held}, selling {qty})"
        )

    def apply_sell(position: Position) -> None:
        position.quantity -= qty
        position.current_price = unit_price

    position = portfolio.update(index, apply_sell)

    removed = position.quantity == 0
    if removed:
        portfolio.remove_at(index)
        logger.info(f"Sold all {qty} shares of {symbol}, position removed")
    else:
        logger.info(
            f"Sold {qty} shares of {symbol} @ {unit_price:.2f}, "
            f"remaining qty={position.quantity}"
        )

    return {
        "symbol": symbol,
        "sold": qty,
        "price": unit_price,
        "remaining": position.quantity,
        "removed": removed,
    }


def update_price(portfolio: Portfolio, symbol: str, price: str | float) -> Position:
    """Set the current price of one held symbol.

    Raises:
        NotFoundError: If the symbol is not held
        ValidationError: If the price is unparsable or not positive
    """
    symbol = normalize_symbol(symbol)

    index = portfolio.index_of(symbol)
    if index is None:
        raise NotFoundError(f"Symbol {symbol} not found")

    new_price = _to_decimal(price, "price")
    if new_price <= 0.0:
        raise ValidationError("Price must be > 0")

    def apply_price(position: Position) -> None:
        position.current_price = new_price

    position = portfolio.update(index, apply_price)
    logger.info(f"Updated {symbol} current price to {new_price:.2f}")
    return position


def update_prices_bulk(
    portfolio: Portfolio, price_source: Callable[[Position], str | None]
) -> dict[str, Any]:
    """Update current prices for every position in store order.

    price_source is called once per position and returns the raw price
    text, "" to leave the position unchanged, or None at end of input.
    Invalid entries are skipped with a warning; the batch never aborts on
    a bad entry.

    Returns:
        Dictionary with update results:
        {
            "status": "complete" | "interrupted" | "empty",
            "updated": list[str],
            "skipped": list[str],
            "invalid": list[str],
            "errors": list[str]
        }
    """
    updated: list[str] = []
    skipped: list[str] = []
    invalid: list[str] = []
    errors: list[str] = []

    if len(portfolio) == 0:
        return {
            "status": "empty",
            "updated": updated,
            "skipped": skipped,
            "invalid": invalid,
            "errors": errors,
        }

    status = "complete"
    for index, position in enumerate(list(portfolio)):
        raw = price_source(position)
        if raw is None:
            logger.warning(
                f"Input ended during bulk update at {position.symbol}, "
                f"{len(portfolio) - index} positions left unchanged"
            )
            status = "interrupted"
            break

        if raw.strip() == "":
            skipped.append(position.symbol)
            continue

        try:
            new_price = parse_decimal(raw)
            if new_price <= 0.0:
                raise ValidationError("Price must be > 0")
        except ValidationError as e:
            error_msg = f"Invalid price for {position.symbol}, skipping: {e}"
            logger.warning(error_msg)
            invalid.append(position.symbol)
            errors.append(error_msg)
            continue

        def apply_price(p: Position, new_price: float = new_price) -> None:
            p.current_price = new_price

        portfolio.update(index, apply_price)
        updated.append(position.symbol)

    logger.info(
        f"Bulk price update {status}: {len(updated)} updated, "
        f"{len(skipped)} skipped, {len(invalid)} invalid"
    )

    return {
        "status": status,
        "updated": updated,
        "skipped": skipped,
        "invalid": invalid,
        "errors": errors,
    }


def compute_metrics(portfolio: Portfolio) -> PortfolioMetrics:
    """Aggregate cost basis, market value and unrealized P/L.

    The return percentage is defined as 0 when the cost basis is 0.
    """
    total_cost = 0.0
    market_value = 0.0
    for position in portfolio:
        total_cost += position.cost_basis
        market_value += position.market_value

    unrealized = market_value - total_cost
    pct = 0.0 if total_cost == 0.0 else unrealized / total_cost * 100.0

    return PortfolioMetrics(
        total_cost=total_cost,
        market_value=market_value,
        unrealized_pnl=unrealized,
        return_pct=pct,
    )


def render_view(portfolio: Portfolio) -> str:
    """Format the holdings as a table, or an empty notice."""
    if len(portfolio) == 0:
        return "Portfolio is empty."

    lines = [
        f"{'Symbol':<15} {'Qty':<6} {'Buy':<10} {'Cur':<10} "
        f"{'Mkt Value':<12} {'P/L%':<8}"
    ]
    for position in portfolio:
        lines.append(
            f"{position.symbol:<15} {position.quantity:<6d} "
            f"{position.average_buy_price:<10.2f} {position.current_price:<10.2f} "
            f"{position.market_value:<12.2f} {position.pl_pct:.2f}%"
        )
    return "\n".join(lines)


def render_metrics(metrics: PortfolioMetrics) -> str:
    return "\n".join(
        [
            f"Total cost basis : {metrics.total_cost:.2f}",
            f"Market value     : {metrics.market_value:.2f}",
            f"Unrealized P/L   : {metrics.unrealized_pnl:.2f}",
            f"Portfolio return : {metrics.return_pct:.2f}%",
        ]
    )
