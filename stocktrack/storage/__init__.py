"""Flat-file portfolio storage.

One line per position, fields separated by a single space:

    SYMBOL QUANTITY AVERAGE_BUY_PRICE CURRENT_PRICE

No header, no footer. Writing is canonical; reading is tolerant and skips
lines it cannot parse.
"""

import logging
from pathlib import Path
from typing import Any

from stocktrack.models.portfolio import Portfolio
from stocktrack.models.position import Position
from stocktrack.parsing import (
    ValidationError,
    normalize_symbol,
    parse_decimal,
    parse_integer,
)

DEFAULT_PATH = "portfolio.txt"

logger = logging.getLogger(__name__)


class StorageError(Exception):
    """Base exception for storage errors."""

    pass


class StorageReadError(StorageError):
    """Raised when an existing portfolio file cannot be read."""

    pass


class StorageWriteError(StorageError):
    """Raised when the portfolio file cannot be written."""

    pass


def format_line(position: Position) -> str:
    """Serialize a position to one file line.

    Floats use repr(), the shortest text that reads back to the same value.
    """
    return (
        f"{position.symbol} {position.quantity} "
        f"{position.average_buy_price!r} {position.current_price!r}"
    )


def parse_line(line: str) -> Position | None:
    """Parse one file line into a Position.

    Returns:
        Position, or None if the line is malformed
    """
    fields = line.split()
    if len(fields) != 4:
        return None

    try:
        symbol = normalize_symbol(fields[0])
        quantity = parse_integer(fields[1])
        average_buy_price = parse_decimal(fields[2])
        current_price = parse_decimal(fields[3])
        position = Position(symbol, quantity, average_buy_price, current_price)
        position.validate()
    except ValidationError:
        return None

    return position


class PortfolioFile:
    """Reads and writes a portfolio to a text file."""

    def __init__(self, path: str | Path = DEFAULT_PATH):
        """Initialize storage.

        Args:
            path: Path to the portfolio file (default: portfolio.txt)
        """
        self.path = Path(path)

    def __repr__(self):
        return f"PortfolioFile(path={self.path})"

    def exists(self) -> bool:
        return self.path.is_file()

    def save(self, portfolio: Portfolio) -> int:
        """Overwrite the file with the portfolio in store order.

        Returns:
            Number of entries written

        Raises:
            StorageWriteError: If the file cannot be opened or written
        """
        lines = [format_line(position) + "\n" for position in portfolio]

        try:
            with open(self.path, "w", encoding="utf-8") as f:
                f.writelines(lines)
        except OSError as e:
            logger.error(f"Failed to save portfolio to {self.path}: {e}", exc_info=True)
            raise StorageWriteError(f"Failed to open save file {self.path}: {e}") from e

        logger.info(f"Portfolio saved to {self.path} ({len(lines)} entries)")
        return len(lines)

    def load(self, portfolio: Portfolio) -> dict[str, Any]:
        """Replace the portfolio contents with the file's positions.

        A missing file is not an error: the portfolio is left as is and the
        status is "missing". Otherwise the portfolio is cleared first.
        Malformed lines, including ones that are not valid UTF-8, and
        duplicate symbols are skipped silently; valid entries beyond
        capacity are skipped with a warning.

        Returns:
            Dictionary with load results:
            {
                "status": "loaded" | "missing",
                "path": str,
                "loaded": int,
                "skipped_malformed": int,
                "skipped_overflow": list[str]
            }

        Raises:
            StorageReadError: If the file exists but cannot be opened or read
        """
        result: dict[str, Any] = {
            "status": "missing",
            "path": str(self.path),
            "loaded": 0,
            "skipped_malformed": 0,
            "skipped_overflow": [],
        }

        if not self.exists():
            logger.info(f"No saved portfolio found ({self.path})")
            return result

        try:
            with open(self.path, "rb") as f:
                raw_lines = f.readlines()
        except OSError as e:
            logger.error(f"Failed to read portfolio from {self.path}: {e}", exc_info=True)
            raise StorageReadError(f"Failed to read {self.path}: {e}") from e

        portfolio.clear()
        result["status"] = "loaded"

        for line_no, raw in enumerate(raw_lines, 1):
            try:
                position = parse_line(raw.decode("utf-8"))
            except UnicodeDecodeError:
                position = None
            if position is None or portfolio.find(position.symbol) is not None:
                logger.debug(f"Skipping malformed line {line_no} in {self.path}")
                result["skipped_malformed"] += 1
                continue

            if portfolio.is_full:
                logger.warning(
                    f"Reached capacity ({portfolio.capacity}), skipping {position.symbol}"
                )
                result["skipped_overflow"].append(position.symbol)
                continue

            portfolio.insert(position)
            result["loaded"] += 1

        logger.info(f"Loaded {result['loaded']} entries from {self.path}")
        return result
