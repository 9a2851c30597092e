"""Input parsing helpers.

Converts raw line input into validated integers, decimals and ticker
symbols. Parsing is strict: the whole trimmed string must be a number,
so "12abc" is rejected rather than read as 12.
"""

import math
import re
import sys
from typing import TextIO

MAX_SYMBOL_LENGTH = 15

_INTEGER_RE = re.compile(r"^[+-]?\d+$")
_DECIMAL_RE = re.compile(r"^[+-]?(\d+(\.\d*)?|\.\d+)([eE][+-]?\d+)?$")


class ValidationError(ValueError):
    """Raised when user input is malformed or out of range."""

    pass


def read_line(stream: TextIO | None = None) -> str | None:
    """Read one line of input.

    Args:
        stream: Text stream to read from (default: sys.stdin)

    Returns:
        The line without its trailing newline, or None at end of input.
        An empty line is returned as "".
    """
    if stream is None:
        stream = sys.stdin

    line = stream.readline()
    if line == "":
        return None

    if line.endswith("\n"):
        line = line[:-1]
    if line.endswith("\r"):
        line = line[:-1]
    return line


def parse_integer(text: str, field: str = "quantity") -> int:
    """Parse a base-10 integer, rejecting partial matches.

    Raises:
        ValidationError: If the trimmed text is not a whole integer
    """
    value = text.strip()
    if not _INTEGER_RE.match(value):
        raise ValidationError(f"Invalid {field}: {text!r}")
    return int(value)


def parse_decimal(text: str, field: str = "price") -> float:
    """Parse a base-10 decimal, rejecting partial matches.

    Raises:
        ValidationError: If the trimmed text is not a finite decimal
    """
    value = text.strip()
    if not _DECIMAL_RE.match(value):
        raise ValidationError(f"Invalid {field}: {text!r}")

    result = float(value)
    # Exponents such as 1e999 overflow to inf
    if not math.isfinite(result):
        raise ValidationError(f"Invalid {field}: {text!r}")
    return result


def normalize_symbol(text: str) -> str:
    """Return the trimmed, uppercased form of a ticker symbol.

    Raises:
        ValidationError: If the symbol is empty, contains whitespace,
            or is longer than MAX_SYMBOL_LENGTH
    """
    symbol = text.strip().upper()

    if not symbol:
        raise ValidationError("No symbol entered")
    if any(ch.isspace() for ch in symbol):
        raise ValidationError(f"Symbol must not contain spaces: {text!r}")
    if len(symbol) > MAX_SYMBOL_LENGTH:
        raise ValidationError(
            f"Symbol too long ({len(symbol)} > {MAX_SYMBOL_LENGTH}): {symbol}"
        )

    return symbol
