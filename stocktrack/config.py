"""Runtime settings read from the environment and an optional .env file.

Variables:
    STOCKTRACK_FILE      Portfolio file path (default: portfolio.txt)
    STOCKTRACK_CAPACITY  Maximum number of positions (default: 100)
    LOG_LEVEL            Logging level name (default: WARNING)
"""

import logging
import os
from dataclasses import dataclass

from dotenv import load_dotenv

from stocktrack.models.portfolio import DEFAULT_CAPACITY
from stocktrack.storage import DEFAULT_PATH


@dataclass(frozen=True)
class Settings:
    portfolio_file: str = DEFAULT_PATH
    capacity: int = DEFAULT_CAPACITY
    log_level: str = "WARNING"


def load_settings() -> Settings:
    """Build Settings from the environment, loading .env first.

    Raises:
        ValueError: If STOCKTRACK_CAPACITY is not a positive integer or
            LOG_LEVEL is not a logging level name
    """
    load_dotenv()

    raw_capacity = os.getenv("STOCKTRACK_CAPACITY", str(DEFAULT_CAPACITY))
    try:
        capacity = int(raw_capacity)
    except ValueError:
        capacity = 0
    if capacity <= 0:
        raise ValueError(
            f"STOCKTRACK_CAPACITY must be a positive integer, got {raw_capacity!r}"
        )

    log_level = os.getenv("LOG_LEVEL", "WARNING").upper()
    # getLevelName maps known names to their numeric level
    if not isinstance(logging.getLevelName(log_level), int):
        raise ValueError(f"LOG_LEVEL must be a logging level name, got {log_level!r}")

    return Settings(
        portfolio_file=os.getenv("STOCKTRACK_FILE", DEFAULT_PATH),
        capacity=capacity,
        log_level=log_level,
    )
