"""Pytest configuration and shared fixtures."""

import os
import tempfile

import pytest

from stocktrack.models.portfolio import Portfolio
from stocktrack.models.position import Position
from stocktrack.storage import PortfolioFile


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    """Keep settings from the developer's environment out of tests."""
    for name in ("STOCKTRACK_FILE", "STOCKTRACK_CAPACITY", "LOG_LEVEL"):
        monkeypatch.delenv(name, raising=False)


@pytest.fixture(scope="function")
def temp_portfolio_path():
    """Path to a portfolio file that does not exist yet."""
    with tempfile.TemporaryDirectory() as tmp_dir:
        yield os.path.join(tmp_dir, "portfolio.txt")


@pytest.fixture(scope="function")
def storage(temp_portfolio_path):
    """PortfolioFile backed by a temporary path."""
    return PortfolioFile(temp_portfolio_path)


@pytest.fixture
def portfolio():
    """Empty portfolio with the default capacity."""
    return Portfolio()


@pytest.fixture
def sample_portfolio():
    """Portfolio holding AAPL, MSFT and TSLA in that order."""
    p = Portfolio()
    p.insert(Position("AAPL", 10, 100.0, 120.0))
    p.insert(Position("MSFT", 5, 300.0, 280.0))
    p.insert(Position("TSLA", 2, 250.0, 250.0))
    return p


@pytest.fixture
def write_portfolio_file(temp_portfolio_path):
    """Write raw text to the temporary portfolio path."""

    def _write(text: str) -> str:
        with open(temp_portfolio_path, "w", encoding="utf-8") as f:
            f.write(text)
        return temp_portfolio_path

    return _write
