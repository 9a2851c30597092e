"""Unit tests for CLI commands."""

import pytest
from click.testing import CliRunner

from stocktrack.cli import cli
from stocktrack.storage import PortfolioFile, StorageReadError


@pytest.fixture
def runner():
    return CliRunner()


@pytest.fixture
def saved_file(write_portfolio_file):
    """Portfolio file holding AAPL and MSFT."""
    return write_portfolio_file("AAPL 10 100.0 120.0\nMSFT 5 300.0 280.0\n")


def read_file(path):
    with open(path, encoding="utf-8") as f:
        return f.read()


class TestViewAndMetrics:
    """Test read-only commands."""

    def test_view(self, runner, saved_file):
        """Test view prints the table."""
        result = runner.invoke(cli, ["--file", saved_file, "view"])
        assert result.exit_code == 0
        assert "AAPL" in result.output
        assert "1200.00" in result.output

    def test_view_missing_file(self, runner, temp_portfolio_path):
        """Test view without a saved file shows the empty notice."""
        result = runner.invoke(cli, ["--file", temp_portfolio_path, "view"])
        assert result.exit_code == 0
        assert "Portfolio is empty." in result.output

    def test_metrics(self, runner, saved_file):
        """Test metrics prints totals."""
        result = runner.invoke(cli, ["--file", saved_file, "metrics"])
        assert result.exit_code == 0
        assert "Total cost basis : 2500.00" in result.output
        assert "Market value     : 2600.00" in result.output

    def test_file_from_environment(self, runner, saved_file, monkeypatch):
        """Test STOCKTRACK_FILE is used when --file is not given."""
        monkeypatch.setenv("STOCKTRACK_FILE", saved_file)
        result = runner.invoke(cli, ["view"])
        assert "MSFT" in result.output

    def test_invalid_capacity_env(self, runner, monkeypatch):
        """Test a bad STOCKTRACK_CAPACITY is a usage error."""
        monkeypatch.setenv("STOCKTRACK_CAPACITY", "zero")
        result = runner.invoke(cli, ["view"])
        assert result.exit_code == 2
        assert "STOCKTRACK_CAPACITY" in result.output

    def test_invalid_log_level_env(self, runner, monkeypatch):
        """Test an unknown LOG_LEVEL is a usage error."""
        monkeypatch.setenv("LOG_LEVEL", "FOO")
        result = runner.invoke(cli, ["view"])
        assert result.exit_code == 2
        assert "LOG_LEVEL" in result.output

    def test_view_read_failure(self, runner, saved_file, monkeypatch):
        """Test one-shot commands exit 1 when the file cannot be read."""

        def failing_load(self, portfolio):
            raise StorageReadError(f"Failed to read {self.path}: permission denied")

        monkeypatch.setattr(PortfolioFile, "load", failing_load)
        result = runner.invoke(cli, ["--file", saved_file, "view"])
        assert result.exit_code == 1
        assert "permission denied" in result.output


class TestTradeCommands:
    """Test buy, sell and price commands."""

    def test_buy_saves(self, runner, temp_portfolio_path):
        """Test buy creates the file with the new position."""
        result = runner.invoke(cli, ["--file", temp_portfolio_path, "buy", "aapl", "10", "100"])
        assert result.exit_code == 0
        assert "✓ AAPL: qty=10 avg_buy=100.00 cur_price=100.00" in result.output
        assert read_file(temp_portfolio_path) == "AAPL 10 100.0 100.0\n"

    def test_buy_invalid(self, runner, saved_file):
        """Test invalid buy exits 1 and leaves the file unchanged."""
        before = read_file(saved_file)
        result = runner.invoke(cli, ["--file", saved_file, "buy", "AAPL", "0", "100"])
        assert result.exit_code == 1
        assert "Quantity must be > 0" in result.output
        assert read_file(saved_file) == before

    def test_buy_capacity(self, runner, saved_file):
        """Test --capacity limits new symbols."""
        result = runner.invoke(
            cli, ["--file", saved_file, "--capacity", "2", "buy", "TSLA", "1", "250"]
        )
        assert result.exit_code == 1
        assert "Portfolio full" in result.output

    def test_sell_partial(self, runner, saved_file):
        """Test sell updates quantity and mark."""
        result = runner.invoke(cli, ["--file", saved_file, "sell", "AAPL", "4", "130"])
        assert result.exit_code == 0
        assert "remaining qty=6" in result.output
        assert read_file(saved_file).splitlines()[0] == "AAPL 6 100.0 130.0"

    def test_sell_all(self, runner, saved_file):
        """Test selling everything removes the line."""
        result = runner.invoke(cli, ["--file", saved_file, "sell", "AAPL", "10", "130"])
        assert result.exit_code == 0
        assert "position removed" in result.output
        assert read_file(saved_file) == "MSFT 5 300.0 280.0\n"

    def test_sell_unknown(self, runner, saved_file):
        """Test selling an unheld symbol exits 1."""
        result = runner.invoke(cli, ["--file", saved_file, "sell", "GOOG", "1", "10"])
        assert result.exit_code == 1
        assert "Stock not found: GOOG" in result.output

    def test_price(self, runner, saved_file):
        """Test price sets the current price."""
        result = runner.invoke(cli, ["--file", saved_file, "price", "msft", "305.5"])
        assert result.exit_code == 0
        assert "Updated MSFT current price to 305.50" in result.output
        assert read_file(saved_file).splitlines()[1] == "MSFT 5 300.0 305.5"

    def test_price_invalid(self, runner, saved_file):
        """Test invalid price exits 1."""
        result = runner.invoke(cli, ["--file", saved_file, "price", "MSFT", "abc"])
        assert result.exit_code == 1
        assert "Invalid price" in result.output


class TestShellCommand:
    """Test the interactive shell entry points."""

    def test_no_command_starts_shell(self, runner, temp_portfolio_path):
        """Test running without a command starts the menu."""
        result = runner.invoke(cli, ["--file", temp_portfolio_path], input="0\n")
        assert result.exit_code == 0
        assert "No saved portfolio found" in result.output
        assert "1) View" in result.output
        assert "Goodbye!" in result.output

    def test_shell_loads_and_saves(self, runner, saved_file):
        """Test the shell loads at start and saves at exit."""
        result = runner.invoke(
            cli, ["--file", saved_file, "shell"], input="3\nMSFT\n5\n290\n0\n"
        )
        assert result.exit_code == 0
        assert "Loaded 2 entries from" in result.output
        assert read_file(saved_file) == "AAPL 10 100.0 120.0\n"

    def test_shell_overflow_warning(self, runner, saved_file):
        """Test loading past capacity warns per skipped entry."""
        result = runner.invoke(cli, ["--file", saved_file, "--capacity", "1"], input="0\n")
        assert "Warning: portfolio full, skipping MSFT" in result.output
        assert "Loaded 1 entries from" in result.output

    def test_shell_skips_undecodable_line(self, runner, temp_portfolio_path):
        """Test a line with invalid bytes is skipped and the rest loads."""
        with open(temp_portfolio_path, "wb") as f:
            f.write(b"AAPL 10 100 120\n\xff 1 1 1\nMSFT 5 300 280\n")

        result = runner.invoke(cli, ["--file", temp_portfolio_path], input="1\n0\n")

        assert result.exit_code == 0
        assert "Loaded 2 entries from" in result.output
        assert "AAPL" in result.output
        assert "MSFT" in result.output
        assert read_file(temp_portfolio_path) == (
            "AAPL 10 100.0 120.0\nMSFT 5 300.0 280.0\n"
        )

    def test_shell_continues_after_read_failure(self, runner, saved_file, monkeypatch):
        """Test the shell reports a read failure and starts empty."""

        def failing_load(self, portfolio):
            raise StorageReadError(f"Failed to read {self.path}: permission denied")

        monkeypatch.setattr(PortfolioFile, "load", failing_load)
        result = runner.invoke(cli, ["--file", saved_file, "shell"], input="1\n0\n")

        assert "permission denied" in result.output
        assert result.exit_code == 0
        assert "Starting with an empty portfolio." in result.output
        assert "Portfolio is empty." in result.output
        assert "Goodbye!" in result.output
