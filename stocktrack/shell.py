"""Interactive menu loop.

Reads one line per prompt from an input stream and reports through
click.echo. Errors from an operation are printed and the loop continues;
end of input ends the session.
"""

import logging
from typing import TextIO

import click

from stocktrack import operations
from stocktrack.models.portfolio import Portfolio, PortfolioError
from stocktrack.models.position import Position
from stocktrack.parsing import ValidationError, normalize_symbol, parse_integer, read_line
from stocktrack.storage import PortfolioFile, StorageError

logger = logging.getLogger(__name__)

MENU = (
    "\n1) View  2) Buy  3) Sell  4) Update Prices\n"
    "5) Metrics  6) Save  7) Load  8) Help  0) Exit"
)

HELP_TEXT = """\
1) View           Show holdings with market value and P/L%
2) Buy            Buy shares; repeat buys average the cost
3) Sell           Sell shares; selling everything removes the symbol
4) Update Prices  Set the current price of one symbol, or ALL in turn
                  (leave a price blank to keep it)
5) Metrics        Total cost basis, market value and return
6) Save           Write the portfolio file now
7) Load           Replace holdings with the saved file
0) Exit           Save and quit"""


def report_load(result: dict) -> None:
    if result["status"] == "missing":
        click.echo(f"No saved portfolio found ({result['path']}).")
        return
    for symbol in result["skipped_overflow"]:
        click.echo(f"Warning: portfolio full, skipping {symbol}", err=True)
    click.echo(f"Loaded {result['loaded']} entries from {result['path']}.")


class Shell:
    """Menu-driven session over one portfolio and its file."""

    def __init__(
        self,
        portfolio: Portfolio,
        storage: PortfolioFile,
        stream: TextIO | None = None,
    ):
        self.portfolio = portfolio
        self.storage = storage
        self.stream = stream
        self._actions = {
            1: self.view,
            2: self.buy,
            3: self.sell,
            4: self.update_prices,
            5: self.metrics,
            6: self.save,
            7: self.load,
            8: self.help,
        }

    def ask(self, prompt: str) -> str | None:
        click.echo(prompt, nl=False)
        return read_line(self.stream)

    def run(self) -> bool:
        """Run the menu loop until 0 or end of input, then save once.

        Returns:
            True if the final save succeeded
        """
        while True:
            click.echo(MENU)
            line = self.ask("Choice: ")
            if line is None:
                click.echo()
                break

            try:
                choice = parse_integer(line, "choice")
            except ValidationError:
                choice = -1
            if choice == 0:
                break

            action = self._actions.get(choice)
            if action is None:
                click.echo("Invalid choice.")
                continue

            try:
                action()
            except (ValidationError, PortfolioError, StorageError) as e:
                click.echo(f"✗ {e}", err=True)

        logger.info(f"Session ended with {len(self.portfolio)} positions")
        saved = self.save_quietly()
        click.echo("Goodbye!")
        return saved

    def save_quietly(self) -> bool:
        try:
            self.save()
        except StorageError as e:
            click.echo(f"✗ {e}", err=True)
            return False
        return True

    def view(self) -> None:
        click.echo(operations.render_view(self.portfolio))

    def metrics(self) -> None:
        click.echo(operations.render_metrics(operations.compute_metrics(self.portfolio)))

    def help(self) -> None:
        click.echo(HELP_TEXT)

    def buy(self) -> None:
        symbol = self.ask("Enter stock symbol: ")
        if symbol is None:
            return
        symbol = normalize_symbol(symbol)

        quantity = self.ask("Enter quantity: ")
        if quantity is None:
            return
        operations.check_quantity(quantity)
        price = self.ask("Enter buy price: ")
        if price is None:
            return

        existed = self.portfolio.find(symbol) is not None
        position = operations.buy(self.portfolio, symbol, quantity, price)
        if existed:
            click.echo(
                f"Updated {position.symbol}: qty={position.quantity} "
                f"avg_buy={position.average_buy_price:.2f} "
                f"cur_price={position.current_price:.2f}"
            )
        else:
            click.echo(
                f"Added {position.symbol} to portfolio "
                f"(qty={position.quantity} @ {position.average_buy_price:.2f})"
            )

    def sell(self) -> None:
        symbol = self.ask("Enter stock symbol: ")
        if symbol is None:
            return
        symbol = normalize_symbol(symbol)
        if self.portfolio.find(symbol) is None:
            click.echo("Stock not found!")
            return

        quantity = self.ask("Enter quantity to sell: ")
        if quantity is None:
            return
        operations.check_quantity(quantity)
        price = self.ask("Enter sell price: ")
        if price is None:
            return

        result = operations.sell(self.portfolio, symbol, quantity, price)
        if result["removed"]:
            click.echo("All shares sold. Stock removed.")
        else:
            click.echo(
                f"Sold {result['sold']} shares of {symbol}. "
                f"Remaining qty={result['remaining']}"
            )

    def _price_prompt(self, position: Position) -> str | None:
        return self.ask(
            f"Enter current price for {position.symbol} "
            f"(cur {position.current_price:.2f}): "
        )

    def update_prices(self) -> None:
        line = self.ask("Enter symbol to update (or ALL): ")
        if line is None:
            return
        if line.strip() == "":
            click.echo("No input.")
            return
        symbol = normalize_symbol(line)

        if symbol == operations.BULK_SYMBOL:
            result = operations.update_prices_bulk(self.portfolio, self._price_prompt)
            for error in result["errors"]:
                click.echo(error)
            if result["status"] == "empty":
                click.echo("Portfolio empty.")
            elif result["status"] == "interrupted":
                click.echo("Input ended, remaining prices left unchanged.")
            else:
                click.echo("All updates processed.")
            return

        position = self.portfolio.find(symbol)
        if position is None:
            click.echo(f"Symbol {symbol} not found.")
            return

        price = self._price_prompt(position)
        if price is None:
            return
        position = operations.update_price(self.portfolio, symbol, price)
        click.echo(
            f"Updated {position.symbol} current price to {position.current_price:.2f}"
        )

    def save(self) -> None:
        written = self.storage.save(self.portfolio)
        click.echo(f"Portfolio saved to {self.storage.path} ({written} entries).")

    def load(self) -> None:
        report_load(self.storage.load(self.portfolio))
