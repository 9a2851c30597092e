"""CLI interface for the portfolio tracker.

Commands:
    shell                       Interactive menu (default with no command)
    view                        Show holdings
    metrics                     Show cost basis, market value and return
    buy SYMBOL QTY PRICE        Buy shares and save
    sell SYMBOL QTY PRICE       Sell shares and save
    price SYMBOL PRICE          Set the current price of a symbol and save
"""

import logging

import click

from stocktrack import operations
from stocktrack.config import load_settings
from stocktrack.models.portfolio import Portfolio, PortfolioError
from stocktrack.parsing import ValidationError
from stocktrack.shell import Shell, report_load
from stocktrack.storage import PortfolioFile, StorageError

logger = logging.getLogger(__name__)


def open_portfolio(
    ctx: click.Context, exit_on_error: bool = True
) -> tuple[Portfolio, PortfolioFile, dict | None]:
    """Create the portfolio and load it from the configured file.

    Args:
        ctx: Click context holding the settings
        exit_on_error: Exit with status 1 if the file cannot be read;
            otherwise report it and continue with an empty portfolio

    Returns:
        Portfolio, its storage, and the load result (None if reading failed)
    """
    portfolio = Portfolio(capacity=ctx.obj["capacity"])
    storage = PortfolioFile(ctx.obj["portfolio_file"])
    logger.info(f"Using portfolio file {storage.path} (capacity {portfolio.capacity})")
    try:
        result = storage.load(portfolio)
    except StorageError as e:
        click.echo(f"✗ Error: {str(e)}", err=True)
        if exit_on_error:
            ctx.exit(1)
        click.echo("Starting with an empty portfolio.", err=True)
        result = None
    return portfolio, storage, result


def save_or_exit(ctx: click.Context, portfolio: Portfolio, storage: PortfolioFile):
    try:
        storage.save(portfolio)
    except StorageError as e:
        click.echo(f"✗ Error: {str(e)}", err=True)
        ctx.exit(1)


@click.group(invoke_without_command=True)
@click.option(
    "--file",
    "portfolio_file",
    help="Portfolio file. If not provided, uses STOCKTRACK_FILE from .env "
    "or portfolio.txt",
)
@click.option(
    "--capacity",
    type=click.IntRange(min=1),
    help="Maximum number of positions. "
    "If not provided, uses STOCKTRACK_CAPACITY from .env or 100",
)
@click.pass_context
def cli(ctx, portfolio_file: str | None, capacity: int | None):
    """stocktrack - track a small stock portfolio in a text file."""
    try:
        settings = load_settings()
    except ValueError as e:
        raise click.UsageError(str(e)) from e

    logging.basicConfig(
        level=settings.log_level,
        format="%(asctime)s [%(levelname)s] %(message)s",
        datefmt="%H:%M:%S",
    )

    ctx.ensure_object(dict)
    ctx.obj["portfolio_file"] = portfolio_file or settings.portfolio_file
    ctx.obj["capacity"] = capacity or settings.capacity

    if ctx.invoked_subcommand is None:
        ctx.invoke(shell)


@cli.command()
@click.pass_context
def shell(ctx):
    """Run the interactive menu. Saves on exit."""
    portfolio, storage, result = open_portfolio(ctx, exit_on_error=False)
    if result is not None:
        report_load(result)

    session = Shell(portfolio, storage, click.get_text_stream("stdin"))
    if not session.run():
        ctx.exit(1)


@cli.command()
@click.pass_context
def view(ctx):
    """Show current holdings."""
    portfolio, _, _ = open_portfolio(ctx)
    click.echo(operations.render_view(portfolio))


@cli.command()
@click.pass_context
def metrics(ctx):
    """Show total cost basis, market value and unrealized P/L."""
    portfolio, _, _ = open_portfolio(ctx)
    click.echo(operations.render_metrics(operations.compute_metrics(portfolio)))


@cli.command()
@click.argument("symbol")
@click.argument("quantity")
@click.argument("price")
@click.pass_context
def buy(ctx, symbol: str, quantity: str, price: str):
    """Buy QUANTITY shares of SYMBOL at PRICE."""
    portfolio, storage, _ = open_portfolio(ctx)
    try:
        position = operations.buy(portfolio, symbol, quantity, price)
    except (ValidationError, PortfolioError) as e:
        click.echo(f"✗ Error: {str(e)}", err=True)
        ctx.exit(1)

    save_or_exit(ctx, portfolio, storage)
    click.echo(
        f"✓ {position.symbol}: qty={position.quantity} "
        f"avg_buy={position.average_buy_price:.2f} "
        f"cur_price={position.current_price:.2f}"
    )


@cli.command()
@click.argument("symbol")
@click.argument("quantity")
@click.argument("price")
@click.pass_context
def sell(ctx, symbol: str, quantity: str, price: str):
    """Sell QUANTITY shares of SYMBOL at PRICE."""
    portfolio, storage, _ = open_portfolio(ctx)
    try:
        result = operations.sell(portfolio, symbol, quantity, price)
    except (ValidationError, PortfolioError) as e:
        click.echo(f"✗ Error: {str(e)}", err=True)
        ctx.exit(1)

    save_or_exit(ctx, portfolio, storage)
    if result["removed"]:
        click.echo(f"✓ Sold all shares of {result['symbol']}, position removed")
    else:
        click.echo(
            f"✓ Sold {result['sold']} shares of {result['symbol']}, "
            f"remaining qty={result['remaining']}"
        )


@cli.command()
@click.argument("symbol")
@click.argument("new_price", metavar="PRICE")
@click.pass_context
def price(ctx, symbol: str, new_price: str):
    """Set the current price of SYMBOL."""
    portfolio, storage, _ = open_portfolio(ctx)
    try:
        position = operations.update_price(portfolio, symbol, new_price)
    except (ValidationError, PortfolioError) as e:
        click.echo(f"✗ Error: {str(e)}", err=True)
        ctx.exit(1)

    save_or_exit(ctx, portfolio, storage)
    click.echo(
        f"✓ Updated {position.symbol} current price to {position.current_price:.2f}"
    )


def main():
    cli(obj={})


if __name__ == "__main__":
    main()
