"""Balance commands."""

from datetime import date
from decimal import Decimal

import click

from journalkit.cli.account_resolution import load_journal_file, resolve_account_or_exit
from journalkit.cli.date_filters import parse_date_option
from journalkit.domain.balance import BalanceService
from journalkit.utils.amount_parser import format_quantity


def _format_balance(balance: dict[str, Decimal]) -> str:
    if not balance:
        return "0"
    return ", ".join(f"{commodity} {format_quantity(total)}" for commodity, total in balance.items())


@click.command("balance")
@click.argument("journal_file", metavar="FILE", type=click.Path(exists=True, dir_okay=False))
@click.argument("account", metavar="ACCOUNT", required=False)
@click.option("--as-of", help="Last date to include (default: today)")
@click.pass_context
def show_balance(ctx, journal_file: str, account: str | None, as_of: str | None):
    """Show account balances as of a date.

    ACCOUNT can be a full account path or an account number. Without it,
    every account with postings up to the date is listed.

    Examples:
        journalkit balance books.journal
        journalkit balance books.journal "1 Assets:10 Cash" --as-of 2024-12-31
        journalkit balance books.journal 10 --as-of "last month"
    """
    journal = load_journal_file(ctx, journal_file)
    service = BalanceService(journal)
    as_of_date = parse_date_option(ctx, as_of, "as-of date") or date.today()

    if account:
        target = resolve_account_or_exit(ctx, journal, account)
        balance = service.account_balance(target, as_of_date)
        click.echo(f"{target.full_path}: {_format_balance(balance)}")
        return

    balances = service.all_account_balances(as_of_date)
    if not balances:
        click.echo(f"No postings on or before {as_of_date}.")
        return

    click.echo(f"\nBalances as of {as_of_date}:")
    click.echo("-" * 80)
    width = max(len(path) for path in balances)
    for path, balance in balances.items():
        click.echo(f"{path:<{width}}  {_format_balance(balance)}")


def register_commands(cli):
    """Register balance commands with CLI."""
    cli.add_command(show_balance)
