"""Transaction register command."""

import click

from journalkit.cli.account_resolution import load_journal_file, resolve_account_or_exit
from journalkit.cli.date_filters import period_options, resolve_cli_date_range
from journalkit.domain import filters
from journalkit.domain.balance import BalanceService
from journalkit.domain.entities import TransactionStatus
from journalkit.utils.amount_parser import format_quantity

STATUS_CHOICES = [status.value.lower() for status in TransactionStatus]


def build_filter(
    start=None,
    end=None,
    status: str | None = None,
    tag: str | None = None,
    search: str | None = None,
    partner: str | None = None,
) -> filters.TransactionFilter:
    """Combine register options into one transaction filter.

    ``tag`` is either a key or ``key=value``. Dates are inclusive.
    """
    combined = filters.match_all()
    if start is not None:
        combined &= filters.on_or_after(start)
    if end is not None:
        combined &= filters.on_or_before(end)
    if status:
        combined &= filters.with_status(TransactionStatus(status.upper()))
    if tag:
        key, sep, value = tag.partition("=")
        combined &= filters.with_tag_value(key, value) if sep else filters.with_tag(key)
    if search:
        combined &= filters.description_contains(search)
    if partner:
        combined &= filters.with_partner(partner)
    return combined


@click.command("register")
@click.argument("journal_file", metavar="FILE", type=click.Path(exists=True, dir_okay=False))
@click.option("--account", help="Account full path or number; adds a running balance")
@click.option("--start-date", help="Start date, inclusive (YYYY-MM-DD or relative like 'last month')")
@click.option("--end-date", help="End date, inclusive (YYYY-MM-DD or relative like 'today')")
@period_options
@click.option("--status", type=click.Choice(STATUS_CHOICES), help="Only transactions with this status")
@click.option("--tag", help="Only transactions with this tag (KEY or KEY=VALUE)")
@click.option("--search", help="Case-insensitive text to find in descriptions")
@click.option("--partner", help="Only transactions with this partner id")
@click.pass_context
def show_register(
    ctx,
    journal_file: str,
    account: str | None,
    start_date: str | None,
    end_date: str | None,
    this_month: bool,
    last_month: bool,
    this_year: bool,
    last_year: bool,
    status: str | None,
    tag: str | None,
    search: str | None,
    partner: str | None,
):
    """List transactions matching filters, newest first.

    With --account, one line per posting to that account is shown together
    with a running balance per commodity.

    Examples:
        journalkit register books.journal --this-month
        journalkit register books.journal --account 10 --status cleared
        journalkit register books.journal --tag project=alpha --search rent
    """
    journal = load_journal_file(ctx, journal_file)
    service = BalanceService(journal)

    start, end = resolve_cli_date_range(
        ctx,
        start_date=start_date,
        end_date=end_date,
        period_flags={
            "this-month": this_month,
            "last-month": last_month,
            "this-year": this_year,
            "last-year": last_year,
        },
    )
    transaction_filter = build_filter(start, end, status, tag, search, partner)

    if account:
        target = resolve_account_or_exit(ctx, journal, account)
        lines = service.account_register(target, transaction_filter)
        if not lines:
            click.echo("No transactions found.")
            return

        click.echo(f"\n{target.full_path}")
        click.echo("-" * 100)
        for line in lines:
            mark = line.status.mark or " "
            click.echo(
                f"{line.date} {mark} {line.description[:50]:50s} "
                f"{line.commodity} {format_quantity(line.quantity):>14s} "
                f"{format_quantity(line.running_balance):>14s}"
            )
        return

    transactions = service.filter_transactions(transaction_filter)
    if not transactions:
        click.echo("No transactions found.")
        return

    click.echo(f"\nFound {len(transactions)} transaction(s):")
    click.echo("-" * 100)
    for txn in transactions:
        mark = txn.status.mark or " "
        ref = f" [{txn.external_id}]" if txn.external_id else ""
        click.echo(f"{txn.date} {mark} {txn.description}{ref}")
        for posting in txn.postings:
            click.echo(
                f"    {posting.account.full_path:60s} "
                f"{posting.amount.commodity} {format_quantity(posting.amount.quantity):>14s}"
            )


def register_commands(cli):
    """Register transaction register command with CLI."""
    cli.add_command(show_register)
