"""Journal file commands: check, format and accounts."""

from pathlib import Path

import click

from journalkit.cli.account_resolution import load_journal_file
from journalkit.domain.balance import BalanceService
from journalkit.domain.entities import Account
from journalkit.domain.serializer import serialize_journal
from journalkit.utils.amount_parser import format_quantity


@click.command("check")
@click.argument("journal_file", metavar="FILE", type=click.Path(exists=True, dir_okay=False))
@click.pass_context
def check_journal(ctx, journal_file: str):
    """Parse a journal and report unbalanced transactions.

    Exits with status 1 if any transaction does not sum to zero.

    Examples:
        journalkit check books.journal
    """
    journal = load_journal_file(ctx, journal_file)
    service = BalanceService(journal)

    click.echo(
        f"{len(journal.commodities)} commodities, "
        f"{len(journal.accounts)} accounts, "
        f"{len(journal.transactions)} transactions"
    )

    unbalanced = service.unbalanced_transactions()
    if not unbalanced:
        click.echo("All transactions balance.")
        return

    click.echo(f"\nFound {len(unbalanced)} unbalanced transaction(s):")
    click.echo("-" * 80)
    for txn in unbalanced:
        totals = ", ".join(
            f"{commodity} {format_quantity(total)}"
            for commodity, total in txn.commodity_totals().items()
            if total != 0
        )
        ref = f" [{txn.external_id}]" if txn.external_id else ""
        click.echo(f"{txn.date} {txn.description}{ref}: {totals}")
    ctx.exit(1)


@click.command("format")
@click.argument("journal_file", metavar="FILE", type=click.Path(exists=True, dir_okay=False))
@click.option("--output", "-o", type=click.Path(dir_okay=False), help="Write to file instead of stdout")
@click.pass_context
def format_journal(ctx, journal_file: str, output: str | None):
    """Parse a journal and write it back in canonical layout.

    Examples:
        journalkit format books.journal
        journalkit format books.journal -o clean.journal
    """
    journal = load_journal_file(ctx, journal_file)
    text = serialize_journal(journal)

    if output:
        Path(output).write_text(text, encoding="utf-8")
        click.echo(f"Wrote {len(journal.transactions)} transactions to {output}")
    else:
        click.echo(text, nl=False)


def print_account_tree(accounts: list[Account], children: dict[str, list[Account]], indent: int = 0) -> None:
    """Recursively print account tree."""
    for account in accounts:
        prefix = "  " * indent
        note = f"  ({account.note})" if account.note else ""
        click.echo(f"{prefix}{account.segment} [{account.type.label}]{note}")
        print_account_tree(children.get(account.full_path, []), children, indent + 1)


@click.command("accounts")
@click.argument("journal_file", metavar="FILE", type=click.Path(exists=True, dir_okay=False))
@click.pass_context
def list_accounts(ctx, journal_file: str):
    """Show the chart of accounts as a tree."""
    journal = load_journal_file(ctx, journal_file)

    if not journal.accounts:
        click.echo("No accounts found.")
        return

    roots = []
    children: dict[str, list[Account]] = {}
    for account in journal.accounts:
        if account.is_root:
            roots.append(account)
        else:
            children.setdefault(account.parent.full_path, []).append(account)

    print_account_tree(roots, children)


def register_commands(cli):
    """Register journal file commands with CLI."""
    cli.add_command(check_journal)
    cli.add_command(format_journal)
    cli.add_command(list_accounts)
