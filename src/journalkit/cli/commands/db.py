"""Database commands: import, list, export, query and delete stored journals."""

from pathlib import Path

import click

from journalkit.cli.account_resolution import load_journal_file
from journalkit.cli.date_filters import parse_date_option
from journalkit.cli.error_handling import exit_on_domain_error
from journalkit.database.factories import create_sqlite_database
from journalkit.domain.entities import TransactionStatus
from journalkit.domain.persistence import JournalPersistenceService
from journalkit.domain.serializer import serialize_journal
from journalkit.utils.amount_parser import format_quantity

STATUS_CHOICES = [status.value.lower() for status in TransactionStatus]


@click.group()
@click.pass_context
def db_group(ctx):
    """Store journals in the database and query them."""
    # Initialize database connection only when actually running a command
    # (not when showing help)
    if ctx.invoked_subcommand is not None and "db" not in ctx.obj:
        db = create_sqlite_database(database_path=ctx.obj.get("db_path"))
        db.connect()
        db.initialize_schema()
        ctx.obj["db"] = db
        ctx.call_on_close(db.disconnect)


@db_group.command("import")
@click.argument("journal_file", metavar="FILE", type=click.Path(exists=True, dir_okay=False))
@click.pass_context
def import_journal(ctx, journal_file: str):
    """Parse a journal file and store it.

    Examples:
        journalkit db import books.journal
    """
    journal = load_journal_file(ctx, journal_file)
    service = JournalPersistenceService(ctx.obj["db"])

    with exit_on_domain_error(ctx):
        journal_id = service.persist_journal(journal)

    click.echo(
        f"Imported journal '{journal.title or journal_file}' (ID: {journal_id}): "
        f"{len(journal.accounts)} accounts, {len(journal.transactions)} transactions"
    )


@db_group.command("list")
@click.pass_context
def list_journals(ctx):
    """List stored journals."""
    service = JournalPersistenceService(ctx.obj["db"])

    journals = service.list_journals()
    if not journals:
        click.echo("No journals found.")
        return

    click.echo("\nJournals:")
    click.echo("-" * 80)
    for record in journals:
        title = record.title or "(untitled)"
        imported = record.imported_at.strftime("%Y-%m-%d %H:%M")
        click.echo(f"ID: {record.id:3d} | {title:30s} | {record.currency} | Imported: {imported}")


@db_group.command("export")
@click.argument("journal_id", type=int)
@click.option("--output", "-o", type=click.Path(dir_okay=False), help="Write to file instead of stdout")
@click.pass_context
def export_journal(ctx, journal_id: int, output: str | None):
    """Write a stored journal back out as journal text."""
    service = JournalPersistenceService(ctx.obj["db"])

    with exit_on_domain_error(ctx):
        journal = service.load_journal(journal_id)

    text = serialize_journal(journal)
    if output:
        Path(output).write_text(text, encoding="utf-8")
        click.echo(f"Exported journal {journal_id} to {output}")
    else:
        click.echo(text, nl=False)


@db_group.command("entries")
@click.argument("journal_id", type=int)
@click.option("--start-date", help="Start date, inclusive (YYYY-MM-DD or relative)")
@click.option("--end-date", help="End date, exclusive (YYYY-MM-DD or relative)")
@click.option("--partner", help="Only entries with this partner id")
@click.option("--status", type=click.Choice(STATUS_CHOICES), help="Only entries with this status")
@click.option(
    "--account-id",
    "account_ids",
    type=int,
    multiple=True,
    help="Stored account ID to include (repeatable)",
)
@click.pass_context
def list_entries(
    ctx,
    journal_id: int,
    start_date: str | None,
    end_date: str | None,
    partner: str | None,
    status: str | None,
    account_ids: tuple[int, ...],
):
    """Query stored postings of a journal, newest first.

    Examples:
        journalkit db entries 1 --start-date 2024-01-01 --end-date 2025-01-01
        journalkit db entries 1 --partner 1042 --status cleared
    """
    service = JournalPersistenceService(ctx.obj["db"])
    start = parse_date_option(ctx, start_date, "start date")
    end = parse_date_option(ctx, end_date, "end date")

    with exit_on_domain_error(ctx):
        rows = service.query_entries(
            journal_id,
            start_date=start,
            end_date=end,
            partner_id=partner,
            status=TransactionStatus(status.upper()) if status else None,
            account_ids=list(account_ids) or None,
        )

    if not rows:
        click.echo("No entries found.")
        return

    click.echo(f"\nFound {len(rows)} entries:")
    click.echo("-" * 120)
    for row in rows:
        mark = row.status.mark or " "
        click.echo(
            f"{row.date} {mark} {row.description[:40]:40s} "
            f"{row.account_path[:50]:50s} "
            f"{row.commodity} {format_quantity(row.amount):>14s}"
        )


@db_group.command("delete")
@click.argument("journal_id", type=int)
@click.option("--yes", is_flag=True, help="Do not ask for confirmation")
@click.pass_context
def delete_journal(ctx, journal_id: int, yes: bool) -> None:
    """Delete a stored journal with all its accounts and transactions."""
    service = JournalPersistenceService(ctx.obj["db"])

    if not yes:
        click.confirm(f"Delete journal {journal_id}?", abort=True)

    with exit_on_domain_error(ctx):
        service.delete_journal(journal_id)

    click.echo(f"Deleted journal {journal_id}")


def register_commands(cli):
    """Register database commands with CLI."""
    cli.add_command(db_group, name="db")
