"""CLI helpers for loading journal files and resolving accounts."""

from pathlib import Path

import click

from journalkit.cli.error_handling import exit_on_domain_error
from journalkit.domain.entities import Account, Journal
from journalkit.domain.errors import AccountNotFoundError, account_not_found
from journalkit.domain.parser import JournalParser


def load_journal_file(ctx: click.Context, path: str) -> Journal:
    """Read and parse a journal file, or exit with a CLI error."""
    try:
        text = Path(path).read_text(encoding="utf-8")
    except UnicodeDecodeError as exc:
        click.echo(f"Error: Cannot read {path}: not valid UTF-8 (byte {exc.start})", err=True)
        ctx.exit(1)

    parser = JournalParser(default_currency=ctx.obj["default_currency"])
    with exit_on_domain_error(ctx):
        return parser.parse(text)


def resolve_account(journal: Journal, account: str) -> Account:
    """Resolve a full account path or an account number to an account.

    Args:
        journal: Journal to search
        account: Full path (e.g. "1 Assets:10 Cash") or account number (e.g. "10")

    Returns:
        The matching account

    Raises:
        AccountNotFoundError: If nothing matches or the number is ambiguous
    """
    found = journal.find_account(account.strip())
    if found is not None:
        return found

    candidates = journal.find_accounts_by_id(account.strip())
    if len(candidates) == 1:
        return candidates[0]
    if len(candidates) > 1:
        paths = ", ".join(a.full_path for a in candidates)
        raise AccountNotFoundError(f"Account number '{account}' is ambiguous: {paths}")
    raise AccountNotFoundError(account_not_found(account))


def resolve_account_or_exit(ctx: click.Context, journal: Journal, account: str) -> Account:
    """Resolve an account, or exit with a CLI error.

    This keeps error messaging and exit behavior consistent across commands.
    """
    with exit_on_domain_error(ctx):
        return resolve_account(journal, account)
