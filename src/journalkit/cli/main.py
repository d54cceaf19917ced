"""Main CLI entry point."""

import logging

import click

from journalkit.domain.entities import DEFAULT_CURRENCY

# Import and register all commands at module level
from journalkit.cli.commands import (
    journal,
    balance,
    register,
    db,
)

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def _log_level(verbose: int) -> int:
    if verbose >= 2:
        return logging.DEBUG
    if verbose == 1:
        return logging.INFO
    return logging.WARNING


@click.group()
@click.option(
    "--db-path",
    type=click.Path(),
    help="Path to database file (overrides JOURNALKIT_DB_PATH environment variable)",
    envvar="JOURNALKIT_DB_PATH",
)
@click.option(
    "--default-currency",
    default=DEFAULT_CURRENCY,
    show_default=True,
    help="Currency used when a journal declares none",
    envvar="JOURNALKIT_DEFAULT_CURRENCY",
)
@click.option("--verbose", "-v", count=True, help="Increase log output (-v info, -vv debug)")
@click.pass_context
def cli(ctx, db_path: str | None, default_currency: str, verbose: int):
    """Journalkit - Plain-text double-entry journal tool.

    Parse, check, format and query plain-text accounting journals, and
    store them in a local database for querying.
    """
    logging.basicConfig(level=_log_level(verbose), format=LOG_FORMAT)

    ctx.ensure_object(dict)
    ctx.obj["db_path"] = db_path
    ctx.obj["default_currency"] = default_currency


# Register all commands
journal.register_commands(cli)
balance.register_commands(cli)
register.register_commands(cli)
db.register_commands(cli)


def main():
    """Main entry point for CLI."""
    cli()


if __name__ == "__main__":
    main()
