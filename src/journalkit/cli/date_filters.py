"""CLI helpers for date option resolution."""

from datetime import date

import click

from journalkit.utils.date_parser import get_date_range, parse_date


def parse_date_option(ctx, value: str | None, label: str) -> date | None:
    """Parse a single date option, or exit with a CLI error."""
    if not value:
        return None
    try:
        return parse_date(value)
    except ValueError as e:
        click.echo(f"Error: Invalid {label}: {e}", err=True)
        ctx.exit(1)


def resolve_cli_date_range(
    ctx,
    *,
    start_date: str | None,
    end_date: str | None,
    period_flags: dict[str, bool],
) -> tuple[date | None, date | None]:
    """Resolve CLI date range from period flags or explicit dates."""
    selected = [period for period, is_set in period_flags.items() if is_set]

    if len(selected) > 1:
        click.echo("Error: Only one period option can be specified at a time.", err=True)
        ctx.exit(1)

    if selected and (start_date or end_date):
        click.echo(
            "Error: Period options cannot be combined with --start-date or --end-date.",
            err=True,
        )
        ctx.exit(1)

    if selected:
        return get_date_range(selected[0])

    return (
        parse_date_option(ctx, start_date, "start date"),
        parse_date_option(ctx, end_date, "end date"),
    )


def period_options(command):
    """Attach --this-month/--last-month/--this-year/--last-year flags to a command."""
    for period in ("last-year", "this-year", "last-month", "this-month"):
        command = click.option(
            f"--{period}",
            period.replace("-", "_"),
            is_flag=True,
            help=f"Limit to {period.replace('-', ' ')}",
        )(command)
    return command
