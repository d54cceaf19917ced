"""Turn domain errors into CLI messages and exit codes."""

import logging
from contextlib import contextmanager

import click

from journalkit.domain.errors import DomainError, EmptyInputError, MalformedAmountError

logger = logging.getLogger(__name__)

PARSE_ERRORS = (EmptyInputError, MalformedAmountError)


def describe_error(error: DomainError) -> str:
    """Return the user-facing text for a domain error."""
    if isinstance(error, PARSE_ERRORS):
        return f"Cannot parse journal: {error}"
    return str(error)


def handle_domain_error(ctx: click.Context, error: DomainError) -> None:
    """Render a domain error and exit with failure."""
    logger.debug("Command failed", exc_info=error)
    click.echo(f"Error: {describe_error(error)}", err=True)
    ctx.exit(1)


@contextmanager
def exit_on_domain_error(ctx: click.Context):
    """Run a block, converting any DomainError into a CLI error exit."""
    try:
        yield
    except DomainError as exc:
        handle_domain_error(ctx, exc)
