"""Tests for CLI account resolution and error rendering."""

import click
import pytest

from journalkit.cli.account_resolution import resolve_account, resolve_account_or_exit
from journalkit.cli.error_handling import describe_error, exit_on_domain_error
from journalkit.domain.errors import AccountNotFoundError, EmptyInputError, NotFoundError
from journalkit.domain.parser import parse_journal


def _ctx() -> click.Context:
    return click.Context(click.Command("test"))


@pytest.fixture
def twin_journal():
    """Journal where account number 10 appears under two parents."""
    return parse_journal(
        "; Currency: CHF\n"
        "2025-01-01 * Twins\n"
        "    1 Assets:10 Cash    CHF 1\n"
        "    2 Liabilities:10 Loans    CHF -1\n"
    )


def test_resolve_by_full_path(sample_journal):
    account = resolve_account(sample_journal, " 1 Assets:10 Cash ")
    assert account.full_path == "1 Assets:10 Cash"


def test_resolve_by_number(sample_journal):
    assert resolve_account(sample_journal, "2210.001").name == "Person"


def test_resolve_ambiguous_number(twin_journal):
    with pytest.raises(AccountNotFoundError, match="ambiguous"):
        resolve_account(twin_journal, "10")


def test_resolve_missing(sample_journal):
    with pytest.raises(AccountNotFoundError):
        resolve_account(sample_journal, "999")


def test_resolve_or_exit(sample_journal, capsys):
    with pytest.raises(click.exceptions.Exit) as excinfo:
        resolve_account_or_exit(_ctx(), sample_journal, "999")

    assert excinfo.value.exit_code == 1
    assert "Error: Account '999' not found" in capsys.readouterr().err


def test_describe_parse_error():
    assert describe_error(EmptyInputError("nothing")) == "Cannot parse journal: nothing"
    assert describe_error(NotFoundError("gone")) == "gone"


def test_exit_on_domain_error_passes_other_errors():
    with pytest.raises(KeyError):
        with exit_on_domain_error(_ctx()):
            raise KeyError("x")
