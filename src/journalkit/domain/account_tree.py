"""Hierarchical account paths and the path-indexed account table.

A path such as ``1 Assets:10 Cash:100 Bank`` names an account by its
ancestors' segments followed by its own. Each segment is ``"<id> <name>"``
where the id is a leading number such as ``10`` or ``2210.001``.
"""

import logging
import re
from typing import Iterable, Optional

from journalkit.domain.entities import Account, AccountType

logger = logging.getLogger(__name__)

PATH_SEPARATOR = ":"
DEFAULT_ACCOUNT_ID = "0"
_ACCOUNT_NUMBER = re.compile(r"^\d+(\.\d+)?$")


def split_path(path: str) -> list[str]:
    """Split a path into trimmed segments."""
    return [segment.strip() for segment in path.split(PATH_SEPARATOR)]


def is_valid_path(path: str) -> bool:
    """True when every segment of the path is non-empty."""
    return all(split_path(path))


def _own_segment(path: str) -> str:
    return split_path(path)[-1]


def account_id_from_path(path: str) -> str:
    """Return the leading number of the last segment, or "0" if there is none.

    >>> account_id_from_path("2 Liabilities:220 Other:2210.001 Person")
    '2210.001'
    """
    parts = _own_segment(path).split(None, 1)
    if parts and _ACCOUNT_NUMBER.match(parts[0]):
        return parts[0]
    return DEFAULT_ACCOUNT_ID


def account_name_from_path(path: str) -> str:
    """Return the last segment without its leading number."""
    segment = _own_segment(path)
    parts = segment.split(None, 1)
    if len(parts) > 1 and _ACCOUNT_NUMBER.match(parts[0]):
        return parts[1]
    return segment


def parent_path(path: str) -> Optional[str]:
    """Return the path with its last segment removed, or None for a root path."""
    index = path.rfind(PATH_SEPARATOR)
    if index <= 0:
        return None
    return path[:index].strip()


def order_by_depth(accounts: Iterable[Account]) -> list[Account]:
    """Sort accounts by non-decreasing depth, keeping the given order within a depth.

    Persisting in this order guarantees a parent is stored before its children.
    """
    return sorted(accounts, key=lambda account: account.depth)


class AccountTree:
    """Ordered set of accounts indexed by the path they were referenced with."""

    def __init__(self):
        self._accounts: list[Account] = []
        self._by_path: dict[str, Account] = {}

    @property
    def accounts(self) -> list[Account]:
        return list(self._accounts)

    def get(self, path: str) -> Optional[Account]:
        return self._by_path.get(path.strip())

    def __contains__(self, path: str) -> bool:
        return path.strip() in self._by_path

    def __len__(self) -> int:
        return len(self._accounts)

    def declare(
        self,
        path: str,
        account_type: AccountType = AccountType.ASSET,
        note: Optional[str] = None,
    ) -> Account:
        """Register an explicitly declared account.

        The parent is looked up by prefix but never created here: a child
        declared before its parent is stored as a root. A path that is already
        known keeps its first account.

        Args:
            path: Full account path as written in the declaration
            account_type: Declared type
            note: Optional declared note

        Returns:
            The registered (or previously known) account
        """
        path = path.strip()
        existing = self._by_path.get(path)
        if existing is not None:
            logger.debug("Ignoring duplicate declaration of account '%s'", path)
            return existing

        parent = None
        prefix = parent_path(path)
        if prefix is not None:
            parent = self._by_path.get(prefix)
            if parent is None:
                logger.debug("Parent '%s' of '%s' not declared yet", prefix, path)

        return self._add(path, Account(
            id=account_id_from_path(path),
            name=account_name_from_path(path),
            type=account_type,
            note=note,
            parent=parent,
        ))

    def resolve(self, path: str) -> Account:
        """Find an account by path, creating it and any missing ancestors.

        Accounts created here are ASSET-typed with no note.
        """
        path = path.strip()
        account = self._by_path.get(path)
        if account is not None:
            return account

        # Walk up to the nearest known prefix, then create downwards
        missing = []
        prefix: Optional[str] = path
        while prefix is not None and prefix not in self._by_path:
            missing.append(prefix)
            prefix = parent_path(prefix)
        parent = self._by_path[prefix] if prefix is not None else None

        for missing_path in reversed(missing):
            logger.debug("Auto-creating account '%s'", missing_path)
            parent = self._add(missing_path, Account(
                id=account_id_from_path(missing_path),
                name=account_name_from_path(missing_path),
                type=AccountType.ASSET,
                parent=parent,
            ))
        return parent

    def _add(self, path: str, account: Account) -> Account:
        self._by_path[path] = account
        self._accounts.append(account)
        return account
