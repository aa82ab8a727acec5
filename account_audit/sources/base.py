"""
Abstract base for account-enumeration sources.

A source is a black box that returns every local account as an
``AccountRecord``, in a stable order.  Sources are failable: any I/O,
parse or subprocess failure is raised as ``EnumerationError`` so the run
aborts without a partial report.

Concrete sources
----------------
  LinuxAccountSource    — /etc/passwd + /etc/shadow + /var/log/lastlog
  WindowsAccountSource  — PowerShell ``Get-LocalUser``
  JsonFileAccountSource — offline JSON array of account objects
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from typing import ClassVar

from account_audit.models.account import AccountRecord

logger = logging.getLogger(__name__)


class EnumerationError(RuntimeError):
    """Raised when a source cannot produce the full account list.

    Attributes:
        source: Name of the failing source.
    """

    def __init__(self, source: str, message: str) -> None:
        self.source = source
        super().__init__(f"[{source}] {message}")


class AccountSource(ABC):
    """Abstract base for all account sources.

    Subclasses implement ``_enumerate()``.  The public ``list_accounts()``
    wraps it with the shared duplicate-username check and logging.

    Class attributes:
        name:               Short identifier used in logs and errors.
        requires_privilege: Whether the privilege gate must pass first.
    """

    name: ClassVar[str] = "base"
    requires_privilege: ClassVar[bool] = True

    @abstractmethod
    def _enumerate(self) -> list[AccountRecord]:
        """Return every account.  Raise ``EnumerationError`` on failure."""

    def list_accounts(self) -> list[AccountRecord]:
        """Enumerate accounts, rejecting duplicate usernames.

        Returns:
            Records in source order.

        Raises:
            EnumerationError: If enumeration fails or a username repeats.
        """
        logger.info("Enumerating accounts from source '%s'", self.name)
        records = self._enumerate()

        seen: set[str] = set()
        for rec in records:
            if rec.username in seen:
                raise EnumerationError(
                    self.name, f"Duplicate username '{rec.username}' in enumeration."
                )
            seen.add(rec.username)

        logger.info("Source '%s' returned %d account(s)", self.name, len(records))
        return records
