"""
Offline account source: a JSON file holding an array of account objects.

Useful for auditing an account dump taken on another machine, and for
fixture-mode runs that need no administrative rights.

Accepted keys per object (either spelling)::

    username          | Username            (required)
    full_name         | FullName
    description       | Description
    enabled           | Enabled             (default true)
    last_logon        | LastLogon           ISO 8601; null/absent → None
    password_last_set | PasswordLastSet     ISO 8601; null/absent → None
    password_expires  | PasswordExpires     ISO 8601; null/absent → None

The string ``"Never"`` is accepted as an absent timestamp, so a CSV export
converted back to JSON can be re-audited.

All objects are validated before any are returned.  If any object fails,
a single ``EnumerationError`` lists the first 5 failures.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any

from pydantic import ValidationError

from account_audit.models.account import AccountRecord
from account_audit.sources.base import AccountSource, EnumerationError
from account_audit.utils.time_utils import NEVER

logger = logging.getLogger(__name__)

PASCAL_CASE_FIELDS: dict[str, str] = {
    "Username":        "username",
    "Name":            "username",
    "FullName":        "full_name",
    "Description":     "description",
    "Enabled":         "enabled",
    "LastLogon":       "last_logon",
    "PasswordLastSet": "password_last_set",
    "PasswordExpires": "password_expires",
}

_TIMESTAMP_FIELDS = ("last_logon", "password_last_set", "password_expires")
_MAX_REPORTED_ERRORS = 5


def account_record_from_dict(raw: dict[str, Any]) -> AccountRecord:
    """Build an ``AccountRecord`` from a snake_case or PascalCase mapping.

    Raises:
        pydantic.ValidationError: If the mapped values fail validation.
    """
    fields: dict[str, Any] = {}
    for key, val in raw.items():
        name = PASCAL_CASE_FIELDS.get(key, key)
        if name in AccountRecord.model_fields:
            fields[name] = val

    for name in _TIMESTAMP_FIELDS:
        val = fields.get(name)
        if val == "" or val == NEVER:
            fields[name] = None

    return AccountRecord(**fields)


class JsonFileAccountSource(AccountSource):
    """Read account records from a JSON array on disk.

    Args:
        path: JSON file to load.
    """

    name = "json"
    requires_privilege = False

    def __init__(self, path: str | Path) -> None:
        self.path = Path(path)

    def _enumerate(self) -> list[AccountRecord]:
        try:
            with open(self.path, encoding="utf-8-sig") as f:
                raw_accounts = json.load(f)
        except (json.JSONDecodeError, OSError) as exc:
            raise EnumerationError(self.name, f"Cannot load {self.path}: {exc}") from exc

        if not isinstance(raw_accounts, list):
            raise EnumerationError(
                self.name, f"{self.path} must contain a JSON array of account objects."
            )

        records: list[AccountRecord] = []
        errors: list[tuple[int, str]] = []
        for i, raw in enumerate(raw_accounts):
            if not isinstance(raw, dict):
                errors.append((i, f"expected an object, got {type(raw).__name__}"))
                continue
            try:
                records.append(account_record_from_dict(raw))
            except ValidationError as exc:
                errors.append((i, str(exc)))

        if errors:
            lines = [f"{len(errors)} account(s) in {self.path} failed validation:"]
            lines.extend(f"  Account #{idx}: {msg}" for idx, msg in errors[:_MAX_REPORTED_ERRORS])
            if len(errors) > _MAX_REPORTED_ERRORS:
                lines.append(f"  ... and {len(errors) - _MAX_REPORTED_ERRORS} more.")
            raise EnumerationError(self.name, "\n".join(lines))

        logger.debug("Loaded %d account(s) from %s", len(records), self.path)
        return records
