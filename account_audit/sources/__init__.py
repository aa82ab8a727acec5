"""
account_audit.sources — Account enumeration backends.

Modules:
  base      — AccountSource ABC and EnumerationError.
  linux     — /etc/passwd + /etc/shadow + lastlog.
  windows   — PowerShell Get-LocalUser.
  json_file — Offline JSON array of account objects.

Use ``get_account_source()`` to pick a backend from ``AppConfig``.
"""

from __future__ import annotations

import sys
from datetime import datetime
from pathlib import Path
from typing import TYPE_CHECKING, Optional

from account_audit.sources.base import AccountSource, EnumerationError
from account_audit.sources.json_file import JsonFileAccountSource
from account_audit.sources.linux import LinuxAccountSource
from account_audit.sources.windows import WindowsAccountSource

if TYPE_CHECKING:
    from account_audit.config import AppConfig

__all__ = [
    "AccountSource",
    "EnumerationError",
    "JsonFileAccountSource",
    "LinuxAccountSource",
    "WindowsAccountSource",
    "get_account_source",
]


def get_account_source(
    config: "AppConfig",
    source_file: Optional[str | Path] = None,
    now: Optional[datetime] = None,
    include_system_accounts: Optional[bool] = None,
) -> AccountSource:
    """Select the account source for this run.

    Precedence: ``source_file`` argument, then ``config.source.kind``
    (``"auto"`` resolves by ``sys.platform``).

    Args:
        config:                  Loaded application config.
        source_file:             JSON file to read instead of the host.
        now:                     Run reference time (Linux expiry check).
        include_system_accounts: Overrides the config flag when not None.

    Raises:
        ValueError: If ``kind == "json"`` but no JSON path is configured.
    """
    sc = config.source
    if source_file:
        return JsonFileAccountSource(source_file)

    kind = sc.kind
    if kind == "auto":
        kind = "windows" if sys.platform == "win32" else "linux"

    if kind == "json":
        if not sc.json_path:
            raise ValueError("source.kind is 'json' but source.json_path is empty.")
        return JsonFileAccountSource(sc.json_path)
    if kind == "windows":
        return WindowsAccountSource(
            executable=sc.powershell_executable,
            timeout_seconds=sc.powershell_timeout_seconds,
        )
    return LinuxAccountSource(
        passwd_path=sc.passwd_path,
        shadow_path=sc.shadow_path,
        lastlog_path=sc.lastlog_path,
        uid_min=sc.uid_min,
        include_system_accounts=(
            sc.include_system_accounts
            if include_system_accounts is None
            else include_system_accounts
        ),
        now=now,
    )
