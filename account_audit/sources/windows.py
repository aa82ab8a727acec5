"""
Windows local-account source via PowerShell ``Get-LocalUser``.

The cmdlet output is projected to plain strings inside PowerShell (dates as
UTC ``yyyy-MM-ddTHH:mm:ssZ``) and serialized with ``ConvertTo-Json`` so no
PowerShell date encoding leaks into Python.

The console output encoding is forced to UTF-8 inside the script, and stdout
is decoded as UTF-8, so non-ASCII names survive the OEM code page.

``ConvertTo-Json`` emits nothing for an empty pipeline, a bare object for a
single account, and an array otherwise; all three shapes are accepted.
"""

from __future__ import annotations

import json
import logging
import subprocess

from pydantic import ValidationError

from account_audit.models.account import AccountRecord
from account_audit.sources.base import AccountSource, EnumerationError
from account_audit.sources.json_file import account_record_from_dict

logger = logging.getLogger(__name__)

GET_LOCAL_USER_SCRIPT = r"""
$ErrorActionPreference = 'Stop'
[Console]::OutputEncoding = [Text.Encoding]::UTF8
function Format-Utc($d) {
    if ($d) { $d.ToUniversalTime().ToString("yyyy-MM-dd'T'HH:mm:ss'Z'") } else { $null }
}
Get-LocalUser | ForEach-Object {
    [pscustomobject]@{
        Name            = $_.Name
        FullName        = $_.FullName
        Enabled         = [bool]$_.Enabled
        Description     = $_.Description
        LastLogon       = (Format-Utc $_.LastLogon)
        PasswordLastSet = (Format-Utc $_.PasswordLastSet)
        PasswordExpires = (Format-Utc $_.PasswordExpires)
    }
} | ConvertTo-Json -Depth 2
"""


class WindowsAccountSource(AccountSource):
    """Enumerate local accounts with ``Get-LocalUser``.

    Args:
        executable:      PowerShell binary (``powershell`` or ``pwsh``).
        timeout_seconds: Subprocess timeout.
    """

    name = "windows"
    requires_privilege = True

    def __init__(self, executable: str = "powershell", timeout_seconds: float = 60.0) -> None:
        self.executable = executable
        self.timeout_seconds = timeout_seconds

    def _run_powershell(self) -> str:
        cmd = [self.executable, "-NoProfile", "-NonInteractive", "-Command", GET_LOCAL_USER_SCRIPT]
        try:
            result = subprocess.run(
                cmd,
                capture_output=True,
                text=True,
                encoding="utf-8",
                timeout=self.timeout_seconds,
                check=False,
            )
        except FileNotFoundError as exc:
            raise EnumerationError(self.name, f"PowerShell not found: {self.executable}") from exc
        except subprocess.TimeoutExpired as exc:
            raise EnumerationError(
                self.name, f"Get-LocalUser timed out after {self.timeout_seconds}s."
            ) from exc

        if result.returncode != 0:
            raise EnumerationError(
                self.name,
                f"Get-LocalUser failed (exit {result.returncode}): {result.stderr.strip()}",
            )
        return result.stdout

    def _enumerate(self) -> list[AccountRecord]:
        stdout = self._run_powershell().strip()
        if not stdout:
            return []

        try:
            payload = json.loads(stdout)
        except json.JSONDecodeError as exc:
            raise EnumerationError(self.name, f"Unparseable Get-LocalUser output: {exc}") from exc

        if isinstance(payload, dict):
            payload = [payload]
        if not isinstance(payload, list):
            raise EnumerationError(self.name, "Get-LocalUser output is not an object or array.")

        try:
            return [account_record_from_dict(raw) for raw in payload]
        except (ValidationError, AttributeError) as exc:
            raise EnumerationError(self.name, f"Invalid account in Get-LocalUser output: {exc}") from exc
