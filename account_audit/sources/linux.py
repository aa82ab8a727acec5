"""
Linux local-account source: /etc/passwd, /etc/shadow and /var/log/lastlog.

File formats
------------
passwd (7 colon-separated fields)::

    name:x:uid:gid:gecos:home:shell

shadow (9 colon-separated fields; day counts are days since 1970-01-01)::

    name:hash:lastchg:min:max:warn:inactive:expire:reserved

lastlog (binary, one fixed-size record per UID at offset ``uid * 292``)::

    uint32 ll_time | char ll_line[32] | char ll_host[256]

Field mapping
-------------
  full_name          ← first GECOS field
  description        ← remaining non-empty GECOS fields, joined with ", "
  enabled            ← False when hash starts with "!" (locked) or the
                       shadow account-expiry day has passed
  password_last_set  ← lastchg (empty or 0 → None)
  password_expires   ← lastchg + max (empty max or max >= 99999 → None);
                       lastchg 0 (change forced at next login) → 1970-01-01,
                       so the account reports as expired, not "Never"
  last_logon         ← lastlog ll_time (0 or missing record → None)

System accounts (UID below ``uid_min``, plus ``nobody``) are skipped unless
``include_system_accounts`` is set.  ``root`` is always kept.
"""

from __future__ import annotations

import logging
import struct
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path
from typing import BinaryIO, Optional

from pydantic import ValidationError

from account_audit.models.account import AccountRecord
from account_audit.sources.base import AccountSource, EnumerationError
from account_audit.utils.time_utils import (
    days_since_epoch_to_datetime,
    ensure_utc,
    epoch_seconds_to_datetime,
    utcnow,
)

logger = logging.getLogger(__name__)

DEFAULT_PASSWD_PATH = "/etc/passwd"
DEFAULT_SHADOW_PATH = "/etc/shadow"
DEFAULT_LASTLOG_PATH = "/var/log/lastlog"

LASTLOG_RECORD = struct.Struct("=I32s256s")
NEVER_EXPIRES_MAX_DAYS = 99999
NOBODY_UID = 65534


# ── Parsed file rows ──────────────────────────────────────────────────────────


@dataclass(frozen=True)
class PasswdEntry:
    """One parsed /etc/passwd line."""

    username: str
    uid:      int
    gecos:    str


@dataclass(frozen=True)
class ShadowEntry:
    """One parsed /etc/shadow line (day counts since the epoch)."""

    username:      str
    password_hash: str
    lastchg:       Optional[int]
    max_days:      Optional[int]
    expire:        Optional[int]


def _parse_optional_int(value: str, field_name: str, path: Path, lineno: int) -> Optional[int]:
    value = value.strip()
    if not value:
        return None
    try:
        return int(value)
    except ValueError:
        raise EnumerationError(
            "linux", f"{path}:{lineno}: invalid {field_name} value '{value}'."
        ) from None


def _read_lines(path: Path) -> list[tuple[int, str]]:
    try:
        text = path.read_text(encoding="utf-8", errors="replace")
    except OSError as exc:
        raise EnumerationError("linux", f"Cannot read {path}: {exc}") from exc
    return [
        (i, line)
        for i, line in enumerate(text.splitlines(), start=1)
        if line.strip() and not line.lstrip().startswith("#")
    ]


def parse_passwd(path: Path) -> list[PasswdEntry]:
    """Parse a passwd file, preserving line order.

    Raises:
        EnumerationError: If the file is unreadable or a line is malformed.
    """
    entries: list[PasswdEntry] = []
    for lineno, line in _read_lines(path):
        fields = line.split(":")
        if len(fields) < 7:
            raise EnumerationError(
                "linux", f"{path}:{lineno}: expected 7 fields, got {len(fields)}."
            )
        uid = _parse_optional_int(fields[2], "uid", path, lineno)
        if uid is None:
            raise EnumerationError("linux", f"{path}:{lineno}: missing uid.")
        entries.append(
            PasswdEntry(username=fields[0], uid=uid, gecos=fields[4])
        )
    return entries


def parse_shadow(path: Path) -> dict[str, ShadowEntry]:
    """Parse a shadow file into a username → entry mapping.

    Raises:
        EnumerationError: If the file is unreadable or a line is malformed.
    """
    entries: dict[str, ShadowEntry] = {}
    for lineno, line in _read_lines(path):
        fields = line.split(":")
        if len(fields) < 8:
            raise EnumerationError(
                "linux", f"{path}:{lineno}: expected 9 fields, got {len(fields)}."
            )
        entries[fields[0]] = ShadowEntry(
            username=fields[0],
            password_hash=fields[1],
            lastchg=_parse_optional_int(fields[2], "lastchg", path, lineno),
            max_days=_parse_optional_int(fields[4], "max", path, lineno),
            expire=_parse_optional_int(fields[7], "expire", path, lineno),
        )
    return entries


def read_lastlog_time(handle: BinaryIO, uid: int) -> Optional[datetime]:
    """Return the last-login time recorded for ``uid``, or None.

    Args:
        handle: lastlog file opened in binary mode.
        uid:    Numeric user id; selects the record offset.
    """
    handle.seek(uid * LASTLOG_RECORD.size)
    chunk = handle.read(LASTLOG_RECORD.size)
    if len(chunk) < LASTLOG_RECORD.size:
        return None
    ll_time, _line, _host = LASTLOG_RECORD.unpack(chunk)
    if ll_time == 0:
        return None
    return epoch_seconds_to_datetime(ll_time)


def _split_gecos(gecos: str) -> tuple[Optional[str], Optional[str]]:
    parts = [p.strip() for p in gecos.split(",")]
    full_name = parts[0] or None
    rest = [p for p in parts[1:] if p]
    return full_name, (", ".join(rest) or None)


# ── Source ────────────────────────────────────────────────────────────────────


class LinuxAccountSource(AccountSource):
    """Enumerate local accounts from the standard Linux account files.

    Args:
        passwd_path:             Path to the passwd file.
        shadow_path:             Path to the shadow file (root-readable).
        lastlog_path:            Path to the binary lastlog file.
        uid_min:                 Lowest UID treated as a regular user.
        include_system_accounts: Keep accounts below ``uid_min`` too.
        now:                     Reference time for the account-expiry check;
                                 pass the run's ``EvaluationContext.now``.
    """

    name = "linux"
    requires_privilege = True

    def __init__(
        self,
        passwd_path: str | Path = DEFAULT_PASSWD_PATH,
        shadow_path: str | Path = DEFAULT_SHADOW_PATH,
        lastlog_path: str | Path = DEFAULT_LASTLOG_PATH,
        uid_min: int = 1000,
        include_system_accounts: bool = False,
        now: Optional[datetime] = None,
    ) -> None:
        self.passwd_path = Path(passwd_path)
        self.shadow_path = Path(shadow_path)
        self.lastlog_path = Path(lastlog_path)
        self.uid_min = uid_min
        self.include_system_accounts = include_system_accounts
        self.now = ensure_utc(now) if now else utcnow()

    def _is_audited(self, entry: PasswdEntry) -> bool:
        if self.include_system_accounts or entry.uid == 0:
            return True
        return entry.uid >= self.uid_min and entry.uid != NOBODY_UID

    def _is_enabled(self, shadow: Optional[ShadowEntry]) -> bool:
        if shadow is None:
            return True
        if shadow.password_hash.startswith("!"):
            return False
        if shadow.expire is not None and days_since_epoch_to_datetime(shadow.expire) <= self.now:
            return False
        return True

    def _build_record(
        self,
        entry: PasswdEntry,
        shadow: Optional[ShadowEntry],
        last_logon: Optional[datetime],
    ) -> AccountRecord:
        full_name, description = _split_gecos(entry.gecos)

        password_last_set: Optional[datetime] = None
        password_expires: Optional[datetime] = None
        if shadow is not None and shadow.lastchg == 0:
            # Change forced at next login: the password is already expired.
            password_expires = days_since_epoch_to_datetime(0)
        elif shadow is not None and shadow.lastchg:
            password_last_set = days_since_epoch_to_datetime(shadow.lastchg)
            if shadow.max_days is not None and shadow.max_days < NEVER_EXPIRES_MAX_DAYS:
                password_expires = days_since_epoch_to_datetime(
                    shadow.lastchg + shadow.max_days
                )

        return AccountRecord(
            username=entry.username,
            full_name=full_name,
            description=description,
            enabled=self._is_enabled(shadow),
            last_logon=last_logon,
            password_last_set=password_last_set,
            password_expires=password_expires,
        )

    def _enumerate(self) -> list[AccountRecord]:
        passwd = [e for e in parse_passwd(self.passwd_path) if self._is_audited(e)]
        shadow = parse_shadow(self.shadow_path)

        lastlog: Optional[BinaryIO] = None
        try:
            lastlog = self.lastlog_path.open("rb")
        except FileNotFoundError:
            logger.warning(
                "lastlog file %s not found; every account will report NeverLoggedOn.",
                self.lastlog_path,
            )
        except OSError as exc:
            raise EnumerationError("linux", f"Cannot read {self.lastlog_path}: {exc}") from exc

        records: list[AccountRecord] = []
        try:
            for entry in passwd:
                last_logon = read_lastlog_time(lastlog, entry.uid) if lastlog else None
                if entry.username not in shadow:
                    logger.debug("No shadow entry for '%s'", entry.username)
                try:
                    records.append(
                        self._build_record(entry, shadow.get(entry.username), last_logon)
                    )
                except ValidationError as exc:
                    raise EnumerationError(
                        "linux", f"Invalid account '{entry.username}': {exc}"
                    ) from exc
        except (OSError, struct.error) as exc:
            raise EnumerationError("linux", f"Cannot read {self.lastlog_path}: {exc}") from exc
        finally:
            if lastlog is not None:
                lastlog.close()

        return records
