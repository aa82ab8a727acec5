"""
CSV export of audit results.

``export_to_csv()`` is the generic writer: it accepts flat ``list[dict]`` rows
and returns the written ``Path``.  ``audit_results_to_rows()`` adapts
``AuditResult`` objects to the fixed export schema.

CSV schema (column order is part of the contract)::

    Username, FullName, Enabled, LastLogon, DaysSinceLastLogon,
    ActivityStatus, PasswordLastSet, PasswordAgeDays, PasswordAgeStatus,
    PasswordExpires, PasswordNeverExpires, Description

Absent timestamps are written as ``Never``; absent day counts and absent
optional strings as empty cells.
"""

from __future__ import annotations

import csv
import logging
from collections.abc import Iterable
from pathlib import Path

from account_audit.models.audit import AuditResult

logger = logging.getLogger(__name__)

AUDIT_CSV_COLUMNS: list[str] = [
    "Username",
    "FullName",
    "Enabled",
    "LastLogon",
    "DaysSinceLastLogon",
    "ActivityStatus",
    "PasswordLastSet",
    "PasswordAgeDays",
    "PasswordAgeStatus",
    "PasswordExpires",
    "PasswordNeverExpires",
    "Description",
]


def export_to_csv(
    records: list[dict],
    path: Path,
    fieldnames: list[str] | None = None,
) -> Path:
    """Write ``records`` to a UTF-8 CSV file.

    Args:
        records:    List of row dicts.
        path:       Destination file path (parent dirs created if missing).
        fieldnames: Column order.  If None, uses the keys of the first record.

    Returns:
        ``path`` as written.  With no records and no ``fieldnames`` the file
        is empty; with ``fieldnames`` the header row is always written.
    """
    path.parent.mkdir(parents=True, exist_ok=True)
    if not records and not fieldnames:
        path.write_text("", encoding="utf-8")
        return path
    cols = fieldnames or list(records[0].keys())
    with path.open("w", newline="", encoding="utf-8") as f:
        writer = csv.DictWriter(f, fieldnames=cols, extrasaction="ignore")
        writer.writeheader()
        writer.writerows(records)
    return path


def audit_results_to_rows(results: Iterable[AuditResult]) -> list[dict]:
    """Flatten audit results into export rows keyed by ``AUDIT_CSV_COLUMNS``."""
    rows: list[dict] = []
    for r in results:
        rows.append(
            {
                "Username":             r.username,
                "FullName":             r.full_name or "",
                "Enabled":              r.enabled,
                "LastLogon":            r.last_logon_display,
                "DaysSinceLastLogon":   "" if r.days_since_last_logon is None else r.days_since_last_logon,
                "ActivityStatus":       r.activity_status.value,
                "PasswordLastSet":      r.password_last_set_display,
                "PasswordAgeDays":      "" if r.password_age_days is None else r.password_age_days,
                "PasswordAgeStatus":    r.password_age_status.value,
                "PasswordExpires":      r.password_expires_display,
                "PasswordNeverExpires": r.password_never_expires,
                "Description":          r.description or "",
            }
        )
    return rows


def export_audit_csv(results: Iterable[AuditResult], path: str | Path) -> Path:
    """Write audit results to ``path`` using the fixed audit CSV schema.

    Raises:
        OSError: If the file cannot be written (caller decides severity).
    """
    out = export_to_csv(audit_results_to_rows(results), Path(path), fieldnames=AUDIT_CSV_COLUMNS)
    logger.info("Exported audit results to %s", out)
    return out
