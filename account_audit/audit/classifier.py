"""
Per-account classification.

``classify()`` maps one ``AccountRecord`` plus the run's ``EvaluationContext``
to one ``AuditResult``.  It is a pure function: no I/O, no clock reads, no
shared state, so the same inputs always give the same verdict.

Status classification
---------------------
  Activity (``days = whole days since last_logon``)
    "NeverLoggedOn" — last_logon is None
    "Inactive"      — days > inactivity_threshold_days
    "Active"        — otherwise (including days == threshold)

  Password age (``days = whole days since password_last_set``)
    "NeverSet"      — password_last_set is None
    "OldPassword"   — days > password_age_threshold_days
    "Ok"            — otherwise (including days == threshold)

Timestamps in the future produce negative day counts and are classified as
"Active" / "Ok".  They are a data-quality signal, not an error.
"""

from __future__ import annotations

from collections.abc import Iterable
from datetime import datetime
from typing import Optional

from account_audit.models.account import AccountRecord
from account_audit.models.audit import AuditResult, EvaluationContext
from account_audit.taxonomy.status_taxonomy import ActivityStatus, PasswordAgeStatus
from account_audit.utils.time_utils import format_date, format_timestamp, whole_days_between


# ── Helpers ───────────────────────────────────────────────────────────────────


def _days_since(now: datetime, then: Optional[datetime]) -> Optional[int]:
    if then is None:
        return None
    return whole_days_between(now, then)


def _classify_activity(
    days_since_last_logon: Optional[int],
    threshold_days: int,
) -> ActivityStatus:
    if days_since_last_logon is None:
        return ActivityStatus.NEVER_LOGGED_ON
    if days_since_last_logon > threshold_days:
        return ActivityStatus.INACTIVE
    return ActivityStatus.ACTIVE


def _classify_password_age(
    password_age_days: Optional[int],
    threshold_days: int,
) -> PasswordAgeStatus:
    if password_age_days is None:
        return PasswordAgeStatus.NEVER_SET
    if password_age_days > threshold_days:
        return PasswordAgeStatus.OLD_PASSWORD
    return PasswordAgeStatus.OK


# ── Public API ────────────────────────────────────────────────────────────────


def classify(record: AccountRecord, ctx: EvaluationContext) -> AuditResult:
    """Classify one account against the run's thresholds.

    Args:
        record: Raw account record from an ``AccountSource``.
        ctx:    Shared evaluation context of the run.

    Returns:
        Frozen ``AuditResult`` with both statuses and all display fields.
    """
    days_since_last_logon = _days_since(ctx.now, record.last_logon)
    password_age_days = _days_since(ctx.now, record.password_last_set)

    return AuditResult(
        username=record.username,
        full_name=record.full_name,
        enabled=record.enabled,
        description=record.description,
        last_logon=record.last_logon,
        last_logon_display=format_timestamp(record.last_logon),
        days_since_last_logon=days_since_last_logon,
        activity_status=_classify_activity(
            days_since_last_logon, ctx.inactivity_threshold_days
        ),
        password_last_set=record.password_last_set,
        password_last_set_display=format_timestamp(record.password_last_set),
        password_age_days=password_age_days,
        password_age_status=_classify_password_age(
            password_age_days, ctx.password_age_threshold_days
        ),
        password_expires=record.password_expires,
        password_expires_display=format_date(record.password_expires),
        password_never_expires=record.password_expires is None,
    )


def classify_all(
    records: Iterable[AccountRecord],
    ctx: EvaluationContext,
) -> list[AuditResult]:
    """Classify every record, preserving input order and length."""
    return [classify(record, ctx) for record in records]
