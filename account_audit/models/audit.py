"""
Audit context, per-account verdicts and run summary.

``EvaluationContext`` is built once per run.  Its ``now`` is read from the
clock exactly once and threaded through every classification, so all verdicts
of one run agree with each other.

``AuditResult`` is the frozen, fixed-shape verdict for one ``AccountRecord``.
Day counts are ``Optional[int]``: ``None`` means the source timestamp was
absent, which is distinct from "0 days".

``AuditSummary`` is the reduction of a result sequence into counts.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, field_validator

from account_audit.taxonomy.status_taxonomy import ActivityStatus, PasswordAgeStatus
from account_audit.utils.time_utils import ensure_utc, utcnow

DEFAULT_INACTIVITY_THRESHOLD_DAYS = 90
DEFAULT_PASSWORD_AGE_THRESHOLD_DAYS = 90


class EvaluationContext(BaseModel):
    """Shared, immutable inputs of one audit run.

    Attributes:
        now: Reference time for every day calculation in the run (UTC).
        inactivity_threshold_days: Days since last logon above which an
            account is ``Inactive``.
        password_age_threshold_days: Password age in days above which a
            password is ``OldPassword``.
    """

    model_config = ConfigDict(frozen=True)

    now: datetime
    inactivity_threshold_days: int = DEFAULT_INACTIVITY_THRESHOLD_DAYS
    password_age_threshold_days: int = DEFAULT_PASSWORD_AGE_THRESHOLD_DAYS

    @field_validator("now")
    @classmethod
    def normalize_now(cls, v: datetime) -> datetime:
        return ensure_utc(v)

    @field_validator("inactivity_threshold_days", "password_age_threshold_days")
    @classmethod
    def positive_threshold(cls, v: int) -> int:
        if v < 1:
            raise ValueError(f"Threshold days must be a positive integer, got {v}.")
        return v

    @classmethod
    def capture(
        cls,
        inactivity_threshold_days: int = DEFAULT_INACTIVITY_THRESHOLD_DAYS,
        password_age_threshold_days: int = DEFAULT_PASSWORD_AGE_THRESHOLD_DAYS,
    ) -> "EvaluationContext":
        """Build a context whose ``now`` is the current UTC time."""
        return cls(
            now=utcnow(),
            inactivity_threshold_days=inactivity_threshold_days,
            password_age_threshold_days=password_age_threshold_days,
        )


class AuditResult(BaseModel):
    """Audit verdict for one account.

    Pass-through fields mirror the source ``AccountRecord``; ``*_display``
    fields hold the fixed-format strings used by the report and the export.
    """

    model_config = ConfigDict(frozen=True)

    username: str
    full_name: Optional[str] = None
    enabled: bool
    description: Optional[str] = None

    last_logon: Optional[datetime] = None
    last_logon_display: str
    days_since_last_logon: Optional[int] = None
    activity_status: ActivityStatus

    password_last_set: Optional[datetime] = None
    password_last_set_display: str
    password_age_days: Optional[int] = None
    password_age_status: PasswordAgeStatus

    password_expires: Optional[datetime] = None
    password_expires_display: str
    password_never_expires: bool

    @property
    def is_flagged(self) -> bool:
        """True if either dimension raised a staleness signal."""
        return (
            self.activity_status != ActivityStatus.ACTIVE
            or self.password_age_status == PasswordAgeStatus.OLD_PASSWORD
        )


@dataclass(frozen=True)
class AuditSummary:
    """Run-level counts over a sequence of ``AuditResult``.

    Attributes:
        total:                 Number of audited accounts.
        enabled_count:         Accounts with ``enabled=True``.
        disabled_count:        ``total - enabled_count``.
        inactive_count:        Accounts with ``ActivityStatus.INACTIVE``.
        old_password_count:    Accounts with ``PasswordAgeStatus.OLD_PASSWORD``.
        never_logged_on_count: Accounts with ``ActivityStatus.NEVER_LOGGED_ON``.
    """

    total:                 int
    enabled_count:         int
    disabled_count:        int
    inactive_count:        int
    old_password_count:    int
    never_logged_on_count: int


@dataclass(frozen=True)
class AuditReport:
    """Everything one audit run produced: context, verdicts and counts."""

    context: EvaluationContext
    results: list[AuditResult]
    summary: AuditSummary
