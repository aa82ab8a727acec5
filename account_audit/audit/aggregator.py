"""
Run-level aggregation of audit verdicts.

``summarize()`` reduces an ``AuditResult`` sequence to an ``AuditSummary`` in
a single pass.  The counts are order independent and the function is total:
an empty sequence gives all zeros.

Only the categories below are counted.  Accounts whose password was never set
are visible per record but have no summary counter.
"""

from __future__ import annotations

from collections.abc import Iterable

from account_audit.audit.classifier import classify_all
from account_audit.models.account import AccountRecord
from account_audit.models.audit import AuditReport, AuditResult, AuditSummary, EvaluationContext
from account_audit.taxonomy.status_taxonomy import ActivityStatus, PasswordAgeStatus


def summarize(results: Iterable[AuditResult]) -> AuditSummary:
    """Count accounts per audit category.

    Args:
        results: Verdicts of one run.

    Returns:
        ``AuditSummary`` where ``enabled_count + disabled_count == total``.
    """
    total = enabled = inactive = old_password = never_logged_on = 0

    for r in results:
        total += 1
        if r.enabled:
            enabled += 1
        if r.activity_status == ActivityStatus.INACTIVE:
            inactive += 1
        elif r.activity_status == ActivityStatus.NEVER_LOGGED_ON:
            never_logged_on += 1
        if r.password_age_status == PasswordAgeStatus.OLD_PASSWORD:
            old_password += 1

    return AuditSummary(
        total=total,
        enabled_count=enabled,
        disabled_count=total - enabled,
        inactive_count=inactive,
        old_password_count=old_password,
        never_logged_on_count=never_logged_on,
    )


def run_audit(
    records: Iterable[AccountRecord],
    ctx: EvaluationContext,
) -> AuditReport:
    """Classify every record and summarize the verdicts in one call."""
    results = classify_all(records, ctx)
    return AuditReport(context=ctx, results=results, summary=summarize(results))
