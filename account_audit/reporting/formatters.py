"""
ASCII terminal formatters for the audit report.

All formatters accept audit results / summaries and return plain multi-line
strings suitable for ``typer.echo()``.

No third-party dependencies (no ``rich``, no ``colorama``).

Layout::

  === Local Account Audit ===
    Evaluated at:        2024-01-01 00:00:00 UTC
    Inactivity limit:    90 days
    Password age limit:  90 days

    Username      Enabled  Last Logon           Days  Activity       Pwd Age  Pwd Status   Expires
    ------------------------------------------------------------------------------------------------
    alice             yes  2023-12-20 08:15:00    12  Active              30  Ok           Never
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import Optional

from account_audit.models.audit import AuditResult, AuditSummary, EvaluationContext
from account_audit.utils.time_utils import format_timestamp

_USERNAME_WIDTH = 20


def _fmt_days(days: Optional[int]) -> str:
    return "-" if days is None else str(days)


def _truncate(text: str, width: int) -> str:
    return text if len(text) <= width else text[: width - 1] + "~"


# ── Header ────────────────────────────────────────────────────────────────────


def format_header(ctx: EvaluationContext) -> str:
    """Return the report title block with the run's thresholds."""
    lines = [
        "",
        "=== Local Account Audit ===",
        f"  Evaluated at:        {format_timestamp(ctx.now)} UTC",
        f"  Inactivity limit:    {ctx.inactivity_threshold_days} days",
        f"  Password age limit:  {ctx.password_age_threshold_days} days",
    ]
    return "\n".join(lines)


# ── Account table ─────────────────────────────────────────────────────────────


def format_audit_table(
    results: Sequence[AuditResult],
    flagged_only: bool = False,
) -> str:
    """Format per-account verdicts as an ASCII table.

    Rows appear in enumeration order.  ``-`` marks an absent day count.

    Args:
        results:      Verdicts of one run.
        flagged_only: Show only accounts with a staleness signal.

    Returns:
        Multi-line string.
    """
    rows = [r for r in results if r.is_flagged] if flagged_only else list(results)

    lines: list[str] = [""]
    if not rows:
        if flagged_only and results:
            lines.append("  (no flagged accounts)")
        else:
            lines.append("  (no accounts found)")
        return "\n".join(lines)

    header = (
        f"  {'Username':<{_USERNAME_WIDTH}}  {'Enabled':>7}  {'Last Logon':<19}  "
        f"{'Days':>5}  {'Activity':<13}  {'Pwd Age':>7}  {'Pwd Status':<11}  "
        f"{'Expires':<10}"
    )
    lines.append(header)
    lines.append("  " + "-" * (len(header) - 2))

    for r in rows:
        lines.append(
            f"  {_truncate(r.username, _USERNAME_WIDTH):<{_USERNAME_WIDTH}}  "
            f"{'yes' if r.enabled else 'no':>7}  "
            f"{r.last_logon_display:<19}  "
            f"{_fmt_days(r.days_since_last_logon):>5}  "
            f"{r.activity_status.value:<13}  "
            f"{_fmt_days(r.password_age_days):>7}  "
            f"{r.password_age_status.value:<11}  "
            f"{r.password_expires_display:<10}"
        )

    return "\n".join(lines)


# ── Summary ───────────────────────────────────────────────────────────────────


def format_summary(summary: AuditSummary) -> str:
    """Format run-level counts as a labelled block."""
    lines = [
        "",
        "--- Summary ---",
        f"  Total accounts:      {summary.total}",
        f"  Enabled:             {summary.enabled_count}",
        f"  Disabled:            {summary.disabled_count}",
        f"  Inactive:            {summary.inactive_count}",
        f"  Old passwords:       {summary.old_password_count}",
        f"  Never logged on:     {summary.never_logged_on_count}",
    ]
    return "\n".join(lines)


def format_report(
    ctx: EvaluationContext,
    results: Sequence[AuditResult],
    summary: AuditSummary,
    flagged_only: bool = False,
) -> str:
    """Header, account table and summary as one string."""
    return "\n".join(
        [
            format_header(ctx),
            format_audit_table(results, flagged_only=flagged_only),
            format_summary(summary),
        ]
    )
