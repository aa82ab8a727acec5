"""
Local Account Auditor — CLI entry point.

All commands follow this pattern:
  1. Load ``AppConfig`` via ``load_config()``.
  2. Configure logging.
  3. Validate inputs.
  4. Execute action (privilege gate, enumeration, audit, export).
  5. Report result to stdout.

Install and run::

    pip install -e .
    account-audit --help
    sudo account-audit audit
    sudo account-audit audit --days-inactive 30 --password-age-days 180
    sudo account-audit audit --export-path reports/accounts.csv
    account-audit audit --source-file accounts.json
    account-audit validate-config

Exit codes:
  0 — report produced (flagged accounts do not change the exit code;
      a failed CSV export is only a warning)
  1 — missing administrative rights, invalid config/thresholds, or
      enumeration failure (no report is printed)
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Optional

import typer

app = typer.Typer(
    name="account-audit",
    help="Audit local OS accounts for inactivity and password age.",
    add_completion=False,
)

logger = logging.getLogger(__name__)


# ── Helpers ───────────────────────────────────────────────────────────────────

def _load_config_or_exit(config_path: Optional[str] = None):
    """Load AppConfig, printing a friendly error and exiting on failure."""
    from pydantic import ValidationError

    from account_audit.config import load_config

    try:
        cfg_path = Path(config_path) if config_path else None
        return load_config(cfg_path)
    except FileNotFoundError as exc:
        typer.echo(f"[ERROR] {exc}", err=True)
        raise typer.Exit(code=1)
    except (ValidationError, ValueError, OSError) as exc:
        typer.echo(f"[ERROR] Config validation failed: {exc}", err=True)
        raise typer.Exit(code=1)


def _configure_logging(config):
    """Set up logging from config; ``debug = true`` forces DEBUG."""
    from account_audit.utils.logging import configure_logging
    configure_logging(config.logging, debug=config.debug)


# ── Commands ──────────────────────────────────────────────────────────────────

@app.command("audit")
def audit(
    days_inactive: Optional[int] = typer.Option(
        None,
        "--days-inactive",
        help="Days since last logon above which an account is Inactive (default 90).",
    ),
    password_age_days: Optional[int] = typer.Option(
        None,
        "--password-age-days",
        help="Password age in days above which it is flagged OldPassword (default 90).",
    ),
    export_path: Optional[str] = typer.Option(
        None,
        "--export-path",
        help="Write the per-account results to this CSV file after the report.",
    ),
    source_file: Optional[str] = typer.Option(
        None,
        "--source-file",
        help="Audit accounts from a JSON file instead of this host (no admin rights needed).",
    ),
    include_system: bool = typer.Option(
        False,
        "--include-system",
        help="Include system accounts (Linux UIDs below source.uid_min).",
    ),
    flagged_only: bool = typer.Option(
        False,
        "--flagged-only",
        help="Show only Inactive / NeverLoggedOn / OldPassword accounts in the table.",
    ),
    config_path: Optional[str] = typer.Option(
        None,
        "--config",
        help="Path to TOML config file.",
    ),
) -> None:
    """Audit local accounts and print a staleness report.

    \b
    Steps:
      1. Privilege gate — host sources need root / Administrator.
      2. Enumerate local accounts (Linux shadow files or Get-LocalUser).
      3. Classify each account against the thresholds.
      4. Print the account table and summary counts.
      5. Optionally export every account to CSV.

    A threshold value equal to the account's age is NOT flagged; only
    strictly older accounts are.
    """
    from pydantic import ValidationError

    from account_audit.audit import run_audit
    from account_audit.models.audit import EvaluationContext
    from account_audit.reporting.export import export_audit_csv
    from account_audit.reporting.formatters import format_report
    from account_audit.security.privilege import PrivilegeError, assert_admin
    from account_audit.sources import EnumerationError, get_account_source

    config = _load_config_or_exit(config_path)
    _configure_logging(config)

    # The clock is read exactly once per run, here.
    try:
        ctx = EvaluationContext.capture(
            inactivity_threshold_days=(
                days_inactive if days_inactive is not None
                else config.audit.inactivity_threshold_days
            ),
            password_age_threshold_days=(
                password_age_days if password_age_days is not None
                else config.audit.password_age_threshold_days
            ),
        )
    except ValidationError as exc:
        typer.echo(f"[ERROR] Invalid threshold: {exc}", err=True)
        raise typer.Exit(code=1)

    try:
        source = get_account_source(
            config,
            source_file=source_file,
            now=ctx.now,
            include_system_accounts=include_system or None,
        )
    except ValueError as exc:
        typer.echo(f"[ERROR] {exc}", err=True)
        raise typer.Exit(code=1)

    if source.requires_privilege:
        try:
            assert_admin()
        except PrivilegeError as exc:
            typer.echo(f"[ERROR] {exc}", err=True)
            raise typer.Exit(code=1)

    try:
        records = source.list_accounts()
    except EnumerationError as exc:
        logger.error("Account enumeration failed: %s", exc)
        typer.echo(f"[ERROR] Account enumeration failed: {exc}", err=True)
        raise typer.Exit(code=1)

    report = run_audit(records, ctx)
    typer.echo(format_report(ctx, report.results, report.summary, flagged_only=flagged_only))

    target = export_path or config.audit.export_path
    if target:
        try:
            out = export_audit_csv(report.results, target)
        except OSError as exc:
            logger.warning("CSV export to %s failed: %s", target, exc)
            typer.echo(f"[WARN] CSV export failed: {exc}", err=True)
        else:
            typer.echo("")
            typer.echo(f"[OK] Exported {len(report.results)} account(s) to {out}")


@app.command("validate-config")
def validate_config(
    config_path: Optional[str] = typer.Option(
        None,
        "--config",
        help="Path to TOML config file (default: config/default.toml).",
    ),
    show_full: bool = typer.Option(
        False,
        "--full",
        help="Print full config including all fields.",
    ),
) -> None:
    """Validate the configuration file and print parsed values.

    Exits with code 1 if the config fails validation.
    """
    config = _load_config_or_exit(config_path)

    typer.echo("Configuration validated successfully.")
    typer.echo("")
    typer.echo(f"  Inactivity threshold:   {config.audit.inactivity_threshold_days} days")
    typer.echo(f"  Password age threshold: {config.audit.password_age_threshold_days} days")
    typer.echo(f"  Export path:            {config.audit.export_path or '(none)'}")
    typer.echo(f"  Account source:         {config.source.kind}")
    typer.echo(f"  Log level:              {config.logging.level}")
    typer.echo(f"  Debug mode:             {config.debug}")

    if show_full:
        typer.echo("")
        typer.echo("Full config (JSON):")
        typer.echo(json.dumps(config.model_dump(), indent=2, default=str))

    typer.echo("")
    typer.echo("[OK] Config valid.")


# ── Entry point ───────────────────────────────────────────────────────────────

if __name__ == "__main__":
    app()
