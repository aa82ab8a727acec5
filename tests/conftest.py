"""
Shared pytest fixtures for the account auditor test suite.

Provides:
  - ``now``: the fixed reference time used by every audit test
    (2024-01-01T00:00:00Z), so no test depends on the wall clock.
  - ``ctx``: an ``EvaluationContext`` at ``now`` with default thresholds.
  - ``make_record``: factory for ``AccountRecord`` with ages in days.
  - Sample account fixtures for the common verdict shapes.
"""

from __future__ import annotations

from collections.abc import Callable
from datetime import datetime, timedelta, timezone
from typing import Optional

import pytest

from account_audit.models.account import AccountRecord
from account_audit.models.audit import EvaluationContext

NOW = datetime(2024, 1, 1, 0, 0, 0, tzinfo=timezone.utc)


# ── Context fixtures ──────────────────────────────────────────────────────────

@pytest.fixture
def now() -> datetime:
    """Fixed audit reference time."""
    return NOW


@pytest.fixture
def ctx() -> EvaluationContext:
    """Context at ``NOW`` with the default 90/90 thresholds."""
    return EvaluationContext(now=NOW)


# ── Sample domain object factories ────────────────────────────────────────────

@pytest.fixture
def make_record() -> Callable[..., AccountRecord]:
    """Build an ``AccountRecord`` whose timestamps are N days before ``NOW``.

    ``None`` for a ``*_days_ago`` argument leaves that timestamp absent.
    """

    def _make(
        username: str = "alice",
        enabled: bool = True,
        logon_days_ago: Optional[float] = 10,
        password_days_ago: Optional[float] = 30,
        expires_in_days: Optional[float] = None,
        **extra,
    ) -> AccountRecord:
        return AccountRecord(
            username=username,
            enabled=enabled,
            last_logon=None if logon_days_ago is None else NOW - timedelta(days=logon_days_ago),
            password_last_set=(
                None if password_days_ago is None else NOW - timedelta(days=password_days_ago)
            ),
            password_expires=(
                None if expires_in_days is None else NOW + timedelta(days=expires_in_days)
            ),
            **extra,
        )

    return _make


@pytest.fixture
def sample_active_account() -> AccountRecord:
    """Recently used account with a fresh, expiring password."""
    return AccountRecord(
        username="alice",
        full_name="Alice Example",
        description="Engineering",
        enabled=True,
        last_logon=datetime(2023, 12, 20, 8, 15, 0, tzinfo=timezone.utc),
        password_last_set=datetime(2023, 12, 1, 9, 0, 0, tzinfo=timezone.utc),
        password_expires=datetime(2024, 2, 29, 9, 0, 0, tzinfo=timezone.utc),
    )


@pytest.fixture
def sample_stale_account() -> AccountRecord:
    """Disabled account idle for a year with a never-expiring old password."""
    return AccountRecord(
        username="bob",
        full_name="Bob Example",
        enabled=False,
        last_logon=datetime(2023, 1, 1, 0, 0, 0, tzinfo=timezone.utc),
        password_last_set=datetime(2023, 10, 1, 0, 0, 0, tzinfo=timezone.utc),
        password_expires=None,
    )


@pytest.fixture
def sample_service_account() -> AccountRecord:
    """Service-style account that never signed in and has no password."""
    return AccountRecord(username="svc_backup", enabled=False)
