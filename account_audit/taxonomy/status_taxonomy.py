"""
Status taxonomy for account audit verdicts.

Two orthogonal dimensions describe every audited account:
  - ``ActivityStatus``    — has the account signed in recently?
  - ``PasswordAgeStatus`` — how old is the account's password?

Values are the exact strings written to the CSV export and shown in the
console table, so they are part of the external contract.

Usage example::

    from account_audit.taxonomy.status_taxonomy import ActivityStatus

    status = ActivityStatus.INACTIVE
    assert status == "Inactive"

This module has NO imports from any other ``account_audit`` package.
"""

from enum import StrEnum


class ActivityStatus(StrEnum):
    """Sign-in recency of one account, relative to the inactivity threshold."""

    ACTIVE = "Active"
    """Last sign-in is at most ``inactivity_threshold_days`` whole days ago."""

    INACTIVE = "Inactive"
    """Last sign-in is strictly more than the threshold ago."""

    NEVER_LOGGED_ON = "NeverLoggedOn"
    """No sign-in timestamp recorded on the host."""


class PasswordAgeStatus(StrEnum):
    """Password age of one account, relative to the password-age threshold."""

    OK = "Ok"
    """Password set at most ``password_age_threshold_days`` whole days ago."""

    OLD_PASSWORD = "OldPassword"
    """Password set strictly more than the threshold ago."""

    NEVER_SET = "NeverSet"
    """No password-last-set timestamp recorded (e.g. service-style accounts)."""
