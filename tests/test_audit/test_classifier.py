"""
Tests for audit/classifier.py — classify(), classify_all().

Covers:
  - Activity classification: Active / Inactive / NeverLoggedOn
  - Password age classification: Ok / OldPassword / NeverSet
  - Strict ">" boundary at the threshold, and whole-day truncation
  - Expiry display vs password_never_expires agreement
  - Pass-through fields, display formats, determinism, order preservation
"""

from __future__ import annotations

from datetime import datetime, timedelta, timezone

import pytest

from account_audit.audit.classifier import classify, classify_all
from account_audit.models.account import AccountRecord
from account_audit.models.audit import EvaluationContext
from account_audit.taxonomy.status_taxonomy import ActivityStatus, PasswordAgeStatus


# ── Activity ──────────────────────────────────────────────────────────────────


class TestActivityStatus:
    def test_recent_logon_is_active(self, ctx, make_record):
        result = classify(make_record(logon_days_ago=10), ctx)
        assert result.days_since_last_logon == 10
        assert result.activity_status == ActivityStatus.ACTIVE

    def test_logon_exactly_at_threshold_is_active(self, ctx, make_record):
        result = classify(make_record(logon_days_ago=90), ctx)
        assert result.days_since_last_logon == 90
        assert result.activity_status == ActivityStatus.ACTIVE

    def test_logon_one_day_past_threshold_is_inactive(self, ctx, make_record):
        result = classify(make_record(logon_days_ago=91), ctx)
        assert result.days_since_last_logon == 91
        assert result.activity_status == ActivityStatus.INACTIVE

    def test_partial_day_is_truncated_not_rounded(self, ctx, make_record):
        """90 days and 23 hours counts as 90 days, so it stays Active."""
        result = classify(make_record(logon_days_ago=90 + 23 / 24), ctx)
        assert result.days_since_last_logon == 90
        assert result.activity_status == ActivityStatus.ACTIVE

    def test_missing_logon_is_never_logged_on(self, ctx, make_record):
        result = classify(make_record(logon_days_ago=None), ctx)
        assert result.days_since_last_logon is None
        assert result.activity_status == ActivityStatus.NEVER_LOGGED_ON
        assert result.last_logon_display == "Never"

    def test_missing_logon_ignores_other_fields(self, ctx, make_record):
        """Absence wins regardless of enabled state or password age."""
        result = classify(
            make_record(logon_days_ago=None, enabled=False, password_days_ago=500), ctx
        )
        assert result.activity_status == ActivityStatus.NEVER_LOGGED_ON
        assert result.days_since_last_logon is None

    def test_custom_threshold(self, now, make_record):
        ctx = EvaluationContext(now=now, inactivity_threshold_days=30)
        assert classify(make_record(logon_days_ago=30), ctx).activity_status == ActivityStatus.ACTIVE
        assert classify(make_record(logon_days_ago=31), ctx).activity_status == ActivityStatus.INACTIVE

    def test_future_logon_gives_negative_days(self, ctx, make_record):
        """Clock skew is reported as a negative count, not an error."""
        result = classify(make_record(logon_days_ago=-1.2), ctx)
        assert result.days_since_last_logon == -1
        assert result.activity_status == ActivityStatus.ACTIVE


# ── Password age ──────────────────────────────────────────────────────────────


class TestPasswordAgeStatus:
    def test_fresh_password_is_ok(self, ctx, make_record):
        result = classify(make_record(password_days_ago=30), ctx)
        assert result.password_age_days == 30
        assert result.password_age_status == PasswordAgeStatus.OK

    def test_password_exactly_at_threshold_is_ok(self, ctx, make_record):
        result = classify(make_record(password_days_ago=90), ctx)
        assert result.password_age_days == 90
        assert result.password_age_status == PasswordAgeStatus.OK

    def test_password_one_day_past_threshold_is_old(self, ctx, make_record):
        result = classify(make_record(password_days_ago=91), ctx)
        assert result.password_age_days == 91
        assert result.password_age_status == PasswordAgeStatus.OLD_PASSWORD

    def test_missing_password_is_never_set(self, ctx, make_record):
        result = classify(make_record(password_days_ago=None), ctx)
        assert result.password_age_days is None
        assert result.password_age_status == PasswordAgeStatus.NEVER_SET
        assert result.password_last_set_display == "Never"

    def test_calendar_scenario_92_days(self, ctx):
        """2023-10-01 → 2024-01-01 is 92 days, past the 90-day threshold."""
        rec = AccountRecord(
            username="carol",
            password_last_set=datetime(2023, 10, 1, tzinfo=timezone.utc),
        )
        result = classify(rec, ctx)
        assert result.password_age_days == 92
        assert result.password_age_status == PasswordAgeStatus.OLD_PASSWORD

    def test_custom_threshold(self, now, make_record):
        ctx = EvaluationContext(now=now, password_age_threshold_days=180)
        result = classify(make_record(password_days_ago=120), ctx)
        assert result.password_age_status == PasswordAgeStatus.OK


# ── Expiry ────────────────────────────────────────────────────────────────────


class TestPasswordExpiry:
    def test_no_expiry_displays_never(self, ctx, make_record):
        result = classify(make_record(expires_in_days=None), ctx)
        assert result.password_expires_display == "Never"
        assert result.password_never_expires is True

    def test_expiry_displays_date_only(self, ctx, sample_active_account):
        result = classify(sample_active_account, ctx)
        assert result.password_expires_display == "2024-02-29"
        assert result.password_never_expires is False

    @pytest.mark.parametrize("expires_in_days", [None, -10, 0, 45])
    def test_display_and_flag_agree(self, ctx, make_record, expires_in_days):
        result = classify(make_record(expires_in_days=expires_in_days), ctx)
        assert result.password_never_expires == (result.password_expires_display == "Never")


# ── Pass-through and display fields ───────────────────────────────────────────


class TestPassThrough:
    def test_identity_fields_copied(self, ctx, sample_active_account):
        result = classify(sample_active_account, ctx)
        assert result.username == "alice"
        assert result.full_name == "Alice Example"
        assert result.description == "Engineering"
        assert result.enabled is True
        assert result.last_logon == sample_active_account.last_logon
        assert result.password_last_set == sample_active_account.password_last_set
        assert result.password_expires == sample_active_account.password_expires

    def test_timestamp_display_format(self, ctx, sample_active_account):
        result = classify(sample_active_account, ctx)
        assert result.last_logon_display == "2023-12-20 08:15:00"
        assert result.password_last_set_display == "2023-12-01 09:00:00"

    def test_disabled_stale_account(self, ctx, sample_stale_account):
        result = classify(sample_stale_account, ctx)
        assert result.enabled is False
        assert result.days_since_last_logon == 365
        assert result.activity_status == ActivityStatus.INACTIVE
        assert result.password_age_status == PasswordAgeStatus.OLD_PASSWORD
        assert result.is_flagged

    def test_service_account_never_anything(self, ctx, sample_service_account):
        result = classify(sample_service_account, ctx)
        assert result.activity_status == ActivityStatus.NEVER_LOGGED_ON
        assert result.password_age_status == PasswordAgeStatus.NEVER_SET
        assert result.password_never_expires is True

    def test_active_account_not_flagged(self, ctx, sample_active_account):
        assert not classify(sample_active_account, ctx).is_flagged


# ── Purity and ordering ───────────────────────────────────────────────────────


class TestDeterminism:
    def test_same_inputs_same_result(self, ctx, sample_stale_account):
        assert classify(sample_stale_account, ctx) == classify(sample_stale_account, ctx)

    def test_naive_now_treated_as_utc(self, make_record):
        naive = EvaluationContext(now=datetime(2024, 1, 1))
        aware = EvaluationContext(now=datetime(2024, 1, 1, tzinfo=timezone.utc))
        rec = make_record(logon_days_ago=91)
        assert classify(rec, naive) == classify(rec, aware)

    def test_non_utc_offsets_compare_correctly(self, ctx):
        """A logon at 01:00+02:00 on Jan 1 is 23:00Z on Dec 31, i.e. 0 whole days ago."""
        rec = AccountRecord(
            username="dave",
            last_logon=datetime(2024, 1, 1, 1, 0, tzinfo=timezone(timedelta(hours=2))),
        )
        result = classify(rec, ctx)
        assert result.days_since_last_logon == 0
        assert result.last_logon_display == "2023-12-31 23:00:00"

    def test_classify_all_preserves_order_and_length(self, ctx, make_record):
        records = [make_record(username=f"user{i}", logon_days_ago=i * 50) for i in range(5)]
        results = classify_all(records, ctx)
        assert [r.username for r in results] == [f"user{i}" for i in range(5)]
        assert len(results) == len(records)

    def test_classify_all_empty(self, ctx):
        assert classify_all([], ctx) == []

    def test_every_result_has_exactly_one_status_per_dimension(self, ctx, make_record):
        records = [
            make_record(username="a", logon_days_ago=None, password_days_ago=None),
            make_record(username="b", logon_days_ago=5, password_days_ago=200),
            make_record(username="c", logon_days_ago=300, password_days_ago=1),
        ]
        for result in classify_all(records, ctx):
            assert result.activity_status in set(ActivityStatus)
            assert result.password_age_status in set(PasswordAgeStatus)
