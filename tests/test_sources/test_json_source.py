"""Tests for sources/json_file.py — offline account dumps."""

from __future__ import annotations

import json
from datetime import datetime, timezone
from pathlib import Path

import pytest

from account_audit.sources.base import EnumerationError
from account_audit.sources.json_file import JsonFileAccountSource, account_record_from_dict


def _write(tmp_path: Path, payload) -> Path:
    path = tmp_path / "accounts.json"
    path.write_text(json.dumps(payload), encoding="utf-8")
    return path


class TestAccountRecordFromDict:
    def test_snake_case_keys(self):
        rec = account_record_from_dict(
            {"username": "alice", "enabled": False, "last_logon": "2023-12-20T08:15:00Z"}
        )
        assert rec.username == "alice"
        assert rec.enabled is False
        assert rec.last_logon == datetime(2023, 12, 20, 8, 15, tzinfo=timezone.utc)

    def test_pascal_case_keys(self):
        rec = account_record_from_dict(
            {
                "Name": "Administrator",
                "FullName": "",
                "Description": "Built-in account for administering the computer/domain",
                "Enabled": True,
                "PasswordLastSet": "2023-10-01T00:00:00Z",
                "PasswordExpires": None,
            }
        )
        assert rec.username == "Administrator"
        assert rec.description.startswith("Built-in")
        assert rec.password_last_set == datetime(2023, 10, 1, tzinfo=timezone.utc)
        assert rec.password_expires is None

    def test_never_and_empty_strings_are_absent(self):
        rec = account_record_from_dict(
            {"Username": "bob", "LastLogon": "Never", "PasswordExpires": ""}
        )
        assert rec.last_logon is None
        assert rec.password_expires is None

    def test_unknown_keys_ignored(self):
        rec = account_record_from_dict({"username": "c", "ActivityStatus": "Active", "SID": "S-1-5"})
        assert rec.username == "c"


class TestJsonFileAccountSource:
    def test_loads_in_file_order(self, tmp_path):
        path = _write(tmp_path, [{"username": "b"}, {"username": "a"}, {"username": "c"}])
        names = [r.username for r in JsonFileAccountSource(path).list_accounts()]
        assert names == ["b", "a", "c"]

    def test_utf8_bom_dump_loads(self, tmp_path):
        # Windows PowerShell 5.1 `Set-Content -Encoding UTF8` prefixes a BOM.
        path = tmp_path / "dump.json"
        path.write_bytes(b"\xef\xbb\xbf" + json.dumps([{"Name": "alice", "Enabled": True}]).encode("utf-8"))
        records = JsonFileAccountSource(path).list_accounts()
        assert [r.username for r in records] == ["alice"]
        assert records[0].enabled is True

    def test_does_not_require_privilege(self, tmp_path):
        assert JsonFileAccountSource(tmp_path / "x.json").requires_privilege is False

    def test_missing_file_raises(self, tmp_path):
        with pytest.raises(EnumerationError, match="Cannot load"):
            JsonFileAccountSource(tmp_path / "missing.json").list_accounts()

    def test_invalid_json_raises(self, tmp_path):
        path = tmp_path / "bad.json"
        path.write_text("{not json", encoding="utf-8")
        with pytest.raises(EnumerationError, match="Cannot load"):
            JsonFileAccountSource(path).list_accounts()

    def test_non_array_raises(self, tmp_path):
        path = _write(tmp_path, {"username": "a"})
        with pytest.raises(EnumerationError, match="JSON array"):
            JsonFileAccountSource(path).list_accounts()

    def test_validation_errors_collected(self, tmp_path):
        path = _write(tmp_path, [{"username": "ok"}, {"username": ""}, "nope", {"enabled": True}])
        with pytest.raises(EnumerationError) as exc_info:
            JsonFileAccountSource(path).list_accounts()
        msg = str(exc_info.value)
        assert "3 account(s)" in msg
        assert "Account #1" in msg
        assert "Account #2" in msg
        assert "Account #3" in msg

    def test_duplicate_usernames_rejected(self, tmp_path):
        path = _write(tmp_path, [{"username": "a"}, {"username": "a"}])
        with pytest.raises(EnumerationError, match="Duplicate"):
            JsonFileAccountSource(path).list_accounts()

    def test_empty_array(self, tmp_path):
        assert JsonFileAccountSource(_write(tmp_path, [])).list_accounts() == []
