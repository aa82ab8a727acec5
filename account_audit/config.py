"""
Application configuration management.

Load order (each layer overrides the previous):
  1. ``config/default.toml``      — committed static defaults (optional;
                                    built-in model defaults apply if absent)
  2. ``config/local.toml``        — optional local overrides (gitignored)
  3. ``.env``                     — local env overrides (gitignored)
  4. Environment variables        — ``ACCOUNT_AUDIT_*`` prefix
  5. CLI flags                    — applied by ``cli.py`` on top of the result

Entry point: ``load_config(config_path=None) -> AppConfig``

The CLI and every source receive an ``AppConfig`` instance — never raw dicts
or individual env var lookups scattered through the codebase.
"""

from __future__ import annotations

import os
import tomllib
from pathlib import Path
from typing import Any, Optional

from dotenv import load_dotenv
from pydantic import BaseModel, ConfigDict, field_validator

from account_audit.models.audit import (
    DEFAULT_INACTIVITY_THRESHOLD_DAYS,
    DEFAULT_PASSWORD_AGE_THRESHOLD_DAYS,
)

VALID_SOURCE_KINDS = frozenset({"auto", "linux", "windows", "json"})

# ── Sub-config models ─────────────────────────────────────────────────────────


class AuditConfig(BaseModel):
    """Thresholds and export settings for an audit run."""

    model_config = ConfigDict(frozen=True)

    inactivity_threshold_days: int = DEFAULT_INACTIVITY_THRESHOLD_DAYS
    password_age_threshold_days: int = DEFAULT_PASSWORD_AGE_THRESHOLD_DAYS
    export_path: str = ""

    @field_validator("inactivity_threshold_days", "password_age_threshold_days")
    @classmethod
    def validate_threshold(cls, v: int) -> int:
        if v < 1:
            raise ValueError(f"Threshold days must be >= 1, got {v}.")
        return v


class SourceConfig(BaseModel):
    """Account enumeration backend settings."""

    model_config = ConfigDict(frozen=True)

    kind: str = "auto"
    json_path: str = ""
    passwd_path: str = "/etc/passwd"
    shadow_path: str = "/etc/shadow"
    lastlog_path: str = "/var/log/lastlog"
    uid_min: int = 1000
    include_system_accounts: bool = False
    powershell_executable: str = "powershell"
    powershell_timeout_seconds: float = 60.0

    @field_validator("kind")
    @classmethod
    def validate_kind(cls, v: str) -> str:
        v = v.lower()
        if v not in VALID_SOURCE_KINDS:
            raise ValueError(
                f"source.kind must be one of {sorted(VALID_SOURCE_KINDS)}, got '{v}'."
            )
        return v

    @field_validator("uid_min")
    @classmethod
    def validate_uid_min(cls, v: int) -> int:
        if v < 0:
            raise ValueError(f"uid_min must be >= 0, got {v}.")
        return v

    @field_validator("powershell_timeout_seconds")
    @classmethod
    def validate_timeout(cls, v: float) -> float:
        if v <= 0.0:
            raise ValueError(f"powershell_timeout_seconds must be > 0, got {v}.")
        return v


class LoggingConfig(BaseModel):
    """Logging output settings."""

    model_config = ConfigDict(frozen=True)

    level: str = "WARNING"
    log_file: str = ""
    json_format: bool = False

    @field_validator("level")
    @classmethod
    def validate_level(cls, v: str) -> str:
        valid = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        if v.upper() not in valid:
            raise ValueError(f"Log level must be one of {sorted(valid)}, got '{v}'.")
        return v.upper()


class AppConfig(BaseModel):
    """Complete application configuration — the single source of truth.

    Constructed by ``load_config()`` which merges TOML + .env + env vars.
    """

    model_config = ConfigDict(frozen=True)

    audit: AuditConfig = AuditConfig()
    source: SourceConfig = SourceConfig()
    logging: LoggingConfig = LoggingConfig()
    debug: bool = False


# ── Loader ────────────────────────────────────────────────────────────────────

_PROJECT_ROOT = Path(__file__).parent.parent


def _find_project_root() -> Path:
    """Walk up from this file to find the project root (contains pyproject.toml)."""
    candidate = Path(__file__).parent
    for _ in range(5):
        if (candidate / "pyproject.toml").exists():
            return candidate
        candidate = candidate.parent
    return _PROJECT_ROOT


def load_config(config_path: Optional[Path] = None) -> AppConfig:
    """Load and merge application configuration.

    Args:
        config_path: Explicit path to a TOML config file. Defaults to
            ``<project_root>/config/default.toml`` when that file exists.

    Returns:
        Fully validated ``AppConfig`` instance.

    Raises:
        FileNotFoundError: If the specified ``config_path`` does not exist.
        pydantic.ValidationError: If merged config values fail validation.
    """
    root = _find_project_root()

    # 1. Load .env file (silently skip if missing)
    load_dotenv(dotenv_path=root / ".env", override=False)

    # 2. Load TOML config
    raw: dict[str, Any] = {}
    if config_path is not None:
        config_path = Path(config_path)
        if not config_path.exists():
            raise FileNotFoundError(f"Config file not found: {config_path}")
    else:
        default_path = root / "config" / "default.toml"
        config_path = default_path if default_path.exists() else None

    if config_path is not None:
        with open(config_path, "rb") as f:
            raw = tomllib.load(f)

        # Also merge local.toml if present (gitignored local overrides)
        local_config_path = config_path.parent / "local.toml"
        if local_config_path.exists():
            with open(local_config_path, "rb") as f:
                local_raw: dict[str, Any] = tomllib.load(f)
            raw = _deep_merge(raw, local_raw)

    # 3. Apply ACCOUNT_AUDIT_* environment variable overrides
    raw = _apply_env_overrides(raw)

    # 4. Build and validate AppConfig
    return _build_app_config(raw)


def _deep_merge(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    """Recursively merge ``override`` into ``base``."""
    result = dict(base)
    for key, val in override.items():
        if key in result and isinstance(result[key], dict) and isinstance(val, dict):
            result[key] = _deep_merge(result[key], val)
        else:
            result[key] = val
    return result


def _apply_env_overrides(raw: dict[str, Any]) -> dict[str, Any]:
    """Apply ACCOUNT_AUDIT_* env vars to the raw config dict.

    Supported overrides:
      ACCOUNT_AUDIT_DAYS_INACTIVE      → raw["audit"]["inactivity_threshold_days"]
      ACCOUNT_AUDIT_PASSWORD_AGE_DAYS  → raw["audit"]["password_age_threshold_days"]
      ACCOUNT_AUDIT_EXPORT_PATH        → raw["audit"]["export_path"]
      ACCOUNT_AUDIT_SOURCE             → raw["source"]["kind"]
      ACCOUNT_AUDIT_LOG_LEVEL          → raw["logging"]["level"]
      ACCOUNT_AUDIT_DEBUG              → raw["debug"]
    """
    if days := os.environ.get("ACCOUNT_AUDIT_DAYS_INACTIVE"):
        raw.setdefault("audit", {})["inactivity_threshold_days"] = days

    if pwd_days := os.environ.get("ACCOUNT_AUDIT_PASSWORD_AGE_DAYS"):
        raw.setdefault("audit", {})["password_age_threshold_days"] = pwd_days

    if export_path := os.environ.get("ACCOUNT_AUDIT_EXPORT_PATH"):
        raw.setdefault("audit", {})["export_path"] = export_path

    if source_kind := os.environ.get("ACCOUNT_AUDIT_SOURCE"):
        raw.setdefault("source", {})["kind"] = source_kind

    if log_level := os.environ.get("ACCOUNT_AUDIT_LOG_LEVEL"):
        raw.setdefault("logging", {})["level"] = log_level

    if debug := os.environ.get("ACCOUNT_AUDIT_DEBUG"):
        raw["debug"] = debug.lower() in ("1", "true", "yes")

    return raw


def _build_app_config(raw: dict[str, Any]) -> AppConfig:
    """Map raw TOML dict to ``AppConfig`` model structure."""
    return AppConfig(
        audit=AuditConfig(**raw.get("audit", {})),
        source=SourceConfig(**raw.get("source", {})),
        logging=LoggingConfig(**raw.get("logging", {})),
        debug=raw.get("debug", False),
    )
