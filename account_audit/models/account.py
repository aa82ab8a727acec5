"""
Raw account records as reported by the host.

``AccountRecord`` is the single input shape of the audit core.  It is produced
by an ``AccountSource`` (see ``account_audit.sources``) and never mutated
afterwards.

Absence is explicit: every timestamp is ``Optional[datetime]`` and ``None``
carries meaning.

  last_logon        = None → never signed in, or the host keeps no record
  password_last_set = None → no password has ever been set
  password_expires  = None → password is configured to never expire
"""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, field_validator

from account_audit.utils.time_utils import ensure_utc


class AccountRecord(BaseModel):
    """One local user account and its metadata.

    Attributes:
        username: Login name; non-empty and unique within one enumeration.
        full_name: Display name, if the host records one.
        description: Free-text comment, if any.
        enabled: False when the account is disabled or locked.
        last_logon: Most recent sign-in (UTC), or ``None``.
        password_last_set: When the password was last changed (UTC), or ``None``.
        password_expires: When the password expires (UTC), or ``None``.
    """

    model_config = ConfigDict(frozen=True)

    username: str
    full_name: Optional[str] = None
    description: Optional[str] = None
    enabled: bool = True
    last_logon: Optional[datetime] = None
    password_last_set: Optional[datetime] = None
    password_expires: Optional[datetime] = None

    @field_validator("username")
    @classmethod
    def validate_username(cls, v: str) -> str:
        if not v or not v.strip():
            raise ValueError("username must be a non-empty string.")
        return v

    @field_validator("last_logon", "password_last_set", "password_expires")
    @classmethod
    def normalize_timestamp(cls, v: Optional[datetime]) -> Optional[datetime]:
        if v is None:
            return None
        return ensure_utc(v)
