"""
Administrative-privilege gate for host enumeration.

Reading ``/etc/shadow`` on Linux, or password metadata through
``Get-LocalUser`` on Windows, needs administrative rights.  The gate runs
*before* any enumeration so an unprivileged run fails fast instead of
producing a report built from partial data.

Raising vs returning
--------------------
``is_admin()`` returns a bool so callers can decide what to do.

``assert_admin()`` raises ``PrivilegeError``.  The CLI catches it, prints an
error and exits with code 1.
"""

from __future__ import annotations

import logging
import os
import sys

logger = logging.getLogger(__name__)


class PrivilegeError(PermissionError):
    """Raised when the current process lacks administrative rights."""

    def __init__(self, message: str | None = None) -> None:
        super().__init__(
            message
            or "Administrative privileges are required to audit local accounts. "
            "Re-run as root (sudo) or from an elevated Administrator shell."
        )


def _is_windows_admin() -> bool:
    import ctypes

    try:
        return bool(ctypes.windll.shell32.IsUserAnAdmin())
    except (AttributeError, OSError) as exc:
        logger.warning("Could not determine Windows admin status: %s", exc)
        return False


def is_admin() -> bool:
    """Return True if the process runs with administrative rights.

    POSIX: effective UID is 0.  Windows: ``IsUserAnAdmin()``.
    """
    if sys.platform == "win32":
        return _is_windows_admin()
    return os.geteuid() == 0


def assert_admin() -> None:
    """Raise ``PrivilegeError`` unless the process is privileged."""
    if not is_admin():
        raise PrivilegeError()
    logger.debug("Privilege check passed.")
