"""Local account staleness auditor: inactivity and password-age reporting."""

__version__ = "0.1.0"
