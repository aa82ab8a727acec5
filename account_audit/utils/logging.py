"""
Root-logger setup for the account auditor.

``configure_logging()`` is called once by the CLI, before a source is
touched.  Library modules only ever do ``logging.getLogger(__name__)``.

Records go to stderr, never stdout, so a redirected report stays clean.
``[logging] log_file`` adds a second, file-backed handler with the same
formatter, and ``json_format = true`` switches both to one JSON object per
line for SIEM ingestion::

    {"ts": "2026-02-24T15:00:00Z", "level": "WARNING", "logger": "...", "msg": "..."}

The top-level ``debug`` flag overrides ``[logging] level`` with DEBUG.
"""

from __future__ import annotations

import json
import logging
import sys
import time
from datetime import datetime, timezone
from pathlib import Path
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from account_audit.config import LoggingConfig

TEXT_FORMAT = "%(asctime)s %(levelname)-7s %(name)s: %(message)s"
TIMESTAMP_FORMAT = "%Y-%m-%dT%H:%M:%SZ"

# Attributes every LogRecord carries; anything else arrived through ``extra=``.
_STANDARD_RECORD_ATTRS = frozenset(vars(logging.makeLogRecord({}))) | {"message", "asctime"}


class _UtcTextFormatter(logging.Formatter):
    converter = time.gmtime


class _JsonLineFormatter(logging.Formatter):
    """One JSON object per record; ``extra=`` fields are lifted to the top level."""

    def format(self, record: logging.LogRecord) -> str:
        created = datetime.fromtimestamp(record.created, tz=timezone.utc)
        entry: dict[str, object] = {
            "ts": created.strftime(TIMESTAMP_FORMAT),
            "level": record.levelname,
            "logger": record.name,
            "msg": record.getMessage(),
        }
        entry.update(
            (key, value)
            for key, value in vars(record).items()
            if key not in _STANDARD_RECORD_ATTRS and not key.startswith("_")
        )
        if record.exc_info:
            entry["exc"] = self.formatException(record.exc_info)
        return json.dumps(entry, default=str)


def _make_formatter(json_format: bool) -> logging.Formatter:
    if json_format:
        return _JsonLineFormatter()
    return _UtcTextFormatter(TEXT_FORMAT, datefmt=TIMESTAMP_FORMAT)


def resolve_level(config: "LoggingConfig", debug: bool = False) -> int:
    """Numeric level for ``config``; ``debug`` wins over the configured name."""
    if debug:
        return logging.DEBUG
    return logging.getLevelName(config.level.upper())


def configure_logging(config: "LoggingConfig", debug: bool = False) -> int:
    """Install stderr (and optional file) handlers on the root logger.

    Any handlers already on the root logger are replaced.

    Args:
        config: ``AppConfig.logging``.
        debug:  ``AppConfig.debug``; forces DEBUG regardless of ``config.level``.

    Returns:
        The numeric level applied.
    """
    level = resolve_level(config, debug)
    formatter = _make_formatter(config.json_format)

    handlers: list[logging.Handler] = [logging.StreamHandler(sys.stderr)]
    if config.log_file:
        log_path = Path(config.log_file)
        log_path.parent.mkdir(parents=True, exist_ok=True)
        handlers.append(logging.FileHandler(log_path, encoding="utf-8"))

    for handler in handlers:
        handler.setLevel(level)
        handler.setFormatter(formatter)

    logging.basicConfig(level=level, handlers=handlers, force=True)
    return level
