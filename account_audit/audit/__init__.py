"""
account_audit.audit — The classification and aggregation core.

Pure functions only: no I/O, no clock reads.  The clock is read once when
the ``EvaluationContext`` is built and passed in from outside.

Modules:
  classifier — classify(), classify_all(): one verdict per account.
  aggregator — summarize(), run_audit(): counts over a run.
"""

from account_audit.audit.aggregator import run_audit, summarize
from account_audit.audit.classifier import classify, classify_all

__all__ = ["classify", "classify_all", "run_audit", "summarize"]
