"""
account_audit.models — Pydantic models for account records and audit verdicts.

Modules:
  account — AccountRecord: raw account as reported by a source.
  audit   — EvaluationContext, AuditResult, AuditSummary, AuditReport.
"""
