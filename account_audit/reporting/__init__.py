"""
account_audit.reporting — Console formatting and CSV export of audit results.

It does NOT produce new verdicts — everything here renders results that the
``account_audit.audit`` core already computed.

Modules:
  formatters — ASCII terminal table and summary for Typer CLI output.
  export     — CSV flat-file export with the fixed audit column order.
"""
