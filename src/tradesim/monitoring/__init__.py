"""Run monitoring helpers."""

from tradesim.monitoring.audit import RUN_EVENTS, AuditLog

__all__ = ["AuditLog", "RUN_EVENTS"]
