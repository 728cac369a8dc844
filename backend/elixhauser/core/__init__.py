"""Core application configuration and utilities."""

from elixhauser.core.audit import AuditAction, AuditEvent, log_audit, log_score_request
from elixhauser.core.config import settings

__all__ = [
    # Config
    "settings",
    # Audit
    "AuditAction",
    "AuditEvent",
    "log_audit",
    "log_score_request",
]
