"""Audit logging for score computations.

Every scoring request over patient indicator data is recorded with its
method, row count and outcome. Patient-level values are never logged.
"""

import logging
from datetime import UTC, datetime
from enum import Enum

from pydantic import BaseModel, Field

# Separate audit logger for patient data processing events
audit_logger = logging.getLogger("audit")


class AuditAction(str, Enum):
    """Types of auditable actions."""

    SCORE = "score"
    REJECT = "reject"


class AuditEvent(BaseModel):
    """Audit event record."""

    timestamp: datetime = Field(default_factory=lambda: datetime.now(UTC))
    action: AuditAction = Field(..., description="Type of action performed")
    resource_type: str = Field(..., description="Type of resource processed")
    details: dict | None = Field(None, description="Additional context")
    success: bool = Field(True, description="Whether action succeeded")


def log_audit(
    action: AuditAction,
    resource_type: str,
    details: dict | None = None,
    success: bool = True,
) -> AuditEvent:
    """Log an audit event.

    Args:
        action: Type of action being audited
        resource_type: The type of resource being processed
        details: Additional context
        success: Whether the action succeeded

    Returns:
        The created AuditEvent
    """
    event = AuditEvent(
        action=action,
        resource_type=resource_type,
        details=details,
        success=success,
    )

    log_level = logging.INFO if success else logging.WARNING
    audit_logger.log(
        log_level,
        f"AUDIT: {action.value} {resource_type} success={success}",
        extra={"audit_event": event.model_dump()},
    )

    return event


def log_score_request(
    method: str,
    row_count: int,
    include_cardiac_arrhythmia: bool,
    error: str | None = None,
) -> AuditEvent:
    """Log a composite score request.

    Args:
        method: Requested scoring method
        row_count: Number of patient rows submitted
        include_cardiac_arrhythmia: Whether the CARDARRH term was requested
        error: Error class name if the request was rejected

    Returns:
        The created AuditEvent
    """
    details = {
        "method": method,
        "row_count": row_count,
        "include_cardiac_arrhythmia": include_cardiac_arrhythmia,
    }
    if error:
        details["error"] = error

    return log_audit(
        action=AuditAction.REJECT if error else AuditAction.SCORE,
        resource_type="elixhauser_scores",
        details=details,
        success=error is None,
    )
