"""Database auditing policy model and user input resolution."""

from .models import (
    AuditEventType,
    AuditStateType,
    DatabaseAuditingPolicyModel,
    StorageKeyKind,
    UseServerDefaultOptions,
)
from .resolver import (
    AuditingPolicyError,
    InvalidEventTypeSetError,
    apply_user_input,
    resolve_event_types,
    to_audit_event_types,
)

__all__ = [
    # Model
    "AuditEventType",
    "AuditStateType",
    "DatabaseAuditingPolicyModel",
    "StorageKeyKind",
    "UseServerDefaultOptions",
    # Resolution
    "AuditingPolicyError",
    "InvalidEventTypeSetError",
    "apply_user_input",
    "resolve_event_types",
    "to_audit_event_types",
]
