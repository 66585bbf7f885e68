"""Audit logging package."""

from .events import AuditOperation
from .logger import audit_event, get_logger, reset_logger, setup_logging

__all__ = ["AuditOperation", "audit_event", "get_logger", "reset_logger", "setup_logging"]
