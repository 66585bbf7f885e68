"""Operation types recorded in the tool's own audit log."""

from enum import Enum


class AuditOperation(str, Enum):
    """Audited operations."""

    # Policy events
    POLICY_READ = "policy.read"
    POLICY_UPDATE = "policy.update"
    POLICY_DELETE = "policy.delete"
    POLICY_LIST = "policy.list"

    # Error events
    ERROR_POLICY = "error.policy"
    ERROR_STORE = "error.store"
