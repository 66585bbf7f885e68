"""Auditing policy model and its enumerations."""

from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field

from . import constants


class AuditEventType(str, Enum):
    """Auditable event categories."""

    DATA_ACCESS = constants.DATA_ACCESS
    DATA_CHANGES = constants.DATA_CHANGES
    SECURITY_EXCEPTIONS = constants.SECURITY_EXCEPTIONS
    REVOKE_PERMISSIONS = constants.REVOKE_PERMISSIONS
    SCHEMA_CHANGES = constants.SCHEMA_CHANGES

    # Statement outcome events
    PLAIN_SQL_SUCCESS = constants.PLAIN_SQL_SUCCESS
    PLAIN_SQL_FAILURE = constants.PLAIN_SQL_FAILURE
    PARAMETERIZED_SQL_SUCCESS = constants.PARAMETERIZED_SQL_SUCCESS
    PARAMETERIZED_SQL_FAILURE = constants.PARAMETERIZED_SQL_FAILURE
    STORED_PROCEDURE_SUCCESS = constants.STORED_PROCEDURE_SUCCESS
    STORED_PROCEDURE_FAILURE = constants.STORED_PROCEDURE_FAILURE

    # Session events
    LOGIN_SUCCESS = constants.LOGIN_SUCCESS
    LOGIN_FAILURE = constants.LOGIN_FAILURE
    TRANSACTION_MANAGEMENT_SUCCESS = constants.TRANSACTION_MANAGEMENT_SUCCESS
    TRANSACTION_MANAGEMENT_FAILURE = constants.TRANSACTION_MANAGEMENT_FAILURE


class AuditStateType(str, Enum):
    """Auditing state of a database."""

    ENABLED = "Enabled"
    DISABLED = "Disabled"
    NEW = "New"


class UseServerDefaultOptions(str, Enum):
    """Whether the database inherits the server auditing policy."""

    ENABLED = "Enabled"
    DISABLED = "Disabled"


class StorageKeyKind(str, Enum):
    """Storage account key used to write audit records."""

    PRIMARY = constants.PRIMARY
    SECONDARY = constants.SECONDARY


class DatabaseAuditingPolicyModel(BaseModel):
    """Auditing policy of a single database."""

    model_config = ConfigDict(frozen=True)

    resource_group_name: str
    server_name: str
    database_name: str
    audit_state: AuditStateType = AuditStateType.NEW
    use_server_default: UseServerDefaultOptions = UseServerDefaultOptions.ENABLED
    storage_account_name: Optional[str] = None
    storage_key_type: StorageKeyKind = StorageKeyKind.PRIMARY
    event_type: List[AuditEventType] = Field(default_factory=list)

    @property
    def key(self) -> tuple[str, str, str]:
        """Identity of the database this policy belongs to."""
        return (self.resource_group_name, self.server_name, self.database_name)
