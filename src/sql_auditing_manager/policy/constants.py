"""User-facing tokens accepted by the auditing policy commands."""

# Event type tokens
DATA_ACCESS = "DataAccess"
DATA_CHANGES = "DataChanges"
SECURITY_EXCEPTIONS = "SecurityExceptions"
REVOKE_PERMISSIONS = "RevokePermissions"
SCHEMA_CHANGES = "SchemaChanges"
PLAIN_SQL_SUCCESS = "PlainSQL_Success"
PLAIN_SQL_FAILURE = "PlainSQL_Failure"
PARAMETERIZED_SQL_SUCCESS = "ParameterizedSQL_Success"
PARAMETERIZED_SQL_FAILURE = "ParameterizedSQL_Failure"
STORED_PROCEDURE_SUCCESS = "StoredProcedure_Success"
STORED_PROCEDURE_FAILURE = "StoredProcedure_Failure"
LOGIN_SUCCESS = "Login_Success"
LOGIN_FAILURE = "Login_Failure"
TRANSACTION_MANAGEMENT_SUCCESS = "TransactionManagement_Success"
TRANSACTION_MANAGEMENT_FAILURE = "TransactionManagement_Failure"

# Shorthand tokens, only valid as the sole requested event type
ALL = "All"
NONE = "None"

# Storage key tokens
PRIMARY = "Primary"
SECONDARY = "Secondary"

# Expansion of ALL, in canonical order
CANONICAL_EVENT_TYPES: tuple[str, ...] = (
    DATA_ACCESS,
    DATA_CHANGES,
    SECURITY_EXCEPTIONS,
    REVOKE_PERMISSIONS,
    SCHEMA_CHANGES,
    PLAIN_SQL_SUCCESS,
    PLAIN_SQL_FAILURE,
    PARAMETERIZED_SQL_SUCCESS,
    PARAMETERIZED_SQL_FAILURE,
    STORED_PROCEDURE_SUCCESS,
    STORED_PROCEDURE_FAILURE,
    LOGIN_SUCCESS,
    LOGIN_FAILURE,
    TRANSACTION_MANAGEMENT_SUCCESS,
    TRANSACTION_MANAGEMENT_FAILURE,
)

SHORTHAND_EVENT_TYPES: tuple[str, ...] = (ALL, NONE)

EVENT_TYPE_CHOICES: tuple[str, ...] = CANONICAL_EVENT_TYPES + SHORTHAND_EVENT_TYPES

STORAGE_KEY_CHOICES: tuple[str, ...] = (PRIMARY, SECONDARY)
