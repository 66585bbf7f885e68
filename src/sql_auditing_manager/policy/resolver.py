"""Event type shorthand resolution and application of user input to a policy."""

from typing import Optional, Sequence

import structlog

from . import constants
from .models import (
    AuditEventType,
    AuditStateType,
    DatabaseAuditingPolicyModel,
    StorageKeyKind,
    UseServerDefaultOptions,
)

logger = structlog.get_logger(__name__)


class AuditingPolicyError(Exception):
    """Base exception for auditing policy operations."""


class InvalidEventTypeSetError(AuditingPolicyError):
    """Raised when a shorthand event type is combined with other event types."""

    def __init__(self, event_type: str):
        self.event_type = event_type
        super().__init__(
            f"The event type '{event_type}' must be the only event type specified"
        )


def resolve_event_types(requested: Optional[Sequence[str]]) -> Optional[list[str]]:
    """Expand the ``All`` and ``None`` shorthands in a requested event type list.

    Args:
        requested: Event type tokens as supplied by the user, or None.

    Returns:
        None when nothing was requested, meaning the policy's event types stay
        unchanged. Otherwise a new list holding only canonical tokens; ``None``
        alone yields an empty list and ``All`` alone yields every canonical
        event type in canonical order.

    Raises:
        InvalidEventTypeSetError: If a shorthand appears alongside any other
            token, including a second copy of itself.
    """
    if not requested:
        return None

    if len(requested) == 1:
        token = requested[0]
        if token == constants.NONE:
            return []
        if token == constants.ALL:
            return list(constants.CANONICAL_EVENT_TYPES)
        return [token]

    if constants.ALL in requested:
        raise InvalidEventTypeSetError(constants.ALL)
    if constants.NONE in requested:
        raise InvalidEventTypeSetError(constants.NONE)
    return list(requested)


def to_audit_event_types(tokens: Sequence[str]) -> list[AuditEventType]:
    """Map canonical event type tokens to their enum members.

    Raises:
        ValueError: If a token is not a canonical event type.
    """
    return [AuditEventType(token) for token in tokens]


def apply_user_input(
    model: DatabaseAuditingPolicyModel,
    event_types: Optional[Sequence[str]] = None,
    storage_account_name: Optional[str] = None,
    storage_key_type: Optional[str] = None,
) -> DatabaseAuditingPolicyModel:
    """Return a copy of ``model`` updated with the user's auditing settings.

    Auditing is always switched on and detached from the server default.
    Storage fields are only replaced when given. The input model is never
    modified, and nothing is applied if the event types fail to resolve.

    Args:
        model: Current policy of the database.
        event_types: Requested event type tokens, shorthands allowed.
        storage_account_name: Storage account receiving audit records.
        storage_key_type: ``Primary`` or ``Secondary``.

    Returns:
        The updated policy model.

    Raises:
        InvalidEventTypeSetError: If the event type selection is invalid.
    """
    resolved = resolve_event_types(event_types)

    update: dict = {
        "audit_state": AuditStateType.ENABLED,
        "use_server_default": UseServerDefaultOptions.DISABLED,
    }
    if storage_account_name is not None:
        update["storage_account_name"] = storage_account_name
    if storage_key_type:
        update["storage_key_type"] = StorageKeyKind(storage_key_type)
    if resolved is not None:
        update["event_type"] = to_audit_event_types(resolved)

    logger.debug(
        "applying_user_input",
        database=model.database_name,
        fields=sorted(update),
    )
    return model.model_copy(update=update, deep=True)
