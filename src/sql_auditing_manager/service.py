"""Fetch, update and persist database auditing policies."""

from typing import Optional, Sequence

import structlog

from .policy import DatabaseAuditingPolicyModel, apply_user_input
from .storage import PolicyNotFoundError, PolicyStore

logger = structlog.get_logger(__name__)


class AuditingPolicyService:
    """Runs auditing policy changes against a policy store."""

    def __init__(self, store: PolicyStore):
        self._store = store

    @property
    def store(self) -> PolicyStore:
        return self._store

    def get_policy(
        self, resource_group: str, server: str, database: str
    ) -> DatabaseAuditingPolicyModel:
        """Get the policy of a database, or a fresh default one if none is stored."""
        try:
            return self._store.get_policy(resource_group, server, database)
        except PolicyNotFoundError:
            logger.debug(
                "policy_not_found_using_default",
                resource_group=resource_group,
                server=server,
                database=database,
            )
            return DatabaseAuditingPolicyModel(
                resource_group_name=resource_group,
                server_name=server,
                database_name=database,
            )

    def set_policy(
        self,
        resource_group: str,
        server: str,
        database: str,
        event_types: Optional[Sequence[str]] = None,
        storage_account_name: Optional[str] = None,
        storage_key_type: Optional[str] = None,
    ) -> DatabaseAuditingPolicyModel:
        """Apply user input to the current policy of a database and save it.

        Args:
            resource_group: Resource group holding the server.
            server: Server name.
            database: Database name.
            event_types: Requested event type tokens, shorthands allowed.
            storage_account_name: Storage account receiving audit records.
            storage_key_type: ``Primary`` or ``Secondary``.

        Returns:
            The saved policy.

        Raises:
            InvalidEventTypeSetError: If the event type selection is invalid.
                Nothing is saved in that case.
            PolicyStoreError: If the store fails.
        """
        current = self.get_policy(resource_group, server, database)
        updated = apply_user_input(
            current,
            event_types=event_types,
            storage_account_name=storage_account_name,
            storage_key_type=storage_key_type,
        )
        return self._store.save_policy(updated)

    def remove_policy(self, resource_group: str, server: str, database: str) -> None:
        """Forget the stored policy of a database.

        Raises:
            PolicyNotFoundError: If no policy is stored for the database.
        """
        self._store.delete_policy(resource_group, server, database)

    def list_policies(
        self, resource_group: Optional[str] = None, server: Optional[str] = None
    ) -> list[DatabaseAuditingPolicyModel]:
        """List stored policies, optionally filtered by resource group and server."""
        return self._store.list_policies(resource_group=resource_group, server=server)
