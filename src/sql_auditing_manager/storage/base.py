"""Base interfaces for auditing policy storage."""

from abc import ABC, abstractmethod
from typing import Optional

import structlog

from ..policy.models import DatabaseAuditingPolicyModel

logger = structlog.get_logger(__name__)


class PolicyStore(ABC):
    """Abstract base class for auditing policy storage backends."""

    @abstractmethod
    def get_policy(
        self, resource_group: str, server: str, database: str
    ) -> DatabaseAuditingPolicyModel:
        """Retrieve the auditing policy of a database.

        Args:
            resource_group: Resource group holding the server.
            server: Server name.
            database: Database name.

        Returns:
            The stored policy model.

        Raises:
            PolicyNotFoundError: If no policy is stored for the database.
            PolicyStoreError: If retrieval fails.
        """
        ...

    @abstractmethod
    def save_policy(self, policy: DatabaseAuditingPolicyModel) -> DatabaseAuditingPolicyModel:
        """Store a policy, replacing any previous one for the same database.

        Args:
            policy: The policy to store.

        Returns:
            The policy as stored.

        Raises:
            PolicyStoreError: If storage fails.
        """
        logger.info(
            "saving_policy",
            resource_group=policy.resource_group_name,
            server=policy.server_name,
            database=policy.database_name,
        )
        ...

    @abstractmethod
    def delete_policy(self, resource_group: str, server: str, database: str) -> None:
        """Delete the auditing policy of a database.

        Raises:
            PolicyNotFoundError: If no policy is stored for the database.
        """
        ...

    @abstractmethod
    def list_policies(
        self, resource_group: Optional[str] = None, server: Optional[str] = None
    ) -> list[DatabaseAuditingPolicyModel]:
        """List stored policies, optionally filtered by resource group and server."""
        ...


class InMemoryPolicyStore(PolicyStore):
    """Policy store kept in a dictionary for the lifetime of the process."""

    def __init__(self) -> None:
        self._policies: dict[tuple[str, str, str], DatabaseAuditingPolicyModel] = {}

    def get_policy(
        self, resource_group: str, server: str, database: str
    ) -> DatabaseAuditingPolicyModel:
        try:
            return self._policies[(resource_group, server, database)]
        except KeyError:
            raise PolicyNotFoundError(
                f"No auditing policy for {resource_group}/{server}/{database}"
            ) from None

    def save_policy(self, policy: DatabaseAuditingPolicyModel) -> DatabaseAuditingPolicyModel:
        super().save_policy(policy)
        self._policies[policy.key] = policy
        return policy

    def delete_policy(self, resource_group: str, server: str, database: str) -> None:
        key = (resource_group, server, database)
        if key not in self._policies:
            raise PolicyNotFoundError(
                f"No auditing policy for {resource_group}/{server}/{database}"
            )
        del self._policies[key]

    def list_policies(
        self, resource_group: Optional[str] = None, server: Optional[str] = None
    ) -> list[DatabaseAuditingPolicyModel]:
        return [
            policy
            for policy in self._policies.values()
            if (resource_group is None or policy.resource_group_name == resource_group)
            and (server is None or policy.server_name == server)
        ]


class PolicyStoreError(Exception):
    """Base exception for policy store operations."""


class PolicyNotFoundError(PolicyStoreError):
    """Exception raised when no policy is stored for a database."""
