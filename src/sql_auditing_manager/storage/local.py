"""Policy storage as JSON documents in a local directory."""

import os
import re
from pathlib import Path
from typing import Optional

from pydantic import ValidationError

from ..policy.models import DatabaseAuditingPolicyModel
from .base import PolicyNotFoundError, PolicyStore, PolicyStoreError

_NAME_PATTERN = re.compile(r"^[A-Za-z0-9._()-]+$")


def get_store_dir(base_dir: str | Path | None = None) -> Path:
    """Get normalized policy directory path.

    Args:
        base_dir: Directory for policy files. If None, uses ~/.config/sqlaudit/policies

    Returns:
        Resolved Path object for the policy directory
    """
    if base_dir is None:
        base_dir = Path.home() / ".config" / "sqlaudit" / "policies"
    return Path(base_dir).resolve()


class LocalPolicyStore(PolicyStore):
    """Policy store writing one JSON file per database."""

    def __init__(self, base_dir: str | Path | None = None):
        """Initialize the store, creating its directory if needed."""
        self._policy_dir = get_store_dir(base_dir)
        os.makedirs(self._policy_dir, mode=0o700, exist_ok=True)

    @property
    def policy_dir(self) -> Path:
        return self._policy_dir

    def _get_policy_path(self, resource_group: str, server: str, database: str) -> Path:
        """Get the file path for a database policy, one directory level per name."""
        for name in (resource_group, server, database):
            if not _NAME_PATTERN.match(name) or name in (".", ".."):
                raise PolicyStoreError(f"Invalid resource name: {name!r}")
        return self._policy_dir / resource_group / server / f"{database}.json"

    def _read_policy(
        self, path: Path, key: Optional[tuple[str, str, str]] = None
    ) -> DatabaseAuditingPolicyModel:
        try:
            policy = DatabaseAuditingPolicyModel.model_validate_json(path.read_text())
        except (OSError, ValidationError) as e:
            raise PolicyStoreError(f"Failed to read policy {path.name}: {e}") from e
        if key is not None and policy.key != key:
            raise PolicyStoreError(
                f"Policy file {path.name} belongs to {'/'.join(policy.key)}, "
                f"not {'/'.join(key)}"
            )
        return policy

    def get_policy(
        self, resource_group: str, server: str, database: str
    ) -> DatabaseAuditingPolicyModel:
        path = self._get_policy_path(resource_group, server, database)
        if not path.exists():
            raise PolicyNotFoundError(
                f"No auditing policy for {resource_group}/{server}/{database}"
            )
        return self._read_policy(path, (resource_group, server, database))

    def save_policy(self, policy: DatabaseAuditingPolicyModel) -> DatabaseAuditingPolicyModel:
        super().save_policy(policy)
        path = self._get_policy_path(*policy.key)
        try:
            for directory in (path.parent.parent, path.parent):
                os.makedirs(directory, mode=0o700, exist_ok=True)
            fd = os.open(path, os.O_WRONLY | os.O_CREAT | os.O_TRUNC, 0o600)
            with os.fdopen(fd, "w") as f:
                f.write(policy.model_dump_json(indent=2))
        except OSError as e:
            raise PolicyStoreError(f"Failed to write policy {path.name}: {e}") from e
        return policy

    def delete_policy(self, resource_group: str, server: str, database: str) -> None:
        path = self._get_policy_path(resource_group, server, database)
        try:
            path.unlink()
        except FileNotFoundError:
            raise PolicyNotFoundError(
                f"No auditing policy for {resource_group}/{server}/{database}"
            ) from None
        except OSError as e:
            raise PolicyStoreError(f"Failed to delete policy {path.name}: {e}") from e

    def list_policies(
        self, resource_group: Optional[str] = None, server: Optional[str] = None
    ) -> list[DatabaseAuditingPolicyModel]:
        policies = [
            self._read_policy(path) for path in sorted(self._policy_dir.glob("*/*/*.json"))
        ]
        return [
            policy
            for policy in policies
            if (resource_group is None or policy.resource_group_name == resource_group)
            and (server is None or policy.server_name == server)
        ]
