"""Auditing policy storage."""

from pathlib import Path
from typing import Optional, Type

from .base import InMemoryPolicyStore, PolicyNotFoundError, PolicyStore, PolicyStoreError
from .local import LocalPolicyStore, get_store_dir


def get_policy_store(
    store_dir: str | Path | None = None,
    store_class: Optional[Type[PolicyStore]] = None,
) -> PolicyStore:
    """Get the policy store to use.

    Args:
        store_dir: Directory for the local store. Ignored when store_class is given.
        store_class: Optional specific store class to use.

    Returns:
        PolicyStore: Store instance.
    """
    if store_class is not None:
        return store_class()
    return LocalPolicyStore(store_dir)


__all__ = [
    "InMemoryPolicyStore",
    "LocalPolicyStore",
    "PolicyNotFoundError",
    "PolicyStore",
    "PolicyStoreError",
    "get_policy_store",
    "get_store_dir",
]
