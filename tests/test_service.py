"""Tests for the auditing policy service."""

from unittest.mock import MagicMock

import pytest

from sql_auditing_manager.policy import (
    AuditEventType,
    AuditStateType,
    InvalidEventTypeSetError,
    StorageKeyKind,
    UseServerDefaultOptions,
)
from sql_auditing_manager.service import AuditingPolicyService
from sql_auditing_manager.storage import (
    InMemoryPolicyStore,
    PolicyNotFoundError,
    PolicyStore,
    PolicyStoreError,
)


@pytest.fixture
def service() -> AuditingPolicyService:
    return AuditingPolicyService(InMemoryPolicyStore())


def test_get_policy_default_when_missing(service: AuditingPolicyService):
    policy = service.get_policy("rg", "sql01", "orders")
    assert policy.key == ("rg", "sql01", "orders")
    assert policy.audit_state == AuditStateType.NEW
    assert policy.use_server_default == UseServerDefaultOptions.ENABLED
    assert policy.storage_account_name is None
    assert policy.storage_key_type == StorageKeyKind.PRIMARY
    assert policy.event_type == []
    # Reading never creates a stored policy
    assert service.store.list_policies() == []


def test_set_policy_saves_result(service: AuditingPolicyService):
    saved = service.set_policy(
        "rg",
        "sql01",
        "orders",
        event_types=["All"],
        storage_account_name="auditstore",
        storage_key_type="Secondary",
    )

    assert saved.audit_state == AuditStateType.ENABLED
    assert saved.use_server_default == UseServerDefaultOptions.DISABLED
    assert saved.event_type == list(AuditEventType)
    assert service.get_policy("rg", "sql01", "orders") == saved


def test_set_policy_merges_with_stored(service: AuditingPolicyService):
    service.set_policy(
        "rg", "sql01", "orders", event_types=["DataAccess"], storage_account_name="auditstore"
    )
    saved = service.set_policy("rg", "sql01", "orders", storage_key_type="Secondary")

    assert saved.event_type == [AuditEventType.DATA_ACCESS]
    assert saved.storage_account_name == "auditstore"
    assert saved.storage_key_type == StorageKeyKind.SECONDARY


def test_set_policy_invalid_set_saves_nothing():
    store = MagicMock(spec=PolicyStore)
    store.get_policy.side_effect = InMemoryPolicyStore().get_policy
    service = AuditingPolicyService(store)

    with pytest.raises(InvalidEventTypeSetError):
        service.set_policy("rg", "sql01", "orders", event_types=["None", "DataAccess"])
    store.save_policy.assert_not_called()


def test_set_policy_store_error_propagates():
    store = MagicMock(spec=PolicyStore)
    store.get_policy.side_effect = PolicyStoreError("disk full")
    service = AuditingPolicyService(store)

    with pytest.raises(PolicyStoreError, match="disk full"):
        service.set_policy("rg", "sql01", "orders", event_types=["All"])


def test_remove_and_list_policies(service: AuditingPolicyService):
    service.set_policy("rg", "sql01", "orders", event_types=["All"])
    service.set_policy("rg", "sql02", "orders", event_types=["None"])

    assert len(service.list_policies()) == 2
    assert [p.server_name for p in service.list_policies(server="sql02")] == ["sql02"]

    service.remove_policy("rg", "sql01", "orders")
    assert [p.key for p in service.list_policies()] == [("rg", "sql02", "orders")]
    with pytest.raises(PolicyNotFoundError):
        service.remove_policy("rg", "sql01", "orders")
