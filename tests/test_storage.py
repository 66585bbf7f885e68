"""Tests for auditing policy storage implementations."""

import json
import os
import sys

import pytest

from sql_auditing_manager.policy import (
    AuditEventType,
    AuditStateType,
    DatabaseAuditingPolicyModel,
    StorageKeyKind,
)
from sql_auditing_manager.storage import (
    InMemoryPolicyStore,
    LocalPolicyStore,
    PolicyNotFoundError,
    PolicyStore,
    PolicyStoreError,
    get_policy_store,
    get_store_dir,
)


@pytest.fixture(params=["memory", "local"])
def store(request, tmp_path) -> PolicyStore:
    """Create each store implementation."""
    if request.param == "memory":
        return InMemoryPolicyStore()
    return LocalPolicyStore(tmp_path / "policies")


@pytest.fixture
def policy() -> DatabaseAuditingPolicyModel:
    """Create a test policy."""
    return DatabaseAuditingPolicyModel(
        resource_group_name="rg",
        server_name="sql01",
        database_name="orders",
        audit_state=AuditStateType.ENABLED,
        storage_account_name="auditstore",
        storage_key_type=StorageKeyKind.SECONDARY,
        event_type=[AuditEventType.DATA_ACCESS, AuditEventType.LOGIN_FAILURE],
    )


def test_save_and_get(store: PolicyStore, policy: DatabaseAuditingPolicyModel):
    """Test storing and retrieving a policy."""
    store.save_policy(policy)
    assert store.get_policy("rg", "sql01", "orders") == policy


def test_policy_not_found(store: PolicyStore):
    with pytest.raises(PolicyNotFoundError):
        store.get_policy("rg", "sql01", "missing")


def test_save_replaces_previous(store: PolicyStore, policy: DatabaseAuditingPolicyModel):
    store.save_policy(policy)
    updated = policy.model_copy(update={"event_type": []})
    store.save_policy(updated)

    assert store.get_policy("rg", "sql01", "orders").event_type == []
    assert len(store.list_policies()) == 1


def test_delete_policy(store: PolicyStore, policy: DatabaseAuditingPolicyModel):
    store.save_policy(policy)
    store.delete_policy("rg", "sql01", "orders")

    with pytest.raises(PolicyNotFoundError):
        store.get_policy("rg", "sql01", "orders")
    with pytest.raises(PolicyNotFoundError):
        store.delete_policy("rg", "sql01", "orders")


def test_list_policies_filters(store: PolicyStore, policy: DatabaseAuditingPolicyModel):
    other_server = policy.model_copy(update={"server_name": "sql02"})
    other_group = policy.model_copy(update={"resource_group_name": "rg2"})
    for p in (policy, other_server, other_group):
        store.save_policy(p)

    assert len(store.list_policies()) == 3
    assert {p.server_name for p in store.list_policies(resource_group="rg")} == {
        "sql01",
        "sql02",
    }
    assert store.list_policies(resource_group="rg", server="sql02") == [other_server]
    assert store.list_policies(resource_group="nope") == []


def test_local_store_writes_json(tmp_path, policy: DatabaseAuditingPolicyModel):
    store = LocalPolicyStore(tmp_path)
    store.save_policy(policy)

    data = json.loads((tmp_path / "rg" / "sql01" / "orders.json").read_text())
    assert data["storage_key_type"] == "Secondary"
    assert data["event_type"] == ["DataAccess", "Login_Failure"]
    assert data["audit_state"] == "Enabled"


@pytest.mark.skipif(sys.platform == "win32",
                    reason="POSIX permissions not supported on Windows")
def test_local_store_permissions(tmp_path, policy: DatabaseAuditingPolicyModel):
    store = LocalPolicyStore(tmp_path / "policies")
    store.save_policy(policy)

    for directory in (store.policy_dir, store.policy_dir / "rg", store.policy_dir / "rg" / "sql01"):
        assert oct(os.stat(directory).st_mode & 0o777).endswith("700")
    policy_file = store.policy_dir / "rg" / "sql01" / "orders.json"
    assert oct(os.stat(policy_file).st_mode & 0o777).endswith("600")


@pytest.mark.parametrize("name", ["../etc", "a/b", "", "..", "with space"])
def test_local_store_rejects_unsafe_names(tmp_path, name):
    store = LocalPolicyStore(tmp_path)
    with pytest.raises(PolicyStoreError):
        store.get_policy("rg", "sql01", name)


def test_local_store_corrupt_file(tmp_path):
    store = LocalPolicyStore(tmp_path)
    (tmp_path / "rg" / "sql01").mkdir(parents=True)
    (tmp_path / "rg" / "sql01" / "orders.json").write_text("{not json")

    with pytest.raises(PolicyStoreError) as exc_info:
        store.get_policy("rg", "sql01", "orders")
    assert not isinstance(exc_info.value, PolicyNotFoundError)


@pytest.mark.parametrize(
    "first, second",
    [
        (("a__b", "c", "db"), ("a", "b__c", "db")),
        (("rg", "sql__01", "orders"), ("rg__sql", "01", "orders")),
        (("rg", "sql01", "a.b"), ("rg", "sql01.a", "b")),
    ],
)
def test_databases_with_similar_names_are_isolated(store: PolicyStore, first, second):
    """Test that names sharing separators never resolve to the same policy."""
    resource_group, server, database = first
    store.save_policy(
        DatabaseAuditingPolicyModel(
            resource_group_name=resource_group,
            server_name=server,
            database_name=database,
            storage_account_name="first",
        )
    )

    with pytest.raises(PolicyNotFoundError):
        store.get_policy(*second)

    resource_group, server, database = second
    store.save_policy(
        DatabaseAuditingPolicyModel(
            resource_group_name=resource_group,
            server_name=server,
            database_name=database,
            storage_account_name="second",
        )
    )

    assert store.get_policy(*first).key == first
    assert store.get_policy(*first).storage_account_name == "first"
    assert store.get_policy(*second).key == second
    assert store.get_policy(*second).storage_account_name == "second"
    assert len(store.list_policies()) == 2


def test_local_store_rejects_policy_of_other_database(
    tmp_path, policy: DatabaseAuditingPolicyModel
):
    store = LocalPolicyStore(tmp_path)
    store.save_policy(policy)
    misplaced = tmp_path / "rg" / "sql01" / "customers.json"
    misplaced.write_text((tmp_path / "rg" / "sql01" / "orders.json").read_text())

    with pytest.raises(PolicyStoreError, match="belongs to rg/sql01/orders"):
        store.get_policy("rg", "sql01", "customers")


def test_get_store_dir_default(tmp_path, monkeypatch):
    monkeypatch.setattr("pathlib.Path.home", lambda: tmp_path)
    assert get_store_dir() == (tmp_path / ".config" / "sqlaudit" / "policies").resolve()


def test_get_policy_store(tmp_path):
    store = get_policy_store(tmp_path)
    assert isinstance(store, LocalPolicyStore)
    assert store.policy_dir == tmp_path.resolve()

    assert isinstance(get_policy_store(store_class=InMemoryPolicyStore), InMemoryPolicyStore)
