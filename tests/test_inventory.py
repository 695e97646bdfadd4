#!/usr/bin/env python3
"""
INVENTORY SUITE
---------------
Install validation, default resolution and the create-or-update contract
of the InventoryClient over the in-memory store.
"""

import dataclasses

import pytest

from providerctl.components.pipeline import ComponentsBuilder
from providerctl.core.config import MemoryVariables
from providerctl.core.context import OperationContext
from providerctl.core.errors import (
    ConflictError,
    ConflictingScopeError,
    DuplicateInstallError,
    OperationCancelledError,
    RecordNotFoundError,
)
from providerctl.core.models import Provider, ProviderRecord, ProviderType
from providerctl.inventory.client import InventoryClient
from providerctl.inventory.resolver import InventoryResolver
from providerctl.inventory.store import InventoryStore, MemoryInventoryStore
from providerctl.inventory.validator import scopes_overlap, validate

INFRA = ProviderType.INFRASTRUCTURE


def infra(namespace, watched="", name="infra", version="v1.0.0"):
    return ProviderRecord(name=name, namespace=namespace, type=INFRA, version=version, watched_namespace=watched)


# --- Validator ---

@pytest.mark.parametrize("existing, candidate, error", [
    pytest.param([], infra("ns1"), None, id="first-instance"),
    pytest.param([infra("ns1", name="other")], infra("ns1"), None, id="other-provider"),
    pytest.param([infra("ns1")], infra("ns1"), DuplicateInstallError, id="same-namespace"),
    pytest.param([infra("ns1", "ns1")], infra("ns2"), ConflictingScopeError, id="candidate-watches-all"),
    pytest.param([infra("ns1")], infra("ns2", "ns2"), ConflictingScopeError, id="existing-watches-all"),
    pytest.param([infra("ns1", "ns1")], infra("ns2", "ns1"), ConflictingScopeError, id="same-watched-namespace"),
    pytest.param([infra("ns1", "ns1")], infra("ns2", "ns2"), None, id="disjoint-scopes"),
    pytest.param([infra("ns1", "ns1"), infra("ns2", "ns2")], infra("ns3", "ns3"), None, id="three-disjoint"),
])
def test_validate(existing, candidate, error):
    if error is None:
        validate(candidate, existing)
        return
    with pytest.raises(error):
        validate(candidate, existing)


@pytest.mark.parametrize("a, b, expected", [
    ("", "", True),
    (None, "ns1", True),
    ("ns1", "", True),
    ("ns1", "ns1", True),
    ("ns1", "ns2", False),
])
def test_scopes_overlap_is_symmetric(a, b, expected):
    assert scopes_overlap(a, b) is expected
    assert scopes_overlap(b, a) is expected


# --- Resolver ---

def test_resolver_single_values():
    resolver = InventoryResolver([
        ProviderRecord("cluster-api", "capi-system", ProviderType.CORE, "v0.3.0"),
        infra("infra-system"),
    ])

    assert resolver.default_provider_name(INFRA) == "infra"
    assert resolver.default_provider_version("infra") == "v1.0.0"
    assert resolver.default_provider_namespace("infra") == "infra-system"


def test_resolver_has_no_default_when_ambiguous_or_empty():
    resolver = InventoryResolver([
        infra("ns1", "ns1", version="v1.0.0"),
        infra("ns2", "ns2", version="v1.1.0"),
        infra("ns1", name="infra-b"),
    ])

    assert resolver.default_provider_name(INFRA) is None
    assert resolver.default_provider_version("infra") is None
    assert resolver.default_provider_namespace("infra") is None
    assert resolver.default_provider_name(ProviderType.BOOTSTRAP) is None
    assert resolver.default_provider_version("infra-b") == "v1.0.0"


def test_resolver_list_filters():
    resolver = InventoryResolver([infra("ns1"), infra("ns2"), infra("ns1", name="infra-b")])

    assert len(resolver.list()) == 3
    assert [r.namespace for r in resolver.list(name="infra")] == ["ns1", "ns2"]
    assert [r.name for r in resolver.list(namespace="ns1")] == ["infra", "infra-b"]
    assert resolver.list(type=ProviderType.CORE) == []


# --- Client and store ---

@pytest.fixture
def ctx():
    return OperationContext()


def test_create_then_update_keeps_single_record(ctx):
    client = InventoryClient(MemoryInventoryStore())

    created = client.create(ctx, infra("ns1"))
    updated = client.create(ctx, infra("ns1", version="v1.1.0"))

    records = client.list(ctx, name="infra")
    assert len(records) == 1
    assert records[0].version == "v1.1.0"
    assert created.resource_version != updated.resource_version


def test_client_validate_uses_store(ctx):
    client = InventoryClient(MemoryInventoryStore([infra("ns1")]))

    with pytest.raises(DuplicateInstallError):
        client.validate(ctx, infra("ns1"))
    client.validate(ctx, infra("ns1", name="infra-b"))


def test_stale_update_conflicts(ctx):
    store = MemoryInventoryStore()
    first = store.create(ctx, infra("ns1"))
    store.update(ctx, first.with_resource_version(first.resource_version))

    with pytest.raises(ConflictError):
        store.update(ctx, first)


def test_store_create_twice_conflicts(ctx):
    store = MemoryInventoryStore()
    store.create(ctx, infra("ns1"))

    with pytest.raises(ConflictError):
        store.create(ctx, infra("ns1"))


def test_store_missing_records(ctx):
    store = MemoryInventoryStore()

    with pytest.raises(RecordNotFoundError):
        store.get(ctx, "infra", "ns1")
    with pytest.raises(RecordNotFoundError):
        store.update(ctx, infra("ns1"))


def test_cancelled_context(ctx):
    client = InventoryClient(MemoryInventoryStore())
    ctx.cancel()

    with pytest.raises(OperationCancelledError):
        client.list(ctx)


def test_expired_deadline():
    client = InventoryClient(MemoryInventoryStore())

    with pytest.raises(OperationCancelledError):
        client.create(OperationContext.with_timeout(0), infra("ns1"))


def test_record_for_components():
    components = ComponentsBuilder(MemoryVariables()).build(
        Provider("infra", INFRA), "v1.0.0", "kind: ServiceAccount\nmetadata:\n  name: sa\n",
        target_namespace="ns1", watching_namespace="ns1",
    )

    assert InventoryClient.record_for(components) == infra("ns1", "ns1")


def test_stored_records_cannot_be_changed_in_place(ctx):
    store = MemoryInventoryStore([infra("ns1")])

    with pytest.raises(dataclasses.FrozenInstanceError):
        store.list(ctx)[0].version = "v9.9.9"
    assert store.get(ctx, "infra", "ns1").version == "v1.0.0"


def test_pending_records_take_part_in_validation(ctx):
    client = InventoryClient(MemoryInventoryStore())

    with pytest.raises(ConflictingScopeError):
        client.validate(ctx, infra("ns2", "ns1"), pending=[infra("ns1", "ns1")])


def test_store_contract_is_enforced():
    class ReadOnlyStore(InventoryStore):
        def list(self, ctx):
            return []

        def get(self, ctx, name, namespace):
            raise RecordNotFoundError(name)

    with pytest.raises(TypeError):
        ReadOnlyStore()
