#!/usr/bin/env python3
"""
PROVIDERCTL INVENTORY STORES
----------------------------
Persistence for ProviderRecords. Stores own the optimistic-concurrency
token (resource_version): an update carrying a stale token is rejected
with ConflictError, never silently applied.

Author: ProviderCtl Team
Date: 2026-10-17
"""

import logging
import threading
from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional, Tuple

from kubernetes import client, config
from kubernetes.client.rest import ApiException

from providerctl.components.labels import CLUSTERCTL_LABEL, PROVIDER_LABEL
from providerctl.core.context import OperationContext
from providerctl.core.errors import ClusterAccessError, ConflictError, RecordNotFoundError
from providerctl.core.models import ProviderRecord, ProviderType

logger = logging.getLogger("providerctl.inventory")

INVENTORY_GROUP = "clusterctl.cluster.x-k8s.io"
INVENTORY_VERSION = "v1alpha3"
INVENTORY_PLURAL = "providers"
INVENTORY_KIND = "Provider"


class InventoryStore(ABC):
    """Transport boundary for inventory records."""

    @abstractmethod
    def list(self, ctx: OperationContext) -> List[ProviderRecord]:
        raise NotImplementedError

    @abstractmethod
    def get(self, ctx: OperationContext, name: str, namespace: str) -> ProviderRecord:
        raise NotImplementedError

    @abstractmethod
    def create(self, ctx: OperationContext, record: ProviderRecord) -> ProviderRecord:
        raise NotImplementedError

    @abstractmethod
    def update(self, ctx: OperationContext, record: ProviderRecord) -> ProviderRecord:
        raise NotImplementedError


class MemoryInventoryStore(InventoryStore):
    """Process-local store with the same concurrency rules as the cluster."""

    def __init__(self, records: Optional[List[ProviderRecord]] = None):
        self._lock = threading.Lock()
        self._records: Dict[Tuple[str, str], ProviderRecord] = {}
        self._revision = 0
        for record in records or []:
            self._put(record)

    def _put(self, record: ProviderRecord) -> ProviderRecord:
        self._revision += 1
        stored = record.with_resource_version(str(self._revision))
        self._records[stored.key] = stored
        return stored

    def list(self, ctx: OperationContext) -> List[ProviderRecord]:
        ctx.check()
        with self._lock:
            return list(self._records.values())

    def get(self, ctx: OperationContext, name: str, namespace: str) -> ProviderRecord:
        ctx.check()
        with self._lock:
            try:
                return self._records[(name, namespace)]
            except KeyError:
                raise RecordNotFoundError(f"Provider {name!r} not found in namespace {namespace!r}") from None

    def create(self, ctx: OperationContext, record: ProviderRecord) -> ProviderRecord:
        ctx.check()
        with self._lock:
            if record.key in self._records:
                raise ConflictError(f"Provider {record.name!r} already exists in namespace {record.namespace!r}")
            return self._put(record)

    def update(self, ctx: OperationContext, record: ProviderRecord) -> ProviderRecord:
        ctx.check()
        with self._lock:
            current = self._records.get(record.key)
            if current is None:
                raise RecordNotFoundError(f"Provider {record.name!r} not found in namespace {record.namespace!r}")
            if record.resource_version != current.resource_version:
                raise ConflictError(
                    f"Provider {record.name!r} in namespace {record.namespace!r} was modified concurrently "
                    f"(have {record.resource_version!r}, current {current.resource_version!r})"
                )
            return self._put(record)


def record_to_object(record: ProviderRecord) -> Dict[str, Any]:
    metadata: Dict[str, Any] = {
        "name": record.name,
        "namespace": record.namespace,
        "labels": {CLUSTERCTL_LABEL: "", PROVIDER_LABEL: record.name},
    }
    if record.resource_version:
        metadata["resourceVersion"] = record.resource_version
    body = {
        "apiVersion": f"{INVENTORY_GROUP}/{INVENTORY_VERSION}",
        "kind": INVENTORY_KIND,
        "metadata": metadata,
        "type": str(record.type),
        "version": record.version,
    }
    if record.watched_namespace:
        body["watchedNamespace"] = record.watched_namespace
    return body


def object_to_record(obj: Dict[str, Any]) -> ProviderRecord:
    metadata = obj.get("metadata") or {}
    return ProviderRecord(
        name=metadata.get("name", ""),
        namespace=metadata.get("namespace", ""),
        type=ProviderType(obj.get("type", ProviderType.CORE.value)),
        version=obj.get("version", ""),
        watched_namespace=obj.get("watchedNamespace", "") or "",
        resource_version=metadata.get("resourceVersion"),
    )


class KubernetesInventoryStore(InventoryStore):
    """
    Inventory kept as Provider custom resources in the management cluster.
    Kubeconfig handling stays with the caller: pass a ready CustomObjectsApi
    or use from_kubeconfig().
    """

    def __init__(self, custom_api: client.CustomObjectsApi):
        self.custom_api = custom_api

    @classmethod
    def from_kubeconfig(cls, kubeconfig: Optional[str] = None, context: Optional[str] = None) -> "KubernetesInventoryStore":
        try:
            config.load_kube_config(config_file=kubeconfig, context=context)
        except (config.ConfigException, OSError) as e:
            raise ClusterAccessError(f"Failed to load kubeconfig: {e}") from e
        return cls(client.CustomObjectsApi())

    def _request_kwargs(self, ctx: OperationContext) -> Dict[str, Any]:
        ctx.check()
        timeout = ctx.timeout()
        return {"_request_timeout": timeout} if timeout is not None else {}

    def _translate(self, e: ApiException, action: str, name: str = "", namespace: str = ""):
        if e.status == 404:
            raise RecordNotFoundError(f"Provider {name!r} not found in namespace {namespace!r}") from e
        if e.status == 409:
            raise ConflictError(f"Failed to {action} provider {name!r} in namespace {namespace!r}: {e.reason}") from e
        logger.error(f"Failed to {action} provider inventory: {e}")
        raise ClusterAccessError(f"Failed to {action} provider inventory: {e.status} {e.reason}") from e

    def list(self, ctx: OperationContext) -> List[ProviderRecord]:
        try:
            result = self.custom_api.list_cluster_custom_object(
                group=INVENTORY_GROUP,
                version=INVENTORY_VERSION,
                plural=INVENTORY_PLURAL,
                **self._request_kwargs(ctx),
            )
        except ApiException as e:
            self._translate(e, "list")
        return [object_to_record(item) for item in result.get("items", [])]

    def get(self, ctx: OperationContext, name: str, namespace: str) -> ProviderRecord:
        try:
            obj = self.custom_api.get_namespaced_custom_object(
                group=INVENTORY_GROUP,
                version=INVENTORY_VERSION,
                namespace=namespace,
                plural=INVENTORY_PLURAL,
                name=name,
                **self._request_kwargs(ctx),
            )
        except ApiException as e:
            self._translate(e, "get", name, namespace)
        return object_to_record(obj)

    def create(self, ctx: OperationContext, record: ProviderRecord) -> ProviderRecord:
        try:
            obj = self.custom_api.create_namespaced_custom_object(
                group=INVENTORY_GROUP,
                version=INVENTORY_VERSION,
                namespace=record.namespace,
                plural=INVENTORY_PLURAL,
                body=record_to_object(record.with_resource_version(None)),
                **self._request_kwargs(ctx),
            )
        except ApiException as e:
            self._translate(e, "create", record.name, record.namespace)
        return object_to_record(obj)

    def update(self, ctx: OperationContext, record: ProviderRecord) -> ProviderRecord:
        try:
            obj = self.custom_api.replace_namespaced_custom_object(
                group=INVENTORY_GROUP,
                version=INVENTORY_VERSION,
                namespace=record.namespace,
                plural=INVENTORY_PLURAL,
                name=record.name,
                body=record_to_object(record),
                **self._request_kwargs(ctx),
            )
        except ApiException as e:
            self._translate(e, "update", record.name, record.namespace)
        return object_to_record(obj)
