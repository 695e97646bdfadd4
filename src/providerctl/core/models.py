#!/usr/bin/env python3
"""
PROVIDERCTL CORE MODELS
-----------------------
Defines the fundamental data structures used across providerctl.
A StructuredDocument is the lowest level of manifest abstraction: a thin
typed view over one round-trip YAML mapping. Fields the pipeline never
touches stay in the underlying CommentedMap so they are written back as-is.

Author: ProviderCtl Team
Date: 2026-10-17
"""

import copy
from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Any, Dict, List, Optional, Tuple

from ruamel.yaml.comments import CommentedMap, CommentedSeq

NAMESPACE_KIND = "Namespace"
CLUSTER_ROLE_KIND = "ClusterRole"
CLUSTER_ROLE_BINDING_KIND = "ClusterRoleBinding"
ROLE_BINDING_KIND = "RoleBinding"
DEPLOYMENT_KIND = "Deployment"
SERVICE_ACCOUNT_KIND = "ServiceAccount"

# Kinds that live at cluster scope and must never carry metadata.namespace
CLUSTER_SCOPED_KINDS = frozenset([
    NAMESPACE_KIND,
    CLUSTER_ROLE_KIND,
    CLUSTER_ROLE_BINDING_KIND,
    "CustomResourceDefinition",
    "ValidatingWebhookConfiguration",
    "MutatingWebhookConfiguration",
    "APIService",
    "PriorityClass",
    "StorageClass",
    "PersistentVolume",
    "Node",
])


def to_commented(value: Any) -> Any:
    """Recursively converts plain dicts/lists into their round-trip counterparts."""
    if isinstance(value, CommentedMap):
        for key in list(value.keys()):
            value[key] = to_commented(value[key])
        return value
    if isinstance(value, dict):
        converted = CommentedMap()
        for key, item in value.items():
            converted[key] = to_commented(item)
        return converted
    if isinstance(value, CommentedSeq):
        for i, item in enumerate(value):
            value[i] = to_commented(item)
        return value
    if isinstance(value, list):
        return CommentedSeq(to_commented(item) for item in value)
    return value


def to_plain(value: Any) -> Any:
    """Strips round-trip wrappers; handy for comparisons and JSON payloads."""
    if isinstance(value, dict):
        return {key: to_plain(item) for key, item in value.items()}
    if isinstance(value, list):
        return [to_plain(item) for item in value]
    return value


class StructuredDocument:
    """
    One Kubernetes resource from a manifest bundle.

    Accessors cover the fields the pipeline reads or writes (identity,
    metadata, RBAC references and the pod template); everything else is
    carried opaquely in ``obj``.
    """

    def __init__(self, obj: Optional[Dict[str, Any]] = None):
        self.obj: CommentedMap = to_commented(obj) if obj is not None else CommentedMap()

    def __repr__(self) -> str:
        return f"StructuredDocument(kind={self.kind!r}, name={self.name!r}, namespace={self.namespace!r})"

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, StructuredDocument):
            return NotImplemented
        return to_plain(self.obj) == to_plain(other.obj)

    def deep_copy(self) -> "StructuredDocument":
        return StructuredDocument(copy.deepcopy(self.obj))

    def to_dict(self) -> Dict[str, Any]:
        return to_plain(self.obj)

    # --- Identity ---

    @property
    def kind(self) -> str:
        return self.obj.get("kind") or ""

    @property
    def api_version(self) -> str:
        return self.obj.get("apiVersion") or ""

    @property
    def is_cluster_scoped(self) -> bool:
        return self.kind in CLUSTER_SCOPED_KINDS

    # --- Metadata ---

    def _metadata(self, create: bool = False) -> Optional[CommentedMap]:
        metadata = self.obj.get("metadata")
        if metadata is None and create:
            metadata = CommentedMap()
            self.obj["metadata"] = metadata
        return metadata

    @property
    def name(self) -> str:
        metadata = self._metadata()
        return (metadata or {}).get("name") or ""

    @name.setter
    def name(self, value: str):
        self._metadata(create=True)["name"] = value

    @property
    def namespace(self) -> str:
        metadata = self._metadata()
        return (metadata or {}).get("namespace") or ""

    @namespace.setter
    def namespace(self, value: Optional[str]):
        if not value:
            metadata = self._metadata()
            if metadata is not None and "namespace" in metadata:
                del metadata["namespace"]
            return
        self._metadata(create=True)["namespace"] = value

    @property
    def labels(self) -> Dict[str, str]:
        metadata = self._metadata()
        return dict((metadata or {}).get("labels") or {})

    def set_label(self, key: str, value: str):
        metadata = self._metadata(create=True)
        if metadata.get("labels") is None:
            metadata["labels"] = CommentedMap()
        metadata["labels"][key] = value

    # --- RBAC ---

    @property
    def role_ref(self) -> Any:
        return self.obj.get("roleRef")

    @property
    def subjects(self) -> Any:
        return self.obj.get("subjects")

    # --- Pod template ---

    @property
    def pod_spec(self) -> Optional[CommentedMap]:
        """spec.template.spec for workload kinds, None if the path is absent."""
        spec = self.obj.get("spec")
        if not isinstance(spec, dict):
            return None
        template = spec.get("template")
        if not isinstance(template, dict):
            return None
        pod_spec = template.get("spec")
        return pod_spec if isinstance(pod_spec, dict) else None

    @property
    def containers(self) -> List[CommentedMap]:
        return list((self.pod_spec or {}).get("containers") or [])

    @property
    def init_containers(self) -> List[CommentedMap]:
        return list((self.pod_spec or {}).get("initContainers") or [])


class ProviderType(str, Enum):
    """Provider categories recognised by the inventory"""
    CORE = "CoreProvider"
    BOOTSTRAP = "BootstrapProvider"
    CONTROL_PLANE = "ControlPlaneProvider"
    INFRASTRUCTURE = "InfrastructureProvider"

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True)
class Provider:
    """Configuration-side identity of an installable provider."""
    name: str
    type: ProviderType
    url: str = ""

    @property
    def default_namespace(self) -> str:
        return f"{self.name}-system"


@dataclass(frozen=True)
class ProviderRecord:
    """
    Inventory entry for one installed provider instance.

    ``watched_namespace`` empty means the instance watches every namespace.
    ``resource_version`` is the optimistic-concurrency token owned by the store.
    Records are immutable; stores hand out new ones on every write.
    """
    name: str
    namespace: str
    type: ProviderType
    version: str = ""
    watched_namespace: str = ""
    resource_version: Optional[str] = None

    @property
    def key(self) -> Tuple[str, str]:
        return self.name, self.namespace

    def with_resource_version(self, resource_version: Optional[str]) -> "ProviderRecord":
        return replace(self, resource_version=resource_version)


@dataclass(frozen=True)
class ComponentSet:
    """
    The finished, install-ready output of the ComponentsBuilder.
    Built once per install/upgrade request and never mutated afterwards.
    """
    provider: Provider
    version: str
    target_namespace: str
    watching_namespace: str
    variables: Tuple[str, ...] = ()
    images: Tuple[str, ...] = ()
    documents: Tuple[StructuredDocument, ...] = field(default_factory=tuple)
    yaml: str = ""

    @property
    def name(self) -> str:
        return self.provider.name

    @property
    def type(self) -> ProviderType:
        return self.provider.type

    def to_record(self) -> ProviderRecord:
        return ProviderRecord(
            name=self.provider.name,
            namespace=self.target_namespace,
            type=self.provider.type,
            version=self.version,
            watched_namespace=self.watching_namespace,
        )
