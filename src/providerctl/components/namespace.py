#!/usr/bin/env python3
"""
PROVIDERCTL NAMESPACE FIXER
---------------------------
Makes a component set live in exactly one target namespace. Cluster-scoped
kinds are never given a namespace.

Author: ProviderCtl Team
Date: 2026-10-17
"""

from typing import List

from providerctl.core.errors import AmbiguousNamespaceError
from providerctl.core.models import NAMESPACE_KIND, StructuredDocument


def inspect_target_namespace(docs: List[StructuredDocument]) -> str:
    """Name of the single Namespace document, or "" when there is none."""
    names = [doc.name for doc in docs if doc.kind == NAMESPACE_KIND]
    if len(names) > 1:
        raise AmbiguousNamespaceError(names)
    return names[0] if names else ""


def fix_target_namespace(docs: List[StructuredDocument], target_namespace: str) -> List[StructuredDocument]:
    for doc in docs:
        if doc.kind == NAMESPACE_KIND:
            doc.name = target_namespace
            continue
        if doc.is_cluster_scoped:
            continue
        doc.namespace = target_namespace
    return docs


def add_namespace_if_missing(docs: List[StructuredDocument], target_namespace: str) -> List[StructuredDocument]:
    if any(doc.kind == NAMESPACE_KIND for doc in docs):
        return fix_target_namespace(docs, target_namespace)

    namespace = StructuredDocument({
        "apiVersion": "v1",
        "kind": NAMESPACE_KIND,
        "metadata": {"name": target_namespace},
    })
    return [namespace] + fix_target_namespace(docs, target_namespace)
