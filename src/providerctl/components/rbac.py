#!/usr/bin/env python3
"""
PROVIDERCTL RBAC REWRITER
-------------------------
Two installs of the same provider into different namespaces would otherwise
fight over identically named ClusterRoles and ClusterRoleBindings. This
module prefixes every cluster-scoped RBAC object with the target namespace
and rewires the references between them:

  * roleRef pointing at a ClusterRole defined in the same set -> prefixed name
  * roleRef pointing outside the set                           -> untouched
  * ServiceAccount subjects                                    -> target namespace

Namespaced RoleBindings keep their names; only their subjects are fixed.

Author: ProviderCtl Team
Date: 2026-10-17
"""

import logging
from typing import List, Set

from providerctl.core.errors import MalformedDocumentError
from providerctl.core.models import (
    CLUSTER_ROLE_BINDING_KIND,
    CLUSTER_ROLE_KIND,
    ROLE_BINDING_KIND,
    SERVICE_ACCOUNT_KIND,
    StructuredDocument,
)

logger = logging.getLogger("providerctl.components")

BINDING_KINDS = (CLUSTER_ROLE_BINDING_KIND, ROLE_BINDING_KIND)


def prefixed_name(target_namespace: str, name: str) -> str:
    return f"{target_namespace}-{name}"


def _cluster_role_names(docs: List[StructuredDocument]) -> Set[str]:
    return {doc.name for doc in docs if doc.kind == CLUSTER_ROLE_KIND}


def _fix_role_ref(doc: StructuredDocument, cluster_roles: Set[str], target_namespace: str):
    role_ref = doc.role_ref
    if not isinstance(role_ref, dict):
        raise MalformedDocumentError(doc.kind, doc.name, "roleRef is missing or not a mapping")
    ref_name = role_ref.get("name")
    if not ref_name:
        raise MalformedDocumentError(doc.kind, doc.name, "roleRef.name is missing")

    # A RoleBinding may point at a namespaced Role with the same name as one of our ClusterRoles
    ref_kind = role_ref.get("kind") or ""
    if ref_kind not in ("", CLUSTER_ROLE_KIND):
        return
    if ref_name in cluster_roles:
        role_ref["name"] = prefixed_name(target_namespace, ref_name)
    else:
        logger.debug(f"{doc.kind} {doc.name}: roleRef {ref_name!r} is not part of the components, left as is")


def _fix_subjects(doc: StructuredDocument, target_namespace: str):
    subjects = doc.subjects
    if subjects is None:
        return
    if not isinstance(subjects, list):
        raise MalformedDocumentError(doc.kind, doc.name, "subjects must be a list")
    for subject in subjects:
        if not isinstance(subject, dict):
            raise MalformedDocumentError(doc.kind, doc.name, "subject entries must be mappings")
        if subject.get("kind") == SERVICE_ACCOUNT_KIND:
            subject["namespace"] = target_namespace


def fix_rbac(docs: List[StructuredDocument], target_namespace: str) -> List[StructuredDocument]:
    cluster_roles = _cluster_role_names(docs)

    for doc in docs:
        if doc.kind == CLUSTER_ROLE_KIND:
            doc.name = prefixed_name(target_namespace, doc.name)
            continue

        if doc.kind not in BINDING_KINDS:
            continue

        _fix_role_ref(doc, cluster_roles, target_namespace)
        _fix_subjects(doc, target_namespace)

        if doc.kind == CLUSTER_ROLE_BINDING_KIND:
            doc.name = prefixed_name(target_namespace, doc.name)

    return docs
