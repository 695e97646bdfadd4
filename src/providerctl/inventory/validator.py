#!/usr/bin/env python3
"""
PROVIDERCTL INVENTORY VALIDATOR - The Gatekeeper
------------------------------------------------
Decides whether a new provider instance can be installed next to the ones
already in the cluster. Two instances of the same provider are allowed only
when they live in different namespaces AND watch disjoint, non-global
namespaces; otherwise both controllers would reconcile the same objects.

Author: ProviderCtl Team
Date: 2026-10-17
"""

from typing import Iterable, Optional

from providerctl.core.errors import ConflictingScopeError, DuplicateInstallError
from providerctl.core.models import ProviderRecord


def scopes_overlap(a: Optional[str], b: Optional[str]) -> bool:
    """
    True when two watch scopes can see the same objects.
    None or "" is the global scope, which overlaps everything.
    """
    if not a or not b:
        return True
    return a == b


def validate(candidate: ProviderRecord, existing: Iterable[ProviderRecord]):
    """Raises DuplicateInstallError or ConflictingScopeError; returns None when installable."""
    instances = [record for record in existing if record.name == candidate.name]
    if not instances:
        return

    for instance in instances:
        if instance.namespace == candidate.namespace:
            raise DuplicateInstallError(candidate.name, candidate.namespace)

    if not candidate.watched_namespace:
        raise ConflictingScopeError(candidate.name, candidate.watched_namespace)

    for instance in instances:
        if scopes_overlap(instance.watched_namespace, candidate.watched_namespace):
            raise ConflictingScopeError(candidate.name, candidate.watched_namespace)
