#!/usr/bin/env python3
"""
PROVIDERCTL INVENTORY RESOLVER
------------------------------
Derives defaults from an inventory snapshot: when exactly one distinct value
exists (one infrastructure provider, one installed version, one namespace)
that value is the default. None means "no default", for both zero and
several candidates; use list() when the difference matters.

Author: ProviderCtl Team
Date: 2026-10-17
"""

from typing import Iterable, List, Optional

from providerctl.core.models import ProviderRecord, ProviderType


def _single(values: Iterable[str]) -> Optional[str]:
    distinct = set(values)
    if len(distinct) == 1:
        return distinct.pop()
    return None


class InventoryResolver:
    def __init__(self, records: Iterable[ProviderRecord]):
        self.records: List[ProviderRecord] = list(records)

    def list(self, name: Optional[str] = None, namespace: Optional[str] = None,
             type: Optional[ProviderType] = None) -> List[ProviderRecord]:
        return [
            record for record in self.records
            if (not name or record.name == name)
            and (not namespace or record.namespace == namespace)
            and (not type or record.type == type)
        ]

    def default_provider_name(self, type: ProviderType) -> Optional[str]:
        return _single(record.name for record in self.list(type=type))

    def default_provider_version(self, name: str) -> Optional[str]:
        return _single(record.version for record in self.list(name=name))

    def default_provider_namespace(self, name: str) -> Optional[str]:
        return _single(record.namespace for record in self.list(name=name))
