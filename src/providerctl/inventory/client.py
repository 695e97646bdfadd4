#!/usr/bin/env python3
"""
PROVIDERCTL INVENTORY CLIENT
----------------------------
Reads and writes the provider inventory through an InventoryStore.
Every call fetches a fresh snapshot; nothing is cached between calls.

Author: ProviderCtl Team
Date: 2026-10-17
"""

import logging
from typing import Iterable, List, Optional

from providerctl.core.context import OperationContext
from providerctl.core.errors import RecordNotFoundError
from providerctl.core.models import ComponentSet, ProviderRecord, ProviderType
from providerctl.inventory import validator
from providerctl.inventory.resolver import InventoryResolver
from providerctl.inventory.store import InventoryStore

logger = logging.getLogger("providerctl.inventory")


class InventoryClient:
    def __init__(self, store: InventoryStore):
        self.store = store

    def resolver(self, ctx: OperationContext) -> InventoryResolver:
        return InventoryResolver(self.store.list(ctx))

    def list(self, ctx: OperationContext, name: Optional[str] = None, namespace: Optional[str] = None,
             type: Optional[ProviderType] = None) -> List[ProviderRecord]:
        return self.resolver(ctx).list(name=name, namespace=namespace, type=type)

    def validate(self, ctx: OperationContext, record: ProviderRecord, pending: Iterable[ProviderRecord] = ()):
        """Checks against a fresh snapshot plus records about to be created in the same run."""
        validator.validate(record, self.store.list(ctx) + list(pending))

    def create(self, ctx: OperationContext, record: ProviderRecord) -> ProviderRecord:
        """
        Create-or-update. An existing record is replaced in place carrying the
        resource version just read, so a concurrent writer surfaces as ConflictError.
        """
        try:
            current = self.store.get(ctx, record.name, record.namespace)
        except RecordNotFoundError:
            current = None

        if current is None:
            logger.info(f"Creating inventory record for {record.name} in {record.namespace}")
            return self.store.create(ctx, record)

        logger.info(f"Updating inventory record for {record.name} in {record.namespace}")
        return self.store.update(ctx, record.with_resource_version(current.resource_version))

    @staticmethod
    def record_for(components: ComponentSet) -> ProviderRecord:
        return components.to_record()
