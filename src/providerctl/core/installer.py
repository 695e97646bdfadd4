#!/usr/bin/env python3
"""
PROVIDERCTL INSTALLER - The Init Orchestrator
---------------------------------------------
Initializes a management cluster's provider inventory. For every requested
provider the Installer renders its components, checks the candidate against
the inventory (and against the other providers of the same run), and only
when every candidate passes records them all.

On an empty inventory (no core provider yet) the core provider, the kubeadm
bootstrap provider and the kubeadm control plane provider are added unless
the caller asked for specific ones. Applying the rendered manifests to the
cluster is left to the caller.

Author: ProviderCtl Team
Date: 2026-10-17
"""

import logging
from dataclasses import dataclass
from typing import Callable, List, Sequence, Tuple

from providerctl.core.config import VariableSource
from providerctl.core.context import OperationContext
from providerctl.core.errors import ConfigurationError
from providerctl.core.models import ComponentSet, Provider, ProviderRecord, ProviderType
from providerctl.inventory.client import InventoryClient
from providerctl.repository.components_client import ComponentsClient
from providerctl.repository.repository import Repository

logger = logging.getLogger("providerctl.installer")

DEFAULT_CORE_PROVIDER = "cluster-api"
DEFAULT_BOOTSTRAP_PROVIDER = "kubeadm-bootstrap"
DEFAULT_CONTROL_PLANE_PROVIDER = "kubeadm-control-plane"


def parse_provider_ref(ref: str) -> Tuple[str, str]:
    """'aws:v0.5.0' -> ('aws', 'v0.5.0'); an omitted version means the repository default."""
    name, _, version = ref.strip().partition(":")
    if not name:
        raise ConfigurationError(f"Invalid provider reference {ref!r}, expected name[:version]")
    return name, version


@dataclass
class InitOptions:
    core: str = ""
    bootstrap: Sequence[str] = ()
    control_plane: Sequence[str] = ()
    infrastructure: Sequence[str] = ()
    target_namespace: str = ""       # Empty: each provider uses its own default namespace
    watching_namespace: str = ""     # Empty: providers watch every namespace


@dataclass(frozen=True)
class InitResult:
    components: Tuple[ComponentSet, ...]
    records: Tuple[ProviderRecord, ...]
    first_execution: bool


class Installer:
    """
    Coordinates repositories, the ComponentsBuilder and the inventory for one init run.
    """

    def __init__(self, repository_for: Callable[[str], Repository], variables: VariableSource,
                 inventory: InventoryClient):
        self.repository_for = repository_for
        self.variables = variables
        self.inventory = inventory

    def plan(self, ctx: OperationContext, options: InitOptions) -> Tuple[List[Tuple[ProviderType, str]], bool]:
        """Provider references to install, in install order, and whether the inventory was empty."""
        first_execution = not self.inventory.list(ctx, type=ProviderType.CORE)

        requests: List[Tuple[ProviderType, str]] = []
        core = options.core or (DEFAULT_CORE_PROVIDER if first_execution else "")
        if core:
            requests.append((ProviderType.CORE, core))

        defaults = [
            (ProviderType.BOOTSTRAP, options.bootstrap, DEFAULT_BOOTSTRAP_PROVIDER),
            (ProviderType.CONTROL_PLANE, options.control_plane, DEFAULT_CONTROL_PLANE_PROVIDER),
        ]
        for provider_type, refs, default in defaults:
            refs = list(refs) or ([default] if first_execution else [])
            requests.extend((provider_type, ref) for ref in refs)

        requests.extend((ProviderType.INFRASTRUCTURE, ref) for ref in options.infrastructure)

        if not requests:
            raise ConfigurationError("Nothing to install: name at least one provider to add to the management cluster")
        return requests, first_execution

    def init(self, ctx: OperationContext, options: InitOptions) -> InitResult:
        requests, first_execution = self.plan(ctx, options)

        # --- PHASE 1: RENDER & VALIDATE ---
        # Nothing is recorded until every candidate passed validation.
        components: List[ComponentSet] = []
        candidates: List[ProviderRecord] = []
        for provider_type, ref in requests:
            name, version = parse_provider_ref(ref)
            provider = Provider(name=name, type=provider_type)

            built = ComponentsClient(provider, self.repository_for(name), self.variables).get(
                version, options.target_namespace, options.watching_namespace
            )
            record = InventoryClient.record_for(built)
            self.inventory.validate(ctx, record, pending=candidates)

            logger.debug(f"{name} {built.version} can be installed in {built.target_namespace!r}")
            components.append(built)
            candidates.append(record)

        # --- PHASE 2: RECORD ---
        records = []
        for record in candidates:
            records.append(self.inventory.create(ctx, record))
            logger.info(f"Recorded {record.name} {record.version} ({record.type}) in {record.namespace}")

        return InitResult(components=tuple(components), records=tuple(records), first_execution=first_execution)
