#!/usr/bin/env python3
"""
PROVIDERCTL COMPONENTS CLIENT
-----------------------------
Fetches a provider's components manifest from its repository and hands it
to the ComponentsBuilder.

Author: ProviderCtl Team
Date: 2026-10-17
"""

import logging

from providerctl.components.pipeline import ComponentsBuilder
from providerctl.core.config import VariableSource
from providerctl.core.models import ComponentSet, Provider
from providerctl.repository.repository import Repository

logger = logging.getLogger("providerctl.repository")

DEFAULT_COMPONENTS_FILE = "components.yaml"


class ComponentsClient:
    def __init__(self, provider: Provider, repository: Repository, variables: VariableSource,
                 components_file: str = DEFAULT_COMPONENTS_FILE):
        self.provider = provider
        self.repository = repository
        self.components_file = components_file
        self.builder = ComponentsBuilder(variables)

    def get(self, version: str = "", target_namespace: str = "", watching_namespace: str = "") -> ComponentSet:
        version = self.repository.resolve_version(version)
        raw = self.repository.get_file(version, self.components_file)
        logger.info(f"Fetched {self.provider.name} {version} components ({self.components_file})")
        return self.builder.build(self.provider, version, raw, target_namespace, watching_namespace)
