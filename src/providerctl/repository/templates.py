#!/usr/bin/env python3
"""
PROVIDERCTL TEMPLATES
---------------------
Workload-cluster templates shipped by infrastructure providers. A template
file is picked by naming convention:

    config-<bootstrap>.yaml             default flavor
    config-<flavor>-<bootstrap>.yaml    named flavor

Templates go into an existing namespace, so no Namespace object is
synthesized and RBAC is left alone; only variables and namespaces are fixed.

Author: ProviderCtl Team
Date: 2026-10-17
"""

import logging
from dataclasses import dataclass
from typing import Tuple

from providerctl.components.exporter import ManifestExporter
from providerctl.components.extractor import extract_documents
from providerctl.components.namespace import fix_target_namespace
from providerctl.components.variables import inspect_variables, replace_variables
from providerctl.core.config import VariableSource
from providerctl.core.errors import ConfigurationError
from providerctl.core.models import Provider, ProviderType, StructuredDocument
from providerctl.repository.repository import Repository

logger = logging.getLogger("providerctl.repository")


def template_file_name(flavor: str, bootstrap: str) -> str:
    if flavor:
        return f"config-{flavor}-{bootstrap}.yaml"
    return f"config-{bootstrap}.yaml"


@dataclass(frozen=True)
class Template:
    provider: Provider
    version: str
    flavor: str
    bootstrap: str
    target_namespace: str
    variables: Tuple[str, ...]
    documents: Tuple[StructuredDocument, ...]
    yaml: str

    @property
    def name(self) -> str:
        return self.provider.name

    @property
    def type(self) -> ProviderType:
        return self.provider.type


class TemplateClient:
    def __init__(self, provider: Provider, version: str, repository: Repository, variables: VariableSource):
        self.provider = provider
        self.version = version
        self.repository = repository
        self.variables = variables
        self.exporter = ManifestExporter()

    def get(self, flavor: str, bootstrap: str, target_namespace: str) -> Template:
        if not target_namespace:
            raise ConfigurationError("A target namespace is required for rendering a cluster template")

        version = self.repository.resolve_version(self.version)
        path = template_file_name(flavor, bootstrap)
        raw = self.repository.get_file(version, path)
        logger.info(f"Fetched template {path} from {self.provider.name} {version}")

        variables = inspect_variables(raw)
        rendered = replace_variables(raw, variables, self.variables)
        docs = fix_target_namespace(extract_documents(rendered), target_namespace)

        return Template(
            provider=self.provider,
            version=version,
            flavor=flavor,
            bootstrap=bootstrap,
            target_namespace=target_namespace,
            variables=tuple(variables),
            documents=tuple(docs),
            yaml=self.exporter.export(docs),
        )
