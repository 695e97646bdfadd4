#!/usr/bin/env python3
"""
PROVIDERCTL COMPONENTS PIPELINE - The Builder
---------------------------------------------
Central coordinator that turns a provider's raw components manifest into an
install-ready ComponentSet. Stages run in a strict order because each one
relies on the previous:

  1. inspect/replace  - placeholders are substituted on the text, not the tree
  2. extract          - only the substituted text has to be valid YAML
  3. watch scope      - the manifest must agree on a single watched namespace
  4. namespace        - resolve and apply the single target namespace
  5. rbac             - prefix cluster-scoped RBAC with the target namespace
  6. watch scope fix  - set or drop the controller's --namespace argument
  7. images           - recorded for the ComponentSet
  8. labels           - provenance labels on every object
  9. export           - serialized YAML

The first failing stage aborts the build; no partial ComponentSet is returned.

Author: ProviderCtl Team
Date: 2026-10-17
"""

import logging
from typing import List

from providerctl.components.exporter import ManifestExporter
from providerctl.components.extractor import extract_documents
from providerctl.components.images import inspect_images
from providerctl.components.labels import add_labels
from providerctl.components.namespace import add_namespace_if_missing, inspect_target_namespace
from providerctl.components.rbac import fix_rbac
from providerctl.components.variables import inspect_variables, replace_variables
from providerctl.components.watch import fix_watch_namespace, inspect_watch_namespace
from providerctl.core.config import VariableSource
from providerctl.core.models import ComponentSet, Provider, StructuredDocument

logger = logging.getLogger("providerctl.components")


class ComponentsBuilder:
    """
    The Orchestrator: runs every transformation stage over one manifest.
    """

    def __init__(self, variables: VariableSource):
        self.variables = variables
        self.exporter = ManifestExporter()

    def build(self, provider: Provider, version: str, raw_manifest: str,
              target_namespace: str = "", watching_namespace: str = "") -> ComponentSet:
        # --- PHASE 1: VARIABLES ---
        # Placeholders may sit inside flow collections, so parse only after substitution.
        variables = inspect_variables(raw_manifest)
        logger.debug(f"{provider.name} {version}: variables {variables}")
        manifest = replace_variables(raw_manifest, variables, self.variables)

        docs: List[StructuredDocument] = extract_documents(manifest)
        logger.debug(f"{provider.name} {version}: {len(docs)} documents extracted")

        # Controllers disagreeing on their scope is an authoring defect, not something to overwrite
        declared_scope = inspect_watch_namespace(docs)
        logger.debug(f"{provider.name} {version}: manifest watches {declared_scope or '<all>'!r}")

        # --- PHASE 2: NAMESPACE ---
        # An explicit target wins over the manifest's own Namespace object.
        if not target_namespace:
            target_namespace = inspect_target_namespace(docs) or provider.default_namespace
        else:
            inspect_target_namespace(docs)
        docs = add_namespace_if_missing(docs, target_namespace)
        logger.debug(f"{provider.name} {version}: target namespace {target_namespace!r}")

        # --- PHASE 3: RBAC ---
        docs = fix_rbac(docs, target_namespace)

        # --- PHASE 4: WATCH SCOPE ---
        docs = fix_watch_namespace(docs, watching_namespace)
        logger.debug(f"{provider.name} {version}: watching namespace {watching_namespace or '<all>'!r}")

        images = inspect_images(docs)

        # --- PHASE 5: PROVENANCE & EXPORT ---
        docs = add_labels(docs, provider.name)
        rendered = self.exporter.export(docs)

        return ComponentSet(
            provider=provider,
            version=version,
            target_namespace=target_namespace,
            watching_namespace=watching_namespace,
            variables=tuple(variables),
            images=tuple(images),
            documents=tuple(docs),
            yaml=rendered,
        )
