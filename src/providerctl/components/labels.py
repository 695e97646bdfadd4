#!/usr/bin/env python3
"""
PROVIDERCTL LABELER
-------------------
Stamps provenance labels on every object so installed components can be
found (and later deleted) by provider.

Author: ProviderCtl Team
Date: 2026-10-17
"""

from typing import List

from providerctl.core.models import StructuredDocument

# Presence-only marker: the value is always empty
CLUSTERCTL_LABEL = "clusterctl.cluster.x-k8s.io"
PROVIDER_LABEL = "cluster.x-k8s.io/provider"


def add_labels(docs: List[StructuredDocument], provider_name: str) -> List[StructuredDocument]:
    for doc in docs:
        doc.set_label(CLUSTERCTL_LABEL, "")
        doc.set_label(PROVIDER_LABEL, provider_name)
    return docs
