#!/usr/bin/env python3
"""
PROVIDERCTL IMAGE INSPECTOR
---------------------------
Lists every container image a component set will pull, e.g. for
pre-loading air-gapped registries.

Author: ProviderCtl Team
Date: 2026-10-17
"""

from typing import List

from providerctl.core.errors import MalformedDocumentError
from providerctl.core.models import DEPLOYMENT_KIND, StructuredDocument


def inspect_images(docs: List[StructuredDocument]) -> List[str]:
    """Containers before initContainers, in declaration order, per Deployment."""
    images = []
    for doc in docs:
        if doc.kind != DEPLOYMENT_KIND:
            continue
        for container in doc.containers + doc.init_containers:
            if not isinstance(container, dict):
                raise MalformedDocumentError(doc.kind, doc.name, "container entries must be mappings")
            image = container.get("image")
            if not image:
                raise MalformedDocumentError(doc.kind, doc.name, f"container {container.get('name')!r} has no image")
            images.append(image)
    return images
