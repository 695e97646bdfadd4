#!/usr/bin/env python3
"""
PROVIDERCTL EXPORTER - High-Fidelity Round-Trip
-----------------------------------------------
Serializes finished documents back into one multi-document YAML stream.

Author: ProviderCtl Team
Date: 2026-10-17
"""

import io
from typing import Any, Iterable

from ruamel.yaml import YAML
from ruamel.yaml.comments import CommentedMap

from providerctl.core.models import StructuredDocument


class ManifestExporter:
    """
    Converts CommentedMaps back to YAML text, identity fields first.
    """

    def __init__(self):
        self.yaml = YAML(typ='rt')
        self.yaml.preserve_quotes = True
        # Standard K8s: 2 spaces, sequences indented 4 (offset 2)
        self.yaml.indent(mapping=2, sequence=4, offset=2)
        self.yaml.width = 4096
        self.preferred_order = ["apiVersion", "kind", "metadata", "spec", "data", "status"]

    def _ordered(self, data: CommentedMap) -> CommentedMap:
        """Top-level keys in preferred order; unknown keys keep their relative position."""
        keys = list(data.keys())

        def sort_logic(key):
            if key in self.preferred_order:
                return self.preferred_order.index(key)
            return len(self.preferred_order) + keys.index(key)

        ordered = CommentedMap()
        if data.ca.comment:
            ordered.ca.comment = data.ca.comment
        for key in sorted(keys, key=sort_logic):
            ordered[key] = data[key]
            if key in data.ca.items:
                ordered.ca.items[key] = data.ca.items[key]
        return ordered

    def dump_one(self, data: Any) -> str:
        stream = io.StringIO()
        self.yaml.dump(self._ordered(data) if isinstance(data, CommentedMap) else data, stream)
        return stream.getvalue()

    def export(self, docs: Iterable[StructuredDocument]) -> str:
        """All documents in order, with explicit separators between them."""
        stream = io.StringIO()
        for i, doc in enumerate(docs):
            if i > 0:
                stream.write("---\n")
            stream.write(self.dump_one(doc.obj))
        return stream.getvalue()
