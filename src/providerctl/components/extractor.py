#!/usr/bin/env python3
"""
PROVIDERCTL EXTRACTOR - Document Splitter
-----------------------------------------
Turns a raw multi-document YAML stream into StructuredDocuments using the
ruamel.yaml round-trip loader, so comments, quoting and key order of fields
we never touch survive until export.

Author: ProviderCtl Team
Date: 2026-10-17
"""

from typing import List

from ruamel.yaml import YAML, YAMLError

from providerctl.core.errors import ManifestParseError
from providerctl.core.models import StructuredDocument


def _round_trip_loader() -> YAML:
    yaml = YAML(typ='rt')
    yaml.preserve_quotes = True
    return yaml


def extract_documents(raw_text: str) -> List[StructuredDocument]:
    """
    Parses every document in the stream, in order.
    Empty documents are skipped; anything that is not a mapping is rejected.
    """
    yaml = _round_trip_loader()
    docs = []
    parsed = 0
    try:
        for data in yaml.load_all(raw_text):
            index = parsed
            parsed += 1
            if data is None:
                continue
            if not isinstance(data, dict):
                raise ManifestParseError(
                    f"Expected a mapping, got {type(data).__name__}", document_index=index
                )
            docs.append(StructuredDocument(data))
    except YAMLError as e:
        mark = getattr(e, 'problem_mark', None) or getattr(e, 'context_mark', None)
        if mark is not None:
            raise ManifestParseError(
                f"Failed to parse manifest: {getattr(e, 'problem', None) or e}",
                document_index=parsed, line=mark.line + 1, column=mark.column + 1,
            ) from e
        raise ManifestParseError(f"Failed to parse manifest: {e}", document_index=parsed) from e
    return docs
