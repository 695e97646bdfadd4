#!/usr/bin/env python3
"""
PROVIDERCTL ERRORS
------------------
Every failure the core can surface. None of these is retried; each message
is meant to be shown to the user as-is.

Author: ProviderCtl Team
Date: 2026-10-17
"""

from typing import Iterable, Optional


class ProviderctlError(Exception):
    """Base class for all providerctl failures."""


class ConfigurationError(ProviderctlError):
    """Invalid or unreadable configuration."""


class ManifestParseError(ProviderctlError):
    """A manifest document is not well-formed YAML or not a mapping."""

    def __init__(self, message: str, document_index: Optional[int] = None,
                 line: Optional[int] = None, column: Optional[int] = None):
        location = []
        if document_index is not None:
            location.append(f"document {document_index}")
        if line is not None:
            location.append(f"line {line}")
            if column is not None:
                location.append(f"column {column}")
        suffix = f" ({', '.join(location)})" if location else ""
        super().__init__(f"{message}{suffix}")
        self.document_index = document_index
        self.line = line
        self.column = column


class MissingVariablesError(ProviderctlError):
    def __init__(self, names: Iterable[str]):
        self.names = list(names)
        super().__init__(
            "value for variables [{}] is not set. Please set the value using os "
            "environment variables or the providerctl config file".format(", ".join(self.names))
        )


class AmbiguousNamespaceError(ProviderctlError):
    def __init__(self, names: Iterable[str]):
        self.names = list(names)
        super().__init__(
            "Invalid manifest. There should be no more than one resource with Kind "
            "Namespace in the provider components yaml, found: {}".format(", ".join(self.names))
        )


class InconsistentWatchScopeError(ProviderctlError):
    def __init__(self, values: Iterable[str]):
        self.values = list(values)
        super().__init__(
            "Invalid manifest. All the controllers should watch the same namespace, "
            "found: {}".format(", ".join(repr(v) for v in self.values))
        )


class MalformedDocumentError(ProviderctlError):
    """A document lacks a field the pipeline needs to rewrite it."""

    def __init__(self, kind: str, name: str, problem: str):
        self.kind = kind
        self.name = name
        super().__init__(f"Invalid {kind or 'object'} {name!r}: {problem}")


class DuplicateInstallError(ProviderctlError):
    def __init__(self, name: str, namespace: str):
        self.name = name
        self.namespace = namespace
        super().__init__(
            f"There is already an instance of the {name!r} provider installed in the {namespace!r} namespace"
        )


class ConflictingScopeError(ProviderctlError):
    def __init__(self, name: str, watched_namespace: str):
        self.name = name
        self.watched_namespace = watched_namespace
        if watched_namespace:
            message = (
                f"The new instance of the {name!r} provider is going to watch for objects in the namespace "
                f"{watched_namespace!r} that is already controlled by other providers"
            )
        else:
            message = (
                f"The new instance of the {name!r} provider is going to watch for objects in namespaces "
                "already controlled by other providers"
            )
        super().__init__(message)


class ManifestNotFoundError(ProviderctlError):
    """The requested manifest, version or flavor does not exist in the repository."""


class RecordNotFoundError(ProviderctlError):
    """No inventory record exists for the given (name, namespace)."""


class ConflictError(ProviderctlError):
    """The store rejected a write because the record changed since it was read."""


class ClusterAccessError(ProviderctlError):
    """The cluster API rejected or failed an inventory request."""


class OperationCancelledError(ProviderctlError):
    """The caller cancelled the operation or its deadline passed."""
