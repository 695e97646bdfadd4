#!/usr/bin/env python3
"""
PROVIDERCTL REPOSITORY - Manifest Sources
-----------------------------------------
A provider repository holds one folder of manifests per released version:

    <root>/
      latest            # optional, contains the default version string
      v0.3.0/
        components.yaml
        config-kubeadm.yaml
        config-prod-kubeadm.yaml

Author: ProviderCtl Team
Date: 2026-10-17
"""

import logging
import re
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Dict, List, Optional, Tuple, Union

from providerctl.core.errors import ManifestNotFoundError

logger = logging.getLogger("providerctl.repository")

LATEST_MARKER = "latest"
VERSION_PATTERN = re.compile(r'^v?(\d+)\.(\d+)\.(\d+)(?:[-+].*)?$')


def version_key(version: str) -> Optional[Tuple[int, int, int, int]]:
    """Sort key for semantic versions; pre-releases sort before their release."""
    match = VERSION_PATTERN.match(version)
    if not match:
        return None
    major, minor, patch = (int(g) for g in match.groups())
    is_release = 0 if ('-' in version) else 1
    return major, minor, patch, is_release


class Repository(ABC):
    """Read access to a provider's versioned manifests."""

    @property
    @abstractmethod
    def default_version(self) -> str:
        raise NotImplementedError

    @abstractmethod
    def versions(self) -> List[str]:
        raise NotImplementedError

    @abstractmethod
    def get_file(self, version: str, path: str) -> str:
        raise NotImplementedError

    def resolve_version(self, version: str = "") -> str:
        if version:
            return version
        default = self.default_version
        if not default:
            raise ManifestNotFoundError("Unable to determine a default version: the repository has no releases")
        return default


class MemoryRepository(Repository):
    """In-memory repository; chainable builders keep test setup short."""

    def __init__(self):
        self.files: Dict[Tuple[str, str], str] = {}
        self._default_version = ""

    def with_default_version(self, version: str) -> "MemoryRepository":
        self._default_version = version
        return self

    def with_file(self, version: str, path: str, content: str) -> "MemoryRepository":
        self.files[(version, path)] = content
        return self

    @property
    def default_version(self) -> str:
        return self._default_version

    def versions(self) -> List[str]:
        return sorted({version for version, _ in self.files})

    def get_file(self, version: str, path: str) -> str:
        try:
            return self.files[(version, path)]
        except KeyError:
            raise ManifestNotFoundError(f"File {path!r} does not exist for version {version!r}") from None


class LocalRepository(Repository):
    def __init__(self, root: Union[str, Path]):
        self.root = Path(root).expanduser().resolve()
        if not self.root.is_dir():
            raise ManifestNotFoundError(f"Repository path {self.root} is not a directory")

    def versions(self) -> List[str]:
        return sorted(p.name for p in self.root.iterdir() if p.is_dir())

    @property
    def default_version(self) -> str:
        marker = self.root / LATEST_MARKER
        if marker.is_file():
            version = marker.read_text(encoding='utf-8').strip()
            if version:
                return version

        releases = [v for v in self.versions() if version_key(v) is not None]
        if not releases:
            return ""
        return max(releases, key=version_key)

    def get_file(self, version: str, path: str) -> str:
        target = (self.root / version / path).resolve()
        # Refuse paths that escape the repository root
        if self.root not in target.parents:
            raise ManifestNotFoundError(f"File {path!r} is outside of the repository")
        if not target.is_file():
            raise ManifestNotFoundError(f"File {path!r} does not exist for version {version!r} in {self.root}")
        logger.debug(f"Reading {target}")
        return target.read_text(encoding='utf-8-sig')
