#!/usr/bin/env python3
"""
PROVIDERCTL CONFIG - Variable Sources
-------------------------------------
Supplies values for the ${ NAME } placeholders found in provider manifests.
Values come from the process environment first, then from the providerctl
config file (a flat YAML mapping, by default ~/.cluster-api/clusterctl.yaml).

Author: ProviderCtl Team
Date: 2026-10-17
"""

import logging
import os
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Dict, Optional, Tuple, Union

from ruamel.yaml import YAML, YAMLError

from providerctl.core.errors import ConfigurationError

logger = logging.getLogger("providerctl.config")

DEFAULT_CONFIG_PATH = Path.home() / ".cluster-api" / "clusterctl.yaml"


class VariableSource(ABC):
    """
    Lookup capability used by the VariableResolver.
    get() returns (value, found) so that an empty string is a valid value.
    """

    @abstractmethod
    def get(self, name: str) -> Tuple[str, bool]:
        raise NotImplementedError


class MemoryVariables(VariableSource):
    def __init__(self, values: Optional[Dict[str, str]] = None):
        self.values: Dict[str, str] = dict(values or {})

    def with_var(self, name: str, value: str) -> "MemoryVariables":
        self.values[name] = value
        return self

    def get(self, name: str) -> Tuple[str, bool]:
        if name in self.values:
            return self.values[name], True
        return "", False


class EnvironmentVariables(VariableSource):
    def __init__(self, environ: Optional[Dict[str, str]] = None):
        self.environ = os.environ if environ is None else environ

    def get(self, name: str) -> Tuple[str, bool]:
        if name in self.environ:
            return self.environ[name], True
        return "", False


class FileVariables(VariableSource):
    """
    Reads a flat YAML mapping. A missing file is an empty source; a file that
    is not a mapping is a configuration error.
    """

    def __init__(self, path: Union[str, Path] = DEFAULT_CONFIG_PATH):
        self.path = Path(path).expanduser()
        self.values = self._load()

    def _load(self) -> Dict[str, str]:
        if not self.path.exists():
            logger.debug(f"Config file {self.path} not found, using no file variables")
            return {}

        yaml = YAML(typ='safe')
        try:
            data = yaml.load(self.path.read_text(encoding='utf-8'))
        except (OSError, YAMLError) as e:
            raise ConfigurationError(f"Failed to read config file {self.path}: {e}") from e

        if data is None:
            return {}
        if not isinstance(data, dict):
            raise ConfigurationError(f"Config file {self.path} must contain a mapping of variables")

        logger.debug(f"Loaded {len(data)} variables from {self.path}")
        # Nested values are kept out of substitution; only scalars become variables
        return {
            str(key): "" if value is None else str(value)
            for key, value in data.items()
            if not isinstance(value, (dict, list))
        }

    def get(self, name: str) -> Tuple[str, bool]:
        if name in self.values:
            return self.values[name], True
        return "", False


class ChainedVariables(VariableSource):
    """Asks each source in order; the first one that knows the name wins."""

    def __init__(self, *sources: VariableSource):
        self.sources = sources

    def get(self, name: str) -> Tuple[str, bool]:
        for source in self.sources:
            value, found = source.get(name)
            if found:
                return value, True
        return "", False


def default_variables(config_path: Optional[Union[str, Path]] = None) -> VariableSource:
    """Environment overrides the config file."""
    path = config_path if config_path is not None else DEFAULT_CONFIG_PATH
    return ChainedVariables(EnvironmentVariables(), FileVariables(path))
