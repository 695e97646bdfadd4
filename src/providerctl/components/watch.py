#!/usr/bin/env python3
"""
PROVIDERCTL WATCH SCOPE FIXER
-----------------------------
The namespace a provider's controller reconciles is passed as a
``--namespace=<value>`` argument on the ``manager`` container of its
Deployment. No argument means the controller watches every namespace.

Author: ProviderCtl Team
Date: 2026-10-17
"""

from typing import Iterator, List

from ruamel.yaml.comments import CommentedMap, CommentedSeq

from providerctl.core.errors import InconsistentWatchScopeError
from providerctl.core.models import DEPLOYMENT_KIND, StructuredDocument

CONTROLLER_CONTAINER_NAME = "manager"
NAMESPACE_ARG_PREFIX = "--namespace="


def _controller_containers(docs: List[StructuredDocument]) -> Iterator[CommentedMap]:
    for doc in docs:
        if doc.kind != DEPLOYMENT_KIND:
            continue
        for container in doc.containers:
            if isinstance(container, dict) and container.get("name") == CONTROLLER_CONTAINER_NAME:
                yield container


def inspect_watch_namespace(docs: List[StructuredDocument]) -> str:
    found = []
    for container in _controller_containers(docs):
        for arg in container.get("args") or []:
            if isinstance(arg, str) and arg.startswith(NAMESPACE_ARG_PREFIX):
                value = arg[len(NAMESPACE_ARG_PREFIX):]
                if value not in found:
                    found.append(value)

    if len(found) > 1:
        raise InconsistentWatchScopeError(found)
    return found[0] if found else ""


def fix_watch_namespace(docs: List[StructuredDocument], watching_namespace: str) -> List[StructuredDocument]:
    expected = f"{NAMESPACE_ARG_PREFIX}{watching_namespace}"

    for container in _controller_containers(docs):
        args = CommentedSeq()
        is_set = False
        for arg in container.get("args") or []:
            if isinstance(arg, str) and arg.startswith(NAMESPACE_ARG_PREFIX):
                # Drop the argument when watching everything, rewrite it otherwise
                if watching_namespace and not is_set:
                    args.append(expected)
                    is_set = True
                continue
            args.append(arg)

        if watching_namespace and not is_set:
            args.append(expected)

        if args:
            container["args"] = args
        elif "args" in container:
            del container["args"]

    return docs
