import pytest

from providerctl.components.namespace import (
    add_namespace_if_missing,
    fix_target_namespace,
    inspect_target_namespace,
)
from providerctl.core.errors import AmbiguousNamespaceError
from providerctl.core.models import StructuredDocument


def namespace(name):
    return StructuredDocument({"kind": "Namespace", "metadata": {"name": name}})


def test_inspect_single_namespace():
    assert inspect_target_namespace([namespace("foo")]) == "foo"


def test_inspect_no_namespace():
    assert inspect_target_namespace([]) == ""
    assert inspect_target_namespace([StructuredDocument({"kind": "Pod"})]) == ""


def test_inspect_two_namespaces_fails():
    with pytest.raises(AmbiguousNamespaceError) as excinfo:
        inspect_target_namespace([namespace("foo"), namespace("bar")])
    assert excinfo.value.names == ["foo", "bar"]


FIX_CASES = [
    (
        {"kind": "Namespace", "metadata": {"name": "foo"}},
        {"kind": "Namespace", "metadata": {"name": "bar"}},
    ),
    (
        {"kind": "Pod"},
        {"kind": "Pod", "metadata": {"namespace": "bar"}},
    ),
    (
        {"kind": "Service", "metadata": {"name": "svc", "namespace": "other"}},
        {"kind": "Service", "metadata": {"name": "svc", "namespace": "bar"}},
    ),
    (
        {"kind": "ClusterRole"},
        {"kind": "ClusterRole"},
    ),
    (
        {"kind": "CustomResourceDefinition", "metadata": {"name": "clusters.cluster.x-k8s.io"}},
        {"kind": "CustomResourceDefinition", "metadata": {"name": "clusters.cluster.x-k8s.io"}},
    ),
]


@pytest.mark.parametrize("original, expected", FIX_CASES)
def test_fix_target_namespace(original, expected):
    docs = fix_target_namespace([StructuredDocument(original)], "bar")
    assert docs[0].to_dict() == expected


@pytest.mark.parametrize("docs, target", [
    ([namespace("foo")], "foo"),
    ([namespace("foo")], "bar"),
    ([], "bar"),
    ([StructuredDocument({"kind": "Pod"})], "bar"),
])
def test_add_namespace_if_missing(docs, target):
    result = add_namespace_if_missing(docs, target)

    assert inspect_target_namespace(result) == target
    assert sum(1 for d in result if d.kind == "Namespace") == 1


def test_synthesized_namespace_is_prepended():
    result = add_namespace_if_missing([StructuredDocument({"kind": "Pod"})], "ns1")

    assert [d.kind for d in result] == ["Namespace", "Pod"]
    assert result[0].to_dict() == {"apiVersion": "v1", "kind": "Namespace", "metadata": {"name": "ns1"}}
    assert result[1].namespace == "ns1"
