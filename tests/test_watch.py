import pytest

from providerctl.components.watch import (
    CONTROLLER_CONTAINER_NAME,
    NAMESPACE_ARG_PREFIX,
    fix_watch_namespace,
    inspect_watch_namespace,
)
from providerctl.core.errors import InconsistentWatchScopeError
from providerctl.core.models import StructuredDocument


def fake_deployment(watch_namespace, extra_args=None):
    args = list(extra_args or [])
    if watch_namespace:
        args.append(f"{NAMESPACE_ARG_PREFIX}{watch_namespace}")
    container = {"name": CONTROLLER_CONTAINER_NAME, "image": "manager:dev"}
    if args:
        container["args"] = args
    return StructuredDocument({
        "apiVersion": "apps/v1",
        "kind": "Deployment",
        "spec": {"template": {"spec": {"containers": [container]}}},
    })


@pytest.mark.parametrize("docs, expected", [
    ([fake_deployment("foo")], "foo"),
    ([fake_deployment("foo"), fake_deployment("foo")], "foo"),
    ([fake_deployment("")], ""),
    ([], ""),
])
def test_inspect_watch_namespace(docs, expected):
    assert inspect_watch_namespace(docs) == expected


def test_inconsistent_watch_namespace():
    with pytest.raises(InconsistentWatchScopeError) as excinfo:
        inspect_watch_namespace([fake_deployment("foo"), fake_deployment("bar")])
    assert excinfo.value.values == ["foo", "bar"]


def test_other_containers_are_ignored():
    doc = fake_deployment("foo")
    doc.obj["spec"]["template"]["spec"]["containers"].append(
        StructuredDocument({"name": "kube-rbac-proxy", "args": ["--namespace=other"]}).obj
    )
    assert inspect_watch_namespace([doc]) == "foo"


@pytest.mark.parametrize("initial", ["", "foo"])
@pytest.mark.parametrize("value", ["", "foo", "bar"])
def test_fix_then_inspect_round_trips(initial, value):
    docs = fix_watch_namespace([fake_deployment(initial), fake_deployment(initial)], value)
    assert inspect_watch_namespace(docs) == value


def test_fix_keeps_other_args_in_place():
    docs = fix_watch_namespace([fake_deployment("foo", extra_args=["--metrics-addr=:8080"])], "bar")
    container = docs[0].containers[0]
    assert list(container["args"]) == ["--metrics-addr=:8080", "--namespace=bar"]


def test_unset_removes_empty_args():
    docs = fix_watch_namespace([fake_deployment("foo")], "")
    assert "args" not in docs[0].containers[0]


def test_fix_is_idempotent():
    docs = fix_watch_namespace([fake_deployment("")], "bar")
    once = [d.deep_copy() for d in docs]
    assert fix_watch_namespace(docs, "bar") == once
