import pytest

from providerctl.core.config import MemoryVariables
from providerctl.core.errors import ConfigurationError, ManifestNotFoundError, MissingVariablesError
from providerctl.core.models import Provider, ProviderType
from providerctl.repository.repository import LocalRepository, MemoryRepository, Repository, version_key
from providerctl.repository.templates import TemplateClient, template_file_name

TEMPLATE = """\
apiVersion: v1
data:
  variable: ${ VARIABLE }
kind: ConfigMap
metadata:
  name: manifest
"""

PROVIDER = Provider("infra", ProviderType.INFRASTRUCTURE)


@pytest.mark.parametrize("flavor, bootstrap, expected", [
    ("", "kubeadm", "config-kubeadm.yaml"),
    ("prod", "kubeadm", "config-prod-kubeadm.yaml"),
])
def test_template_file_name(flavor, bootstrap, expected):
    assert template_file_name(flavor, bootstrap) == expected


@pytest.fixture
def repository():
    return (
        MemoryRepository()
        .with_default_version("v1.0.0")
        .with_file("v1.0.0", "config-kubeadm.yaml", TEMPLATE)
        .with_file("v1.0.0", "config-prod-kubeadm.yaml", TEMPLATE.replace("manifest", "prod-manifest"))
    )


@pytest.mark.parametrize("flavor, expected_name", [
    ("", "manifest"),
    ("prod", "prod-manifest"),
])
def test_get_template(repository, flavor, expected_name):
    client = TemplateClient(PROVIDER, "", repository, MemoryVariables({"VARIABLE": "value"}))

    template = client.get(flavor, "kubeadm", "ns1")

    assert template.version == "v1.0.0"
    assert template.variables == ("VARIABLE",)
    assert [d.to_dict() for d in template.documents] == [{
        "apiVersion": "v1",
        "data": {"variable": "value"},
        "kind": "ConfigMap",
        "metadata": {"name": expected_name, "namespace": "ns1"},
    }]
    # Templates never get a synthesized Namespace
    assert "kind: Namespace" not in template.yaml


def test_missing_flavor(repository):
    client = TemplateClient(PROVIDER, "v1.0.0", repository, MemoryVariables({"VARIABLE": "value"}))
    with pytest.raises(ManifestNotFoundError):
        client.get("dev", "kubeadm", "ns1")


def test_missing_variable(repository):
    client = TemplateClient(PROVIDER, "v1.0.0", repository, MemoryVariables())
    with pytest.raises(MissingVariablesError):
        client.get("", "kubeadm", "ns1")


def test_target_namespace_is_required(repository):
    client = TemplateClient(PROVIDER, "v1.0.0", repository, MemoryVariables({"VARIABLE": "value"}))
    with pytest.raises(ConfigurationError):
        client.get("", "kubeadm", "")


# --- Local repository ---

def make_local_repository(root, versions, latest=None):
    for version in versions:
        (root / version).mkdir()
        (root / version / "components.yaml").write_text(f"# {version}\n", encoding="utf-8")
    if latest is not None:
        (root / "latest").write_text(latest + "\n", encoding="utf-8")
    return LocalRepository(root)


def test_version_key_orders_semver():
    assert version_key("v0.10.0") > version_key("v0.2.0")
    assert version_key("v1.0.0") > version_key("v1.0.0-rc.1")
    assert version_key("main") is None


def test_local_default_version_is_highest_release(tmp_path):
    repository = make_local_repository(tmp_path, ["v0.2.0", "v0.10.0", "dev"])

    assert repository.default_version == "v0.10.0"
    assert repository.get_file(repository.resolve_version(), "components.yaml") == "# v0.10.0\n"


def test_local_latest_marker_wins(tmp_path):
    repository = make_local_repository(tmp_path, ["v0.2.0", "v0.10.0"], latest="v0.2.0")
    assert repository.resolve_version() == "v0.2.0"


def test_local_repository_without_releases(tmp_path):
    repository = make_local_repository(tmp_path, [])
    with pytest.raises(ManifestNotFoundError):
        repository.resolve_version()


def test_local_repository_refuses_escapes(tmp_path):
    (tmp_path / "secret.yaml").write_text("kind: Secret\n", encoding="utf-8")
    repo_root = tmp_path / "repo"
    repo_root.mkdir()
    repository = make_local_repository(repo_root, ["v0.1.0"])

    with pytest.raises(ManifestNotFoundError):
        repository.get_file("v0.1.0", "../../secret.yaml")


def test_local_repository_missing_root(tmp_path):
    with pytest.raises(ManifestNotFoundError):
        LocalRepository(tmp_path / "nope")


def test_placeholder_inside_flow_collection():
    repository = MemoryRepository().with_file("v1.0.0", "config-kubeadm.yaml", (
        "apiVersion: v1\nkind: ConfigMap\nmetadata: {name: manifest}\ndata: {variable: ${ VARIABLE }}\n"
    ))
    client = TemplateClient(PROVIDER, "v1.0.0", repository, MemoryVariables({"VARIABLE": "value"}))

    template = client.get("", "kubeadm", "ns1")

    assert template.documents[0].obj["data"]["variable"] == "value"
    assert template.documents[0].namespace == "ns1"


def test_repository_contract_is_enforced():
    class VersionsOnly(Repository):
        def versions(self):
            return []

    with pytest.raises(TypeError):
        VersionsOnly()
