"""
Tests for resource sources and kind handling.

The HTTP source is exercised against an in-process httpx.MockTransport
that plays the part of the API server.
"""

import httpx
import pytest

from kubefs.cluster import (
    HTTPResourceSource,
    ResourceObject,
    StaticResourceSource,
    validate_kinds,
)
from kubefs.cluster.kinds import get_kind, kind_for_object
from kubefs.errors import FetchError

from conftest import configmap


def _api_server(routes, seen=None):
    """Build a MockTransport answering GETs from a {path: (status, json)} table."""

    def handler(request: httpx.Request) -> httpx.Response:
        if seen is not None:
            seen.append(request)
        if request.url.path not in routes:
            return httpx.Response(404, json={"kind": "Status", "message": "not found"})
        status, body = routes[request.url.path]
        if isinstance(body, str):
            return httpx.Response(status, text=body)
        return httpx.Response(status, json=body)

    return httpx.MockTransport(handler)


def _source(routes, seen=None, token="secret-token"):
    return HTTPResourceSource(
        "https://cluster.example:6443/",
        token=token,
        transport=_api_server(routes, seen),
    )


NAMESPACES = {
    "kind": "NamespaceList",
    "items": [
        {"metadata": {"name": "kube-system"}},
        {"metadata": {"name": "default"}},
        {"metadata": {}},
    ],
}


class TestHTTPNamespaces:

    def test_list_namespaces(self):
        with _source({"/api/v1/namespaces": (200, NAMESPACES)}) as source:
            assert source.list_namespaces() == ["kube-system", "default"]

    def test_sends_bearer_token(self):
        seen = []
        with _source({"/api/v1/namespaces": (200, NAMESPACES)}, seen) as source:
            source.list_namespaces()

        assert seen[0].headers["Authorization"] == "Bearer secret-token"
        assert seen[0].headers["Accept"] == "application/json"

    def test_anonymous_has_no_authorization(self):
        seen = []
        with _source({"/api/v1/namespaces": (200, NAMESPACES)}, seen, token=None) as source:
            source.list_namespaces()

        assert "Authorization" not in seen[0].headers

    def test_unauthorized(self):
        """
        Given: The API server rejects the token
        When: Listing namespaces
        Then: FetchError carries the status code and the server's message
        """
        routes = {"/api/v1/namespaces": (401, {"kind": "Status", "message": "Unauthorized"})}

        with _source(routes) as source:
            with pytest.raises(FetchError) as exc_info:
                source.list_namespaces()

        assert exc_info.value.status_code == 401
        assert "Unauthorized" in str(exc_info.value)

    def test_non_json_body(self):
        with _source({"/api/v1/namespaces": (200, "<html>proxy error</html>")}) as source:
            with pytest.raises(FetchError, match="not JSON"):
                source.list_namespaces()

    def test_items_not_a_list(self):
        with _source({"/api/v1/namespaces": (200, {"items": "nope"})}) as source:
            with pytest.raises(FetchError):
                source.list_namespaces()

    def test_malformed_namespace_items_skipped(self):
        body = {"items": [{"metadata": "oops"}, {"metadata": {"name": 5}}, {"metadata": {"name": "default"}}]}

        with _source({"/api/v1/namespaces": (200, body)}) as source:
            assert source.list_namespaces() == ["default"]

    def test_missing_items_is_empty(self):
        with _source({"/api/v1/namespaces": (200, {"kind": "NamespaceList"})}) as source:
            assert source.list_namespaces() == []

    def test_connection_error(self):
        def handler(request):
            raise httpx.ConnectError("connection refused", request=request)

        source = HTTPResourceSource("https://cluster.example", transport=httpx.MockTransport(handler))

        with pytest.raises(FetchError, match="connection refused"):
            source.list_namespaces()


class TestHTTPResources:

    def test_core_kind_path(self):
        seen = []
        routes = {
            "/api/v1/namespaces/default/configmaps": (200, {
                "items": [{"metadata": {"name": "app-config", "namespace": "default"}, "data": {"k": "v"}}],
            }),
        }

        with _source(routes, seen) as source:
            objects = source.list_resources("default", "configmaps")

        assert seen[0].url.path == "/api/v1/namespaces/default/configmaps"
        assert objects == [ResourceObject("default", "configmaps", "app-config")]

    def test_items_get_api_version_and_kind(self):
        """
        Given: List responses whose items omit apiVersion and kind
        When: Fetching deployments
        Then: Each document is completed with apps/v1 Deployment
        """
        routes = {
            "/apis/apps/v1/namespaces/kube-system/deployments": (200, {
                "items": [{"metadata": {"name": "coredns"}, "spec": {"replicas": 2}}],
            }),
        }

        with _source(routes) as source:
            (obj,) = source.list_resources("kube-system", "deployments")

        assert obj.document["apiVersion"] == "apps/v1"
        assert obj.document["kind"] == "Deployment"
        assert list(obj.document)[:2] == ["apiVersion", "kind"]
        assert obj.document["spec"] == {"replicas": 2}

    def test_forbidden_kind(self):
        routes = {
            "/api/v1/namespaces/kube-system/secrets": (403, {"kind": "Status", "message": "secrets is forbidden"}),
        }

        with _source(routes) as source:
            with pytest.raises(FetchError) as exc_info:
                source.list_resources("kube-system", "secrets")

        assert exc_info.value.namespace == "kube-system"
        assert exc_info.value.kind == "secrets"
        assert exc_info.value.status_code == 403

    def test_unsupported_kind(self):
        with _source({}) as source:
            with pytest.raises(FetchError, match="unsupported"):
                source.list_resources("default", "widgets")


class TestStaticSource:

    def test_lists_given_objects(self):
        source = StaticResourceSource({"default": {"configmaps": [configmap("a", "default")]}})

        assert source.list_namespaces() == ["default"]
        assert [o.name for o in source.list_resources("default", "configmaps")] == ["a"]
        assert source.list_resources("default", "secrets") == []
        assert source.list_resources("missing", "configmaps") == []

    def test_failing_pairs(self):
        source = StaticResourceSource({"default": {}}, failing=[("default", "secrets")])

        with pytest.raises(FetchError):
            source.list_resources("default", "secrets")

    def test_from_file(self, dump_file):
        """
        Given: A dump with a List of namespaces, a configmap and a secret, plus
               a loose Deployment document and a cluster-scoped Node
        When: Loading it
        Then: Objects land in their namespaces and the Node is ignored
        """
        source = StaticResourceSource.from_file(dump_file)

        assert sorted(source.list_namespaces()) == ["default", "empty", "kube-system"]
        assert [o.name for o in source.list_resources("default", "configmaps")] == ["kube-root-ca.crt"]
        assert [o.name for o in source.list_resources("default", "secrets")] == ["db-password"]
        assert [o.name for o in source.list_resources("kube-system", "deployments")] == ["coredns"]
        assert source.list_resources("empty", "configmaps") == []
        assert source.name == str(dump_file)

    def test_from_missing_file(self, tmp_path):
        with pytest.raises(FetchError):
            StaticResourceSource.from_file(tmp_path / "missing.yaml")

    def test_from_invalid_yaml(self, tmp_path):
        path = tmp_path / "bad.yaml"
        path.write_text("items: [unclosed\n")

        with pytest.raises(FetchError):
            StaticResourceSource.from_file(path)

    def test_from_file_with_malformed_objects(self, tmp_path):
        """
        Given: A dump whose objects carry malformed metadata
        When: Loading it
        Then: Loading succeeds and objects without a usable namespace are ignored
        """
        path = tmp_path / "malformed.yaml"
        path.write_text(
            "kind: Namespace\nmetadata: oops\n"
            "---\nkind: Namespace\nmetadata: {name: 7}\n"
            "---\nkind: ConfigMap\nmetadata: oops\n"
            "---\nkind: ConfigMap\nmetadata: {namespace: [a]}\n"
            "---\nkind: ConfigMap\nmetadata: {name: 123, namespace: default}\n"
            "---\nkind: 42\nitems: 7\n"
            "---\nkind: ConfigMapList\nitems: 7\n"
        )

        source = StaticResourceSource.from_file(path)

        assert source.list_namespaces() == ["default"]
        assert [o.name for o in source.list_resources("default", "configmaps")] == [""]


class TestKinds:

    def test_validate_normalizes(self):
        assert validate_kinds(["Secrets", "configmaps", " secrets "]) == ["configmaps", "secrets"]

    def test_validate_rejects_unknown(self):
        with pytest.raises(ValueError, match="widgets"):
            validate_kinds(["configmaps", "widgets"])

    def test_validate_empty(self):
        assert validate_kinds([]) == []

    @pytest.mark.parametrize("plural,path", [
        ("configmaps", "/api/v1/namespaces/ns/configmaps"),
        ("deployments", "/apis/apps/v1/namespaces/ns/deployments"),
        ("cronjobs", "/apis/batch/v1/namespaces/ns/cronjobs"),
        ("ingresses", "/apis/networking.k8s.io/v1/namespaces/ns/ingresses"),
    ])
    def test_list_paths(self, plural, path):
        assert get_kind(plural).list_path("ns") == path

    def test_kind_for_object(self):
        assert kind_for_object("ConfigMap").plural == "configmaps"
        assert kind_for_object("Node") is None


class TestResourceObject:

    def test_from_document(self):
        obj = ResourceObject.from_document("default", "configmaps", configmap("a", "default", uid="u-1"))

        assert obj.name == "a"
        assert obj.uid == "u-1"
        assert obj.creation_timestamp == "2024-01-01T00:00:00Z"

    def test_missing_name(self):
        obj = ResourceObject.from_document("default", "configmaps", {"kind": "ConfigMap"})

        assert obj.name == ""
        assert obj.uid is None

    @pytest.mark.parametrize("document", [
        {"kind": "ConfigMap", "metadata": "oops"},
        {"kind": "ConfigMap", "metadata": ["name", "a"]},
        {"kind": "ConfigMap", "metadata": {"name": 123}},
        {"kind": "ConfigMap", "metadata": {"name": None}},
    ])
    def test_malformed_metadata_gives_empty_name(self, document):
        obj = ResourceObject.from_document("default", "configmaps", document)

        assert obj.name == ""
        assert obj.uid is None
