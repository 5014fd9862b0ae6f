"""
Tests for ContentRenderer.

Tests focus on:
- YAML content of object files and manifests
- Error markers for documents that cannot be rendered
- Memoization and concurrent access
"""

from concurrent.futures import ThreadPoolExecutor

import pytest
import yaml

from kubefs.cluster.models import ResourceObject
from kubefs.errors import RenderError
from kubefs.vfs import ROOT_INODE, ContentRenderer
from kubefs.vfs.nodes import ObjectFileNode

from conftest import configmap


def _node(tree, *names):
    inode = ROOT_INODE
    for name in names:
        inode = tree.resolve(inode, name)
    return tree.node_for(inode)


class TestObjectContent:

    def test_object_file_is_full_definition(self, tree, renderer):
        """
        Given: The kube-root-ca.crt configmap
        When: Rendering its file
        Then: The YAML parses back to the fetched document
        """
        node = _node(tree, "default", "configmaps", "kube-root-ca.crt.yaml")

        document = yaml.safe_load(renderer.render(node))

        assert document == node.resource.document
        assert document["data"]["ca.crt"] == "-----BEGIN CERTIFICATE-----"

    def test_key_order_preserved(self, renderer):
        doc = configmap("ordered", "default", {"z": "1", "a": "2"})
        node = ObjectFileNode(ResourceObject.from_document("default", "configmaps", doc))

        text = renderer.render(node).decode("utf-8")

        assert text.startswith("apiVersion:")
        assert text.index("\nkind:") < text.index("\nmetadata:") < text.index("\ndata:")
        assert text.index("\n  z:") < text.index("\n  a:")

    def test_unicode_kept_readable(self, renderer):
        doc = configmap("greeting", "default", {"message": "héllo"})
        node = ObjectFileNode(ResourceObject.from_document("default", "configmaps", doc))

        assert "héllo" in renderer.render(node).decode("utf-8")


class TestManifestContent:

    def test_manifest_lists_objects(self, tree, renderer):
        node = _node(tree, "default", "manifest.yaml")

        document = yaml.safe_load(renderer.render(node))

        assert document == {
            "namespace": "default",
            "snapshotTime": "2024-01-02T03:04:05Z",
            "resources": {
                "configmaps": [
                    {
                        "name": "kube-root-ca.crt",
                        "file": "configmaps/kube-root-ca.crt.yaml",
                        "uid": "0b1c2d3e",
                        "creationTimestamp": "2024-01-01T00:00:00Z",
                    },
                ],
            },
        }

    def test_manifest_reports_unavailable_kinds(self, tree, renderer):
        """
        Given: configmaps could not be fetched in kube-system
        When: Rendering kube-system/manifest.yaml
        Then: configmaps is listed as unavailable with no entries
        """
        node = _node(tree, "kube-system", "manifest.yaml")

        document = yaml.safe_load(renderer.render(node))

        assert document["resources"] == {"configmaps": []}
        assert document["unavailable"] == ["configmaps"]


class TestRenderErrors:

    def test_directory_cannot_be_rendered(self, tree, renderer):
        with pytest.raises(RenderError):
            renderer.render(_node(tree, "default"))

    def test_unserializable_document_raises(self, renderer):
        doc = configmap("weird", "default")
        doc["data"] = {"value": object()}
        node = ObjectFileNode(ResourceObject.from_document("default", "configmaps", doc))

        with pytest.raises(RenderError):
            renderer.render(node)

    def test_content_degrades_to_marker(self, renderer):
        """
        Given: An object whose document cannot be serialized
        When: Asking for its content
        Then: A one-line error marker is returned instead of raising
        """
        doc = configmap("weird", "default")
        doc["data"] = {"value": object()}
        node = ObjectFileNode(ResourceObject.from_document("default", "configmaps", doc))

        data = renderer.content(node)

        assert data.startswith(b"# kubefs: failed to render ")
        assert data.endswith(b"\n")
        assert data.count(b"\n") == 1
        assert renderer.size(node) == len(data)


class TestMemoization:

    def test_content_rendered_once(self, tree, monkeypatch):
        renderer = ContentRenderer()
        node = _node(tree, "default", "configmaps", "kube-root-ca.crt.yaml")
        calls = []
        original = renderer.render

        def counting_render(n):
            calls.append(n)
            return original(n)

        monkeypatch.setattr(renderer, "render", counting_render)

        first = renderer.content(node)
        second = renderer.content(node)

        assert first == second
        assert len(calls) == 1

    def test_without_memoization_renders_each_time(self, tree, monkeypatch):
        renderer = ContentRenderer(memoize=False)
        node = _node(tree, "default", "manifest.yaml")
        calls = []
        original = renderer.render
        monkeypatch.setattr(renderer, "render", lambda n: calls.append(n) or original(n))

        renderer.content(node)
        renderer.content(node)

        assert len(calls) == 2

    def test_clear_forgets_content(self, tree, renderer):
        node = _node(tree, "default", "manifest.yaml")
        first = renderer.content(node)

        renderer.clear()

        assert renderer.content(node) == first

    def test_concurrent_content_identical(self, tree, renderer):
        node = _node(tree, "default", "configmaps", "kube-root-ca.crt.yaml")

        with ThreadPoolExecutor(max_workers=8) as pool:
            results = list(pool.map(lambda _: renderer.content(node), range(100)))

        assert len(set(results)) == 1
        assert all(r is results[0] for r in results)
