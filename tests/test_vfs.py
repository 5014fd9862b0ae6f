"""
Tests for ClusterVFS and node metadata.

ClusterVFS is the path-based view the CLI uses to browse a snapshot
without mounting it.
"""

import pytest
import yaml

from kubefs.vfs import ClusterVFS, DirectoryNode

from conftest import CountingSource, secret


@pytest.fixture
def vfs(tree):
    return ClusterVFS(tree)


class TestPaths:

    def test_relative_paths_start_at_root(self, vfs):
        assert [n.name for n in vfs.ls("default/configmaps")] == ["kube-root-ca.crt.yaml"]
        assert vfs.get_node("default") is vfs.get_node("/default")

    def test_ls_defaults_to_root(self, vfs):
        assert vfs.ls() == vfs.ls("/")

    def test_parent_of_root_is_root(self, vfs):
        assert vfs.get_node("/../..") is vfs.root


class TestListingAndReading:

    def test_ls_root(self, vfs):
        assert [n.name for n in vfs.ls("/")] == ["default", "kube-system"]

    def test_ls_file_or_missing_is_empty(self, vfs):
        assert vfs.ls("/default/manifest.yaml") == []
        assert vfs.ls("/nope") == []

    def test_cat_object(self, vfs):
        document = yaml.safe_load(vfs.cat("/default/configmaps/kube-root-ca.crt.yaml"))

        assert document["kind"] == "ConfigMap"

    def test_cat_errors(self, vfs):
        assert vfs.cat("/nope") == "cat: /nope: No such file or directory"
        assert vfs.cat("/default") == "cat: /default: Is a directory"

    def test_size_of(self, vfs):
        node = vfs.get_node("/default/manifest.yaml")

        assert vfs.size_of(node) == len(vfs.cat("/default/manifest.yaml").encode("utf-8"))
        assert vfs.size_of(vfs.get_node("/default")) == 0

    def test_inode_of_root(self, vfs):
        assert vfs.inode_of(vfs.root) == 1

    def test_walk_preorder(self, vfs):
        """
        Given: The sample snapshot
        When: Walking from /default
        Then: Nodes come back in listing order with their depth
        """
        walked = [(depth, node.get_path()) for depth, node in vfs.walk("/default")]

        assert walked == [
            (0, "/default"),
            (1, "/default/configmaps"),
            (2, "/default/configmaps/kube-root-ca.crt.yaml"),
            (1, "/default/manifest.yaml"),
        ]

    def test_walk_missing(self, vfs):
        assert list(vfs.walk("/nope")) == []

    def test_build_from_source(self):
        source = CountingSource({"apps": {"secrets": [secret("token", "apps")]}})

        vfs = ClusterVFS.build(source, ["secrets"])

        assert [n.name for n in vfs.ls("/apps/secrets")] == ["token.yaml"]


class TestNodeInfo:

    def test_root_info(self, vfs):
        info = vfs.root.get_info()

        assert info["namespaces"] == 2
        assert info["path"] == "/"
        assert vfs.root.namespaces() == ["default", "kube-system"]

    def test_namespace_info(self, vfs):
        info = vfs.get_node("/kube-system").get_info()

        assert info["kinds"] == ["configmaps"]
        assert info["objects"] == 0
        assert info["unavailable"] == ["configmaps"]

    def test_kind_info_records_error(self, vfs):
        info = vfs.get_node("/kube-system/configmaps").get_info()

        assert info["kind"] == "configmaps"
        assert "error" in info
        assert "error" not in vfs.get_node("/default/configmaps").get_info()

    def test_object_info(self, vfs):
        info = vfs.get_node("/default/configmaps/kube-root-ca.crt.yaml").get_info()

        assert info["type"] == "file"
        assert info["namespace"] == "default"
        assert info["object"] == "kube-root-ca.crt"
        assert info["uid"] == "0b1c2d3e"


class TestDirectoryNode:

    def test_duplicate_child_rejected(self):
        parent = DirectoryNode("parent")
        parent.add_child(DirectoryNode("a"))

        with pytest.raises(ValueError):
            parent.add_child(DirectoryNode("a"))

    def test_children_sorted_after_late_add(self):
        parent = DirectoryNode("parent")
        parent.add_child(DirectoryNode("b"))
        parent.list_children()
        parent.add_child(DirectoryNode("a"))

        assert [c.name for c in parent.list_children()] == ["a", "b"]
        assert parent.subdirectory_count() == 2
