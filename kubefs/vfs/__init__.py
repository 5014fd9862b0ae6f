"""Projection of a cluster snapshot onto a directory tree.

Architecture:

    ```
    /                               # Root (RootNode)
    ├── default/                    # Namespace (NamespaceNode)
    │   ├── configmaps/             # Kind directory (KindNode)
    │   │   └── kube-root-ca.crt.yaml   # Object (ObjectFileNode)
    │   ├── secrets/
    │   └── manifest.yaml           # Namespace summary (ManifestFileNode)
    └── kube-system/
    ```

Components:

    - SnapshotBuilder: fetches from a ResourceSource once and builds the tree
    - ProjectionTree: the frozen tree plus its InodeTable
    - InodeTable: stable inode <-> node mapping, root is always inode 1
    - ContentRenderer: YAML rendering, memoized per node
    - PathResolver / ClusterVFS: path-based browsing for the CLI

Usage Example:

    ```python
    from kubefs.cluster import StaticResourceSource
    from kubefs.vfs import ClusterVFS

    source = StaticResourceSource({"default": {"configmaps": [cm]}})
    vfs = ClusterVFS.build(source, ["configmaps"])

    for child in vfs.ls("/default"):
        print(child.name, child.get_info())

    print(vfs.cat("/default/configmaps/app-config.yaml"))
    ```
"""

from kubefs.vfs.base import (
    Node,
    DirectoryNode,
    FileNode,
    NodeType,
)
from kubefs.vfs.inodes import InodeTable, ROOT_INODE
from kubefs.vfs.render import ContentRenderer
from kubefs.vfs.resolver import PathResolver
from kubefs.vfs.snapshot import BuildWarning, ProjectionTree, SnapshotBuilder
from kubefs.vfs.cluster_vfs import ClusterVFS

__all__ = [
    # Main entry point
    "ClusterVFS",
    # Core classes
    "Node",
    "DirectoryNode",
    "FileNode",
    "NodeType",
    # Snapshot
    "SnapshotBuilder",
    "ProjectionTree",
    "BuildWarning",
    "InodeTable",
    "ROOT_INODE",
    "ContentRenderer",
    # Path resolution
    "PathResolver",
]
