"""
kubefs - browse a Kubernetes cluster as a read-only filesystem.

Main API:
    from kubefs.cluster import HTTPResourceSource
    from kubefs.vfs import SnapshotBuilder
    from kubefs.fs import FilesystemAdapter

    # Take one snapshot of the cluster
    with HTTPResourceSource("https://127.0.0.1:6443", token=token) as source:
        tree = SnapshotBuilder(source).build(["configmaps", "secrets"])

    # Answer filesystem requests against it
    adapter = FilesystemAdapter(tree)
    inode, attrs = adapter.lookup(1, "default")
    entries = adapter.readdir(inode)

    # Or mount it
    from kubefs.fs.mount import mount_filesystem
    mount_filesystem(adapter, "/mnt/cluster")
"""

from .fs import FilesystemAdapter
from .vfs import ClusterVFS, ProjectionTree, SnapshotBuilder

__version__ = "0.1.0"
__all__ = ["ClusterVFS", "FilesystemAdapter", "ProjectionTree", "SnapshotBuilder"]
