"""
Snapshot building and the projection tree.

The SnapshotBuilder queries a ResourceSource exactly once per namespace
and kind, then assembles an immutable tree:

    /
    ├── default/
    │   ├── configmaps/
    │   │   └── kube-root-ca.crt.yaml
    │   └── manifest.yaml
    └── kube-system/
        ├── configmaps/
        └── manifest.yaml

Every node is numbered before the tree is returned, so serving requests
never needs to allocate.
"""

import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Iterable, List, Optional, Tuple

from kubefs.cluster.base import ResourceSource
from kubefs.errors import FetchError, NoSuchEntry, NotADirectory
from kubefs.vfs.base import DirectoryNode, Node, NodeType
from kubefs.vfs.inodes import InodeTable
from kubefs.vfs.nodes import (
    MANIFEST_NAME,
    KindNode,
    ManifestFileNode,
    NamespaceNode,
    ObjectFileNode,
    RootNode,
)

logger = logging.getLogger(__name__)


def _is_entry_name(name) -> bool:
    """True if ``name`` can be a single directory entry."""
    return isinstance(name, str) and name not in ("", ".", "..") and "/" not in name


@dataclass(frozen=True)
class BuildWarning:
    """A non-fatal problem found while building the snapshot."""
    namespace: str
    kind: Optional[str]
    message: str

    def __str__(self) -> str:
        where = "/".join(part for part in (self.namespace, self.kind) if part)
        return f"{where}: {self.message}" if where else self.message


class ProjectionTree:
    """
    The frozen directory tree for one snapshot, with its inode table.

    All lookups go through inode numbers; the tree is never modified once
    built, so concurrent callers need no locking.
    """

    def __init__(
        self,
        root: RootNode,
        inodes: InodeTable,
        created_at: datetime,
        kinds: List[str],
        warnings: Optional[List[BuildWarning]] = None,
    ):
        self.root = root
        self.inodes = inodes
        self.created_at = created_at
        self.kinds = list(kinds)
        self.warnings: List[BuildWarning] = list(warnings or [])

    @property
    def timestamp(self) -> float:
        """Snapshot time as seconds since the epoch."""
        return self.created_at.timestamp()

    def node_for(self, inode: int) -> Node:
        return self.inodes.node_for(inode)

    def inode_of(self, node: Node) -> int:
        return self.inodes.inode_of(node)

    def resolve(self, parent_inode: int, child_name: str) -> int:
        """
        Resolve one path segment below a directory.

        Args:
            parent_inode: Inode of the directory
            child_name: Name of the entry

        Returns:
            Inode of the child

        Raises:
            NotADirectory: If the parent is a file
            NoSuchEntry: If the directory has no such child
        """
        parent = self._directory(parent_inode)
        child = parent.get_child(child_name)
        if child is None:
            raise NoSuchEntry(f"{parent.get_path()}: no entry named {child_name!r}")
        return self.inodes.inode_of(child)

    def list_children(self, inode: int) -> List[Tuple[str, int, NodeType]]:
        """
        List a directory's children as (name, inode, type), sorted by name.

        Raises:
            NotADirectory: If the inode is a file
        """
        directory = self._directory(inode)
        return [
            (child.name, self.inodes.inode_of(child), child.node_type)
            for child in directory.list_children()
        ]

    def _directory(self, inode: int) -> DirectoryNode:
        node = self.inodes.node_for(inode)
        if not isinstance(node, DirectoryNode):
            raise NotADirectory(f"{node.get_path()} is not a directory")
        return node


class SnapshotBuilder:
    """Builds a ProjectionTree from a ResourceSource.

    Failure to list namespaces is fatal. Failure to list one kind in one
    namespace is not: that kind's directory is created empty and a
    BuildWarning is recorded.
    """

    def __init__(self, source: ResourceSource):
        self.source = source

    def build(self, allowed_kinds: Iterable[str], created_at: Optional[datetime] = None) -> ProjectionTree:
        """
        Fetch everything and build the tree.

        Args:
            allowed_kinds: Plural kind names to project into every namespace
            created_at: Snapshot time (defaults to now)

        Returns:
            Fully numbered ProjectionTree

        Raises:
            FetchError: If the namespace list cannot be fetched
        """
        created_at = created_at or datetime.now(timezone.utc)
        snapshot_time = created_at.strftime("%Y-%m-%dT%H:%M:%SZ")
        warnings: List[BuildWarning] = []

        kinds = []
        for kind in sorted(set(allowed_kinds), key=str):
            if not _is_entry_name(kind) or kind == MANIFEST_NAME:
                warnings.append(BuildWarning("", None, f"skipped invalid kind name {kind!r}"))
                logger.warning(f"Skipping invalid kind name {kind!r}")
                continue
            kinds.append(kind)

        logger.info(f"Building snapshot from {self.source.name} (kinds: {', '.join(kinds) or 'none'})")
        try:
            listed = set(self.source.list_namespaces())
        except FetchError as e:
            logger.error(f"Failed to list namespaces: {e}")
            raise

        namespaces = []
        for namespace in sorted(listed, key=str):
            if not _is_entry_name(namespace):
                warnings.append(BuildWarning("", None, f"skipped invalid namespace name {namespace!r}"))
                logger.warning(f"Skipping invalid namespace name {namespace!r}")
                continue
            namespaces.append(namespace)

        root = RootNode(self.source.name)
        for namespace in namespaces:
            ns_node = root.add_child(NamespaceNode(namespace))
            for kind in kinds:
                ns_node.add_child(self._build_kind(namespace, kind, warnings))
            ns_node.add_child(ManifestFileNode(snapshot_time))

        inodes = InodeTable(root)
        count = inodes.allocate_tree(root)

        logger.info(
            f"Snapshot built: {len(namespaces)} namespaces, {count} nodes, {len(warnings)} warnings"
        )
        return ProjectionTree(root, inodes, created_at, kinds, warnings)

    def _build_kind(self, namespace: str, kind: str, warnings: List[BuildWarning]) -> KindNode:
        try:
            resources = self.source.list_resources(namespace, kind)
        except FetchError as e:
            logger.warning(f"Failed to fetch {kind} in namespace {namespace}: {e}")
            warnings.append(BuildWarning(namespace, kind, str(e)))
            return KindNode(kind, fetch_error=str(e))

        kind_node = KindNode(kind)
        for resource in sorted(resources, key=lambda r: str(r.name)):
            if not isinstance(resource.name, str) or not resource.name or "/" in resource.name:
                warnings.append(BuildWarning(namespace, kind, f"skipped object with invalid name {resource.name!r}"))
                logger.warning(f"Skipping object with invalid name {resource.name!r} in {namespace}/{kind}")
                continue
            file_node = ObjectFileNode(resource)
            if kind_node.get_child(file_node.name) is not None:
                warnings.append(BuildWarning(namespace, kind, f"duplicate object {resource.name!r} ignored"))
                logger.warning(f"Duplicate object {resource.name!r} in {namespace}/{kind}")
                continue
            kind_node.add_child(file_node)
        logger.debug(f"{namespace}/{kind}: {len(kind_node.list_children())} objects")
        return kind_node
