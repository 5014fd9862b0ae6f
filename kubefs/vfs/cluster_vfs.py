"""Main ClusterVFS class - entry point for browsing a snapshot."""

from typing import Iterator, List, Optional, Tuple

from kubefs.cluster.base import ResourceSource
from kubefs.vfs.base import DirectoryNode, FileNode, Node
from kubefs.vfs.render import ContentRenderer
from kubefs.vfs.resolver import PathResolver
from kubefs.vfs.snapshot import ProjectionTree, SnapshotBuilder


class ClusterVFS:
    """Virtual file system over one cluster snapshot.

    This is the main entry point for reading the tree without mounting it.
    It owns the tree, the renderer and a resolver for path lookups.
    Relative paths are taken from the root.

    Usage:
        >>> with StaticResourceSource.from_file("dump.yaml") as source:
        ...     vfs = ClusterVFS.build(source, ["configmaps"])
        >>> vfs.ls("/default/configmaps")
        >>> print(vfs.cat("/default/configmaps/kube-root-ca.crt.yaml"))
    """

    def __init__(self, tree: ProjectionTree, renderer: Optional[ContentRenderer] = None):
        """Initialize VFS for a built snapshot.

        Args:
            tree: Built projection tree
            renderer: Content renderer (a memoizing one is created if omitted)
        """
        self.tree = tree
        self.renderer = renderer or ContentRenderer()
        self.root = tree.root
        self.resolver = PathResolver(self.root)

    @classmethod
    def build(cls, source: ResourceSource, kinds: List[str]) -> "ClusterVFS":
        """Take a snapshot from a source and wrap it."""
        return cls(SnapshotBuilder(source).build(kinds))

    def ls(self, path: str = "/") -> List[Node]:
        """List children of a directory.

        Args:
            path: Path to list (default: root)

        Returns:
            List of nodes, empty if the path is missing or a file
        """
        directory = self.resolver.resolve_directory(path)
        if directory is None:
            return []

        return directory.list_children()

    def cat(self, path: str) -> str:
        """Read content of a file node.

        Args:
            path: Path to file

        Returns:
            File content or error message
        """
        node = self.resolver.resolve(path)
        if node is None:
            return f"cat: {path}: No such file or directory"

        if not isinstance(node, FileNode):
            return f"cat: {path}: Is a directory"

        return self.renderer.content(node).decode("utf-8")

    def get_node(self, path: str) -> Optional[Node]:
        return self.resolver.resolve(path)

    def inode_of(self, node: Node) -> int:
        return self.tree.inode_of(node)

    def size_of(self, node: Node) -> int:
        if isinstance(node, FileNode):
            return self.renderer.size(node)
        return 0

    def walk(self, path: str = "/") -> Iterator[Tuple[int, Node]]:
        """Yield (depth, node) for a subtree in listing order."""
        start = self.resolver.resolve(path)
        if start is None:
            return

        stack = [(0, start)]
        while stack:
            depth, node = stack.pop()
            yield depth, node
            if isinstance(node, DirectoryNode):
                stack.extend((depth + 1, child) for child in reversed(node.list_children()))
