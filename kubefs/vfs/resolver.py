"""Path resolution for the projection tree.

Handles path parsing and lookups for command-line browsing.
"""

from pathlib import PurePosixPath
from typing import List, Optional

from kubefs.vfs.base import DirectoryNode, Node


class PathResolver:
    """Resolves paths in the tree.

    There is no working directory: relative paths start at the root.
    It handles:
    - Absolute paths: /default/configmaps/app.yaml
    - Relative paths: default/configmaps, ./kube-system
    - Special paths: ., ..
    """

    def __init__(self, root: DirectoryNode):
        """Initialize path resolver.

        Args:
            root: Root node of the tree
        """
        self.root = root

    def resolve(self, path: str) -> Optional[Node]:
        """Resolve a path to a node.

        Args:
            path: Path to resolve

        Returns:
            Resolved node or None if path doesn't exist
        """
        node: Node = self.root

        for part in self._parse_path(path or "/"):
            if part == "." or part == "":
                continue
            elif part == "..":
                # Stay at root if already at root
                if node.parent is not None:
                    node = node.parent
            else:
                if not isinstance(node, DirectoryNode):
                    return None

                child = node.get_child(part)
                if child is None:
                    return None
                node = child

        return node

    def resolve_directory(self, path: str) -> Optional[DirectoryNode]:
        """Resolve a path to a directory node.

        Returns:
            Directory node or None if path doesn't exist or isn't a directory
        """
        node = self.resolve(path)
        if node is None or not isinstance(node, DirectoryNode):
            return None
        return node

    def _parse_path(self, path: str) -> List[str]:
        posix_path = PurePosixPath(path)

        parts = posix_path.parts
        if parts and parts[0] == "/":
            parts = parts[1:]

        return list(parts)
