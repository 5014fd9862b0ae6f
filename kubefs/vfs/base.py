"""Base classes for the projection tree.

The tree maps a cluster snapshot to a filesystem-like structure that is
served through FUSE or browsed from the command line.

Architecture:
    - Node: Base class for all tree nodes
    - DirectoryNode: Nodes that own children (root, namespaces, kinds)
    - FileNode: Leaf nodes whose content is a rendered document

Children are owned by their parent directory; the ``parent`` attribute
is only used for lookups (``..`` and path building).
"""

from abc import ABC, abstractmethod
from enum import Enum
from typing import Any, Dict, List, Optional


class NodeType(Enum):
    """Type of tree node."""
    DIRECTORY = "directory"
    FILE = "file"


class Node(ABC):
    """Base class for all tree nodes.

    Attributes:
        name: The name of this node (e.g., "default", "configmaps", "app.yaml")
        parent: Parent directory node (None for root)
        node_type: Type of node (directory or file)
    """

    def __init__(
        self,
        name: str,
        parent: Optional['DirectoryNode'] = None,
        node_type: NodeType = NodeType.FILE,
    ):
        """Initialize a tree node.

        Args:
            name: Name of this node
            parent: Parent directory (None for root)
            node_type: Type of node
        """
        self.name = name
        self.parent = parent
        self.node_type = node_type

    @property
    def is_directory(self) -> bool:
        return self.node_type == NodeType.DIRECTORY

    @abstractmethod
    def get_info(self) -> Dict[str, Any]:
        """Get metadata about this node for display.

        Returns:
            Dict with keys like: type, name, path
        """
        pass

    def get_path(self) -> str:
        """Get absolute path to this node.

        Returns:
            Path like /default/configmaps/app.yaml
        """
        if self.parent is None:
            return "/"

        parts = []
        node = self
        while node.parent is not None:
            parts.append(node.name)
            node = node.parent

        return "/" + "/".join(reversed(parts))

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(name='{self.name}', path='{self.get_path()}')"


class DirectoryNode(Node):
    """A directory node that owns its children.

    Children are attached once while the snapshot is built and never
    change afterwards. Listing order is lexicographic by name so that
    every listing of the same directory is identical.
    """

    def __init__(self, name: str, parent: Optional['DirectoryNode'] = None):
        super().__init__(name, parent, NodeType.DIRECTORY)
        self._children: Dict[str, Node] = {}
        self._ordered: Optional[List[Node]] = None

    def add_child(self, child: Node) -> Node:
        """Attach a child node.

        Args:
            child: Node whose parent is this directory

        Returns:
            The attached node

        Raises:
            ValueError: If a sibling with the same name already exists
        """
        if child.name in self._children:
            raise ValueError(f"Duplicate entry '{child.name}' in {self.get_path()}")
        child.parent = self
        self._children[child.name] = child
        self._ordered = None
        return child

    def list_children(self) -> List[Node]:
        """List children sorted by name.

        Returns:
            List of child nodes
        """
        ordered = self._ordered
        if ordered is None:
            ordered = [self._children[name] for name in sorted(self._children)]
            self._ordered = ordered
        return list(ordered)

    def get_child(self, name: str) -> Optional[Node]:
        """Get a child node by name.

        Args:
            name: Name of child node

        Returns:
            Child node or None if not found
        """
        return self._children.get(name)

    def subdirectory_count(self) -> int:
        return sum(1 for child in self._children.values() if child.is_directory)

    def get_info(self) -> Dict[str, Any]:
        """Get directory metadata.

        Returns:
            Dict with directory information
        """
        return {
            "type": "directory",
            "name": self.name,
            "children_count": len(self._children),
            "path": self.get_path(),
        }


class FileNode(Node):
    """A file node whose content is a rendered document.

    File nodes do not serialize themselves; they hand a document to the
    ContentRenderer, which turns it into bytes.
    """

    def __init__(self, name: str, parent: Optional[DirectoryNode] = None):
        super().__init__(name, parent, NodeType.FILE)

    @abstractmethod
    def get_document(self) -> Any:
        """Return the data structure to be rendered as this file's content."""
        pass

    def get_info(self) -> Dict[str, Any]:
        """Get file metadata.

        Returns:
            Dict with file information
        """
        return {
            "type": "file",
            "name": self.name,
            "path": self.get_path(),
        }
