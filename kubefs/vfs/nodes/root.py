"""Root node of the projection tree."""

from typing import Any, Dict, List

from kubefs.vfs.base import DirectoryNode


class RootNode(DirectoryNode):
    """Root directory (/) of the tree.

    Contains one NamespaceNode per namespace in the snapshot.
    """

    def __init__(self, source_name: str = ""):
        super().__init__(name="", parent=None)  # Root has empty name
        self.source_name = source_name

    def namespaces(self) -> List[str]:
        return [child.name for child in self.list_children()]

    def get_info(self) -> Dict[str, Any]:
        return {
            "type": "directory",
            "name": "/",
            "namespaces": len(self.list_children()),
            "source": self.source_name,
            "path": "/",
        }

    def get_path(self) -> str:
        return "/"
