"""Namespace and kind directory nodes."""

from typing import Any, Dict, List, Optional

from kubefs.vfs.base import DirectoryNode


class NamespaceNode(DirectoryNode):
    """/<namespace>/ - one directory per namespace.

    Children are one KindNode per allowed kind plus the namespace
    manifest file.
    """

    def __init__(self, namespace: str, parent: Optional[DirectoryNode] = None):
        super().__init__(name=namespace, parent=parent)

    @property
    def namespace(self) -> str:
        return self.name

    def kind_nodes(self) -> List['KindNode']:
        return [child for child in self.list_children() if isinstance(child, KindNode)]

    def get_info(self) -> Dict[str, Any]:
        kinds = self.kind_nodes()
        return {
            "type": "directory",
            "name": self.name,
            "kinds": [k.kind for k in kinds],
            "objects": sum(len(k.list_children()) for k in kinds),
            "unavailable": [k.kind for k in kinds if k.fetch_error is not None],
            "path": self.get_path(),
        }


class KindNode(DirectoryNode):
    """/<namespace>/<kind>/ - objects of one kind in one namespace.

    A kind whose fetch failed still gets a directory; it is simply empty
    and remembers why.
    """

    def __init__(
        self,
        kind: str,
        parent: Optional[DirectoryNode] = None,
        fetch_error: Optional[str] = None,
    ):
        super().__init__(name=kind, parent=parent)
        self.fetch_error = fetch_error

    @property
    def kind(self) -> str:
        return self.name

    def get_info(self) -> Dict[str, Any]:
        info = super().get_info()
        info["kind"] = self.kind
        if self.fetch_error is not None:
            info["error"] = self.fetch_error
        return info
