"""File nodes: per-object documents and the namespace manifest."""

from typing import Any, Dict, List, Optional

from kubefs.cluster.models import ResourceObject
from kubefs.vfs.base import DirectoryNode, FileNode

OBJECT_SUFFIX = ".yaml"
MANIFEST_NAME = "manifest.yaml"


class ObjectFileNode(FileNode):
    """/<namespace>/<kind>/<name>.yaml - one object's full definition."""

    def __init__(self, resource: ResourceObject, parent: Optional[DirectoryNode] = None):
        super().__init__(name=resource.name + OBJECT_SUFFIX, parent=parent)
        self.resource = resource

    def get_document(self) -> Any:
        return self.resource.document

    def get_info(self) -> Dict[str, Any]:
        info = super().get_info()
        info.update({
            "namespace": self.resource.namespace,
            "kind": self.resource.kind,
            "object": self.resource.name,
            "uid": self.resource.uid,
        })
        return info


class ManifestFileNode(FileNode):
    """/<namespace>/manifest.yaml - summary of everything in a namespace.

    Lists every object by kind together with its file path, plus the
    kinds that could not be fetched. It does not repeat the objects'
    full definitions.
    """

    def __init__(self, snapshot_time: str, parent: Optional[DirectoryNode] = None):
        super().__init__(name=MANIFEST_NAME, parent=parent)
        self.snapshot_time = snapshot_time

    def get_document(self) -> Dict[str, Any]:
        # Imported here to avoid a cycle with namespace.py
        from kubefs.vfs.nodes.namespace import KindNode

        namespace = self.parent
        resources: Dict[str, List[Dict[str, Any]]] = {}
        unavailable: List[str] = []

        if namespace is not None:
            for kind_node in namespace.list_children():
                if not isinstance(kind_node, KindNode):
                    continue
                if kind_node.fetch_error is not None:
                    unavailable.append(kind_node.kind)
                entries = []
                for child in kind_node.list_children():
                    if isinstance(child, ObjectFileNode):
                        entries.append(_manifest_entry(kind_node.kind, child))
                resources[kind_node.kind] = entries

        document: Dict[str, Any] = {
            "namespace": namespace.name if namespace is not None else "",
            "snapshotTime": self.snapshot_time,
            "resources": resources,
        }
        if unavailable:
            document["unavailable"] = unavailable
        return document


def _manifest_entry(kind: str, node: ObjectFileNode) -> Dict[str, Any]:
    entry: Dict[str, Any] = {
        "name": node.resource.name,
        "file": f"{kind}/{node.name}",
    }
    if node.resource.uid:
        entry["uid"] = node.resource.uid
    if node.resource.creation_timestamp:
        entry["creationTimestamp"] = node.resource.creation_timestamp
    return entry
