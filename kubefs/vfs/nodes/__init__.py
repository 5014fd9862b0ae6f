"""Projection tree node implementations."""

from kubefs.vfs.nodes.root import RootNode
from kubefs.vfs.nodes.namespace import NamespaceNode, KindNode
from kubefs.vfs.nodes.files import (
    ObjectFileNode,
    ManifestFileNode,
    OBJECT_SUFFIX,
    MANIFEST_NAME,
)

__all__ = [
    "RootNode",
    "NamespaceNode",
    "KindNode",
    "ObjectFileNode",
    "ManifestFileNode",
    "OBJECT_SUFFIX",
    "MANIFEST_NAME",
]
