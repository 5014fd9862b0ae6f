"""Data model for objects fetched from the cluster."""

from dataclasses import dataclass, field
from typing import Any, Dict, Optional


@dataclass(frozen=True)
class ResourceObject:
    """A single remote-managed object.

    Attributes:
        namespace: Owning namespace ("" for cluster-scoped objects)
        kind: Plural kind name, e.g. "configmaps"
        name: Object name, unique within namespace + kind
        document: Full object definition as returned by the API
    """
    namespace: str
    kind: str
    name: str
    document: Dict[str, Any] = field(default_factory=dict, compare=False, repr=False)

    @property
    def metadata(self) -> Dict[str, Any]:
        meta = self.document.get("metadata") if isinstance(self.document, dict) else None
        return meta if isinstance(meta, dict) else {}

    @property
    def uid(self) -> Optional[str]:
        return self.metadata.get("uid")

    @property
    def creation_timestamp(self) -> Optional[str]:
        return self.metadata.get("creationTimestamp")

    @classmethod
    def from_document(cls, namespace: str, kind: str, document: Dict[str, Any]) -> "ResourceObject":
        """Build from an API document, taking the name from ``metadata.name``.

        The name is empty when the document has none, or when metadata or
        the name are not of the expected type; callers decide what to do
        with such objects.
        """
        metadata = document.get("metadata") if isinstance(document, dict) else None
        if not isinstance(metadata, dict):
            metadata = {}
        name = metadata.get("name")
        if not isinstance(name, str):
            name = ""
        return cls(namespace=namespace, kind=kind, name=name, document=document)
