"""In-memory resource source.

Serves a fixed set of objects, either supplied directly or loaded from a
YAML dump such as the output of ``kubectl get configmaps -A -o yaml``.
Useful for browsing a saved cluster state offline.
"""

import logging
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional, Set, Tuple

import yaml

from kubefs.cluster.base import ResourceSource
from kubefs.cluster.kinds import kind_for_object
from kubefs.cluster.models import ResourceObject
from kubefs.errors import FetchError

logger = logging.getLogger(__name__)


class StaticResourceSource(ResourceSource):
    """Resource source over a fixed ``{namespace: {kind: [documents]}}`` mapping.

    Args:
        namespaces: Documents per kind per namespace
        failing: (namespace, kind) pairs whose fetch raises FetchError
        fail_namespaces: Make list_namespaces raise FetchError
    """

    def __init__(
        self,
        namespaces: Dict[str, Dict[str, List[Dict[str, Any]]]],
        failing: Optional[Iterable[Tuple[str, str]]] = None,
        fail_namespaces: bool = False,
        label: str = "static",
    ):
        self._namespaces = namespaces
        self._failing: Set[Tuple[str, str]] = set(failing or [])
        self._fail_namespaces = fail_namespaces
        self._label = label

    @property
    def name(self) -> str:
        return self._label

    def list_namespaces(self) -> List[str]:
        if self._fail_namespaces:
            raise FetchError("namespace listing unavailable")
        return list(self._namespaces)

    def list_resources(self, namespace: str, kind: str) -> List[ResourceObject]:
        if (namespace, kind) in self._failing:
            raise FetchError(f"{kind} in {namespace}: forbidden", namespace=namespace, kind=kind)
        documents = self._namespaces.get(namespace, {}).get(kind, [])
        return [ResourceObject.from_document(namespace, kind, doc) for doc in documents]

    @classmethod
    def from_file(cls, path: Path) -> "StaticResourceSource":
        """Load objects from a YAML dump.

        Accepts either a ``List`` object with ``items`` or a stream of
        documents separated by ``---``. Namespaces come from ``Namespace``
        objects and from every object's ``metadata.namespace``.

        Raises:
            FetchError: If the file cannot be read or parsed
        """
        path = Path(path)
        try:
            with open(path, "r") as f:
                documents = [d for d in yaml.safe_load_all(f) if d is not None]
        except (OSError, yaml.YAMLError) as e:
            raise FetchError(f"cannot load {path}: {e}") from e

        objects: List[Dict[str, Any]] = []
        for doc in documents:
            if not isinstance(doc, dict):
                continue
            doc_kind = doc.get("kind")
            items = doc.get("items")
            if isinstance(doc_kind, str) and doc_kind.endswith("List") and isinstance(items, list):
                objects.extend(item for item in items if isinstance(item, dict))
            else:
                objects.append(doc)

        namespaces: Dict[str, Dict[str, List[Dict[str, Any]]]] = {}
        for obj in objects:
            metadata = obj.get("metadata")
            if not isinstance(metadata, dict):
                metadata = {}
            if obj.get("kind") == "Namespace":
                if isinstance(metadata.get("name"), str) and metadata["name"]:
                    namespaces.setdefault(metadata["name"], {})
                continue

            resource_kind = kind_for_object(obj.get("kind") or "")
            namespace = metadata.get("namespace")
            if resource_kind is None or not isinstance(namespace, str) or not namespace:
                logger.debug(f"Ignoring {obj.get('kind')} {metadata.get('name')!r} from {path}")
                continue
            namespaces.setdefault(namespace, {}).setdefault(resource_kind.plural, []).append(obj)

        logger.info(f"Loaded {len(objects)} objects in {len(namespaces)} namespaces from {path}")
        return cls(namespaces, label=str(path))
