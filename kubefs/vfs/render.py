"""
Content rendering for file nodes.

Documents are serialized to YAML. Rendering depends only on the frozen
snapshot, so each node is rendered at most once and the bytes are kept
for the rest of the process.
"""

import logging
import threading
from typing import Dict

import yaml

from kubefs.errors import RenderError
from kubefs.vfs.base import FileNode, Node

logger = logging.getLogger(__name__)


class ContentRenderer:
    """Renders file nodes to YAML bytes, memoizing per node."""

    def __init__(self, memoize: bool = True):
        self.memoize = memoize
        self._cache: Dict[int, bytes] = {}
        self._lock = threading.Lock()

    def render(self, node: Node) -> bytes:
        """
        Serialize a file node's document.

        Args:
            node: ObjectFileNode or ManifestFileNode

        Returns:
            UTF-8 encoded YAML

        Raises:
            RenderError: If the node is not a file or its document cannot be serialized
        """
        if not isinstance(node, FileNode):
            raise RenderError(f"{node.get_path()} is not a file", path=node.get_path())

        document = node.get_document()
        if document is None:
            raise RenderError(f"{node.get_path()}: empty document", path=node.get_path())

        try:
            text = yaml.safe_dump(
                document,
                default_flow_style=False,
                allow_unicode=True,
                sort_keys=False,
            )
        except yaml.YAMLError as e:
            raise RenderError(f"{node.get_path()}: {e}", path=node.get_path()) from e

        return text.encode("utf-8")

    def content(self, node: Node) -> bytes:
        """
        Rendered bytes for a file node, computed once per node.

        A document that cannot be rendered yields an error-marker file
        instead of failing the request.
        """
        key = id(node)
        cached = self._cache.get(key)
        if cached is not None:
            return cached

        try:
            data = self.render(node)
        except RenderError as e:
            logger.warning(f"Render failed: {e}")
            data = error_marker(node, e)

        if not self.memoize:
            return data

        # Two readers may race here; the first stored value wins for both
        with self._lock:
            return self._cache.setdefault(key, data)

    def size(self, node: Node) -> int:
        return len(self.content(node))

    def clear(self) -> None:
        with self._lock:
            self._cache.clear()


def error_marker(node: Node, error: Exception) -> bytes:
    """Placeholder content for a file that failed to render."""
    reason = str(error).replace("\n", " ")
    return f"# kubefs: failed to render {node.get_path()}: {reason}\n".encode("utf-8")
