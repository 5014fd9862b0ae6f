"""
Abstract interface to the remote cluster.

A ResourceSource is queried only while a snapshot is being built; the
projection never talks to it again once the tree exists.
"""

from abc import ABC, abstractmethod
from typing import List

from kubefs.cluster.models import ResourceObject


class ResourceSource(ABC):
    """
    Abstract base class for cluster resource sources.

    Implementations raise FetchError for transport, authorization and
    decoding failures.
    """

    @property
    @abstractmethod
    def name(self) -> str:
        """Short description used in log messages."""
        pass

    @abstractmethod
    def list_namespaces(self) -> List[str]:
        """
        List namespace names.

        Returns:
            Namespace names in the order the remote returned them

        Raises:
            FetchError: If the namespace list cannot be fetched
        """
        pass

    @abstractmethod
    def list_resources(self, namespace: str, kind: str) -> List[ResourceObject]:
        """
        List all objects of one kind in one namespace.

        Args:
            namespace: Namespace name
            kind: Plural kind name (e.g. "configmaps")

        Returns:
            Fetched objects

        Raises:
            FetchError: If the list cannot be fetched
        """
        pass

    def close(self) -> None:
        """Release any held connections."""
        pass

    def __enter__(self) -> "ResourceSource":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()
