"""Remote cluster access: the sources a snapshot is built from."""

from kubefs.cluster.base import ResourceSource
from kubefs.cluster.http import HTTPResourceSource
from kubefs.cluster.kinds import DEFAULT_KINDS, SUPPORTED_KINDS, ResourceKind, validate_kinds
from kubefs.cluster.models import ResourceObject
from kubefs.cluster.static import StaticResourceSource

__all__ = [
    "ResourceSource",
    "HTTPResourceSource",
    "StaticResourceSource",
    "ResourceObject",
    "ResourceKind",
    "SUPPORTED_KINDS",
    "DEFAULT_KINDS",
    "validate_kinds",
]
