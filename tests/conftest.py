"""Shared fixtures for kubefs tests."""

from datetime import datetime, timezone
from typing import Any, Dict, List

import pytest

from kubefs.cluster import StaticResourceSource
from kubefs.fs import FilesystemAdapter
from kubefs.vfs import ContentRenderer, SnapshotBuilder

SNAPSHOT_TIME = datetime(2024, 1, 2, 3, 4, 5, tzinfo=timezone.utc)


def configmap(name: str, namespace: str, data: Dict[str, str] = None, uid: str = None) -> Dict[str, Any]:
    metadata: Dict[str, Any] = {"name": name, "namespace": namespace}
    if uid:
        metadata["uid"] = uid
        metadata["creationTimestamp"] = "2024-01-01T00:00:00Z"
    return {
        "apiVersion": "v1",
        "kind": "ConfigMap",
        "metadata": metadata,
        "data": data or {},
    }


def secret(name: str, namespace: str) -> Dict[str, Any]:
    return {
        "apiVersion": "v1",
        "kind": "Secret",
        "metadata": {"name": name, "namespace": namespace},
        "type": "Opaque",
        "data": {"token": "c2VjcmV0"},
    }


class CountingSource(StaticResourceSource):
    """Static source that records every call made to it."""

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.calls: List[tuple] = []

    def list_namespaces(self):
        self.calls.append(("namespaces",))
        return super().list_namespaces()

    def list_resources(self, namespace, kind):
        self.calls.append(("resources", namespace, kind))
        return super().list_resources(namespace, kind)


@pytest.fixture
def cluster_source():
    """Two namespaces; listing configmaps in kube-system is forbidden.

    Structure (kinds=["configmaps"]):
        /
        ├── default/
        │   ├── configmaps/
        │   │   └── kube-root-ca.crt.yaml
        │   └── manifest.yaml
        └── kube-system/
            ├── configmaps/          (empty, fetch failed)
            └── manifest.yaml
    """
    return CountingSource(
        {
            "default": {
                "configmaps": [
                    configmap(
                        "kube-root-ca.crt",
                        "default",
                        {"ca.crt": "-----BEGIN CERTIFICATE-----"},
                        uid="0b1c2d3e",
                    ),
                ],
            },
            "kube-system": {},
        },
        failing=[("kube-system", "configmaps")],
    )


@pytest.fixture
def tree(cluster_source):
    return SnapshotBuilder(cluster_source).build(["configmaps"], created_at=SNAPSHOT_TIME)


@pytest.fixture
def renderer():
    return ContentRenderer()


@pytest.fixture
def adapter(tree, renderer):
    return FilesystemAdapter(tree, renderer, uid=1000, gid=1000)


@pytest.fixture
def dump_file(tmp_path):
    """A kubectl-style YAML dump with a List and a loose document."""
    path = tmp_path / "dump.yaml"
    path.write_text(
        """\
apiVersion: v1
kind: List
items:
- apiVersion: v1
  kind: Namespace
  metadata:
    name: default
- apiVersion: v1
  kind: Namespace
  metadata:
    name: empty
- apiVersion: v1
  kind: ConfigMap
  metadata:
    name: kube-root-ca.crt
    namespace: default
  data:
    ca.crt: cert
- apiVersion: v1
  kind: Secret
  metadata:
    name: db-password
    namespace: default
  type: Opaque
---
apiVersion: apps/v1
kind: Deployment
metadata:
  name: coredns
  namespace: kube-system
spec:
  replicas: 2
---
apiVersion: v1
kind: Node
metadata:
  name: worker-1
"""
    )
    return path
