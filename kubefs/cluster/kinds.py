"""Namespaced resource kinds that can be projected.

Each kind is addressed by its plural name, which doubles as the name of
its directory inside a namespace directory (``default/configmaps/``).
"""

from dataclasses import dataclass
from typing import Dict, Iterable, List, Optional


@dataclass(frozen=True)
class ResourceKind:
    """A namespaced Kubernetes resource kind."""
    plural: str
    kind: str
    api_version: str

    @property
    def api_prefix(self) -> str:
        """URL prefix for this kind's API group (``/api/v1``, ``/apis/apps/v1``)."""
        if "/" in self.api_version:
            return f"/apis/{self.api_version}"
        return f"/api/{self.api_version}"

    def list_path(self, namespace: str) -> str:
        return f"{self.api_prefix}/namespaces/{namespace}/{self.plural}"


SUPPORTED_KINDS: Dict[str, ResourceKind] = {
    k.plural: k
    for k in [
        ResourceKind("configmaps", "ConfigMap", "v1"),
        ResourceKind("secrets", "Secret", "v1"),
        ResourceKind("pods", "Pod", "v1"),
        ResourceKind("services", "Service", "v1"),
        ResourceKind("serviceaccounts", "ServiceAccount", "v1"),
        ResourceKind("endpoints", "Endpoints", "v1"),
        ResourceKind("persistentvolumeclaims", "PersistentVolumeClaim", "v1"),
        ResourceKind("events", "Event", "v1"),
        ResourceKind("limitranges", "LimitRange", "v1"),
        ResourceKind("resourcequotas", "ResourceQuota", "v1"),
        ResourceKind("deployments", "Deployment", "apps/v1"),
        ResourceKind("statefulsets", "StatefulSet", "apps/v1"),
        ResourceKind("daemonsets", "DaemonSet", "apps/v1"),
        ResourceKind("replicasets", "ReplicaSet", "apps/v1"),
        ResourceKind("jobs", "Job", "batch/v1"),
        ResourceKind("cronjobs", "CronJob", "batch/v1"),
        ResourceKind("ingresses", "Ingress", "networking.k8s.io/v1"),
        ResourceKind("networkpolicies", "NetworkPolicy", "networking.k8s.io/v1"),
    ]
}

DEFAULT_KINDS: List[str] = ["configmaps"]


def get_kind(plural: str) -> Optional[ResourceKind]:
    return SUPPORTED_KINDS.get(plural)


def kind_for_object(kind: str) -> Optional[ResourceKind]:
    """Find the kind entry for an object's ``kind`` field (e.g. ``ConfigMap``)."""
    for entry in SUPPORTED_KINDS.values():
        if entry.kind == kind:
            return entry
    return None


def validate_kinds(kinds: Iterable[str]) -> List[str]:
    """Normalize an allow-list: lowercase, de-duplicated, sorted.

    Args:
        kinds: Plural kind names as given by the user

    Returns:
        Sorted list of unique kind names

    Raises:
        ValueError: If any name is not a supported kind
    """
    normalized = sorted({k.strip().lower() for k in kinds if k.strip()})
    unknown = [k for k in normalized if k not in SUPPORTED_KINDS]
    if unknown:
        supported = ", ".join(sorted(SUPPORTED_KINDS))
        raise ValueError(f"Unsupported resource kind(s): {', '.join(unknown)} (supported: {supported})")
    return normalized
