"""
Kubernetes REST API resource source.

Talks to the API server directly over HTTPS with a bearer token:

    GET /api/v1/namespaces
    GET /api/v1/namespaces/<ns>/configmaps
    GET /apis/apps/v1/namespaces/<ns>/deployments
"""

import logging
from typing import Any, Dict, List, Optional, Union

import httpx

from kubefs.cluster.base import ResourceSource
from kubefs.cluster.kinds import get_kind
from kubefs.cluster.models import ResourceObject
from kubefs.errors import FetchError

logger = logging.getLogger(__name__)


class HTTPResourceSource(ResourceSource):
    """
    Resource source backed by the Kubernetes REST API.

    Supports:
    - Bearer token authentication (or anonymous access)
    - Custom CA bundles or disabled TLS verification
    - Connection retries
    """

    def __init__(
        self,
        base_url: str,
        token: Optional[str] = None,
        verify: Union[bool, str] = True,
        timeout: float = 30.0,
        retries: int = 3,
        transport: Optional[httpx.BaseTransport] = None,
    ):
        """
        Initialize the source.

        Args:
            base_url: API server URL (e.g. https://127.0.0.1:6443)
            token: Bearer token, or None for anonymous access
            verify: TLS verification flag or path to a CA bundle
            timeout: Per-request timeout in seconds
            retries: Connection retries for transient failures
            transport: Custom transport (mainly for tests)
        """
        self.base_url = base_url.rstrip("/")
        headers = {"Accept": "application/json", "User-Agent": "kubefs"}
        if token:
            headers["Authorization"] = f"Bearer {token}"

        if transport is None:
            transport = httpx.HTTPTransport(retries=retries, verify=verify)

        self._client = httpx.Client(
            base_url=self.base_url,
            headers=headers,
            timeout=timeout,
            transport=transport,
        )

    @property
    def name(self) -> str:
        return self.base_url

    def list_namespaces(self) -> List[str]:
        body = self._get_list("/api/v1/namespaces")
        names = []
        for item in body:
            metadata = item.get("metadata")
            name = metadata.get("name") if isinstance(metadata, dict) else None
            if not isinstance(name, str) or not name:
                logger.warning("Skipping namespace without a name")
                continue
            names.append(name)
        return names

    def list_resources(self, namespace: str, kind: str) -> List[ResourceObject]:
        resource_kind = get_kind(kind)
        if resource_kind is None:
            raise FetchError(f"unsupported resource kind: {kind}", namespace=namespace, kind=kind)

        items = self._get_list(resource_kind.list_path(namespace), namespace=namespace, kind=kind)

        objects = []
        for item in items:
            # List responses omit apiVersion/kind on their items
            document = {"apiVersion": resource_kind.api_version, "kind": resource_kind.kind}
            document.update(item)
            objects.append(ResourceObject.from_document(namespace, kind, document))
        return objects

    def close(self) -> None:
        self._client.close()

    def _get_list(
        self,
        path: str,
        namespace: Optional[str] = None,
        kind: Optional[str] = None,
    ) -> List[Dict[str, Any]]:
        """GET a list endpoint and return its ``items``."""
        logger.debug(f"GET {self.base_url}{path}")
        try:
            response = self._client.get(path)
        except httpx.HTTPError as e:
            raise FetchError(f"{path}: {e}", namespace=namespace, kind=kind) from e

        if response.status_code >= 400:
            raise FetchError(
                f"{path}: HTTP {response.status_code} {self._status_message(response)}",
                namespace=namespace,
                kind=kind,
                status_code=response.status_code,
            )

        try:
            body = response.json()
        except ValueError as e:
            raise FetchError(f"{path}: response is not JSON", namespace=namespace, kind=kind) from e

        items = body.get("items") if isinstance(body, dict) else None
        if items is None:
            return []
        if not isinstance(items, list):
            raise FetchError(f"{path}: 'items' is not a list", namespace=namespace, kind=kind)
        return [item for item in items if isinstance(item, dict)]

    @staticmethod
    def _status_message(response: httpx.Response) -> str:
        # Kubernetes errors come back as a Status object
        try:
            body = response.json()
        except ValueError:
            return response.reason_phrase
        if isinstance(body, dict) and body.get("message"):
            return body["message"]
        return response.reason_phrase
