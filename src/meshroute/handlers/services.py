"""Handler for Kubernetes services and service-name completion."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from kubernetes import client as k8s_client
from kubernetes.client.exceptions import ApiException
from urllib3.exceptions import HTTPError

if TYPE_CHECKING:
    from collections.abc import Iterable

logger = logging.getLogger(__name__)


def complete_service_names(prefix: str, names: Iterable[str]) -> list[str]:
    """Return the names starting with *prefix*, sorted."""
    return sorted(n for n in names if n.startswith(prefix))


class ServiceHandler:
    """Handler for the live service inventory of a namespace."""

    def __init__(self, client: k8s_client.ApiClient) -> None:
        self.client = client

    def list_service_names(self, namespace: str) -> list[str]:
        """List the names of all services in a namespace."""
        services = k8s_client.CoreV1Api(self.client).list_namespaced_service(namespace)
        if services is None:
            return []
        return [s.metadata.name for s in services.items or []]

    def complete(self, prefix: str, namespace: str) -> list[str]:
        """Complete a partial service name. Never raises."""
        try:
            names = self.list_service_names(namespace)
        except (ApiException, HTTPError) as exc:
            # Inventory unavailable (unreachable cluster, RBAC denial).
            logger.debug("Cannot list services in %s: %s", namespace, exc)
            return []
        return complete_service_names(prefix, names)
