"""Handler for Istio RouteRules."""

from __future__ import annotations

import json
import logging
from typing import TYPE_CHECKING, Any

from kubernetes import client as k8s_client
from kubernetes.client.exceptions import ApiException

from meshroute.errors import ConflictError, RegistrationError
from meshroute.resources.route_rule import RouteRuleSpec

if TYPE_CHECKING:
    from meshroute.resources.base import IstioResource

logger = logging.getLogger(__name__)

CONTROL_PLANE_NAMESPACE = "istio-system"


def _api_reason(exc: ApiException) -> str:
    """Extract the server's message from an API error, falling back to its reason."""
    if exc.body:
        try:
            body = json.loads(exc.body)
        except (TypeError, ValueError):
            return str(exc.body)
        if isinstance(body, dict) and body.get("message"):
            return str(body["message"])
    return str(exc.reason)


class RouteRuleHandler:
    """Handler for RouteRule operations on the custom-resource API."""

    def __init__(self, client: k8s_client.ApiClient) -> None:
        self.client = client

    @property
    def api(self) -> k8s_client.CustomObjectsApi:
        return k8s_client.CustomObjectsApi(self.client)

    def register(
        self, resource: IstioResource, namespace: str = CONTROL_PLANE_NAMESPACE
    ) -> dict[str, Any]:
        """Create the resource in the cluster and return the stored object.

        Not idempotent: an exact name that already exists raises
        ``ConflictError``; a ``generateName`` prefix yields a new object on
        every call.
        """
        logger.info("Registering %s in namespace %s", resource.address, namespace)
        try:
            created = self.api.create_namespaced_custom_object(
                group=resource.group,
                version=resource.version,
                namespace=namespace,
                plural=resource.plural,
                body=resource.to_manifest(),
            )
        except ApiException as exc:
            error = ConflictError if exc.status == 409 else RegistrationError
            raise error(resource.address, status=exc.status, reason=_api_reason(exc)) from exc
        logger.info("Registered %s/%s", resource.kind, created["metadata"]["name"])
        return created

    def get(self, name: str, namespace: str = CONTROL_PLANE_NAMESPACE) -> dict[str, Any] | None:
        """Read a RouteRule from the cluster. Returns None if it does not exist."""
        try:
            return self.api.get_namespaced_custom_object(
                group=RouteRuleSpec.group,
                version=RouteRuleSpec.version,
                namespace=namespace,
                plural=RouteRuleSpec.plural,
                name=name,
            )
        except ApiException as exc:
            if exc.status == 404:
                return None
            raise

    def list_names(self, namespace: str = CONTROL_PLANE_NAMESPACE) -> list[str]:
        """List the names of all RouteRules in a namespace."""
        result = self.api.list_namespaced_custom_object(
            group=RouteRuleSpec.group,
            version=RouteRuleSpec.version,
            namespace=namespace,
            plural=RouteRuleSpec.plural,
        )
        return sorted(item["metadata"]["name"] for item in result.get("items", []))
