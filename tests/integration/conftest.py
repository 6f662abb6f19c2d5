"""Pytest fixtures for integration tests."""

import time
from collections.abc import Generator
from pathlib import Path

import pytest
from kubernetes import client as k8s_client
from testcontainers.k3s import K3SContainer

from meshroute.core import ClusterProvider

_ROUTE_RULE_CRD = {
    "apiVersion": "apiextensions.k8s.io/v1",
    "kind": "CustomResourceDefinition",
    "metadata": {"name": "routerules.config.istio.io"},
    "spec": {
        "group": "config.istio.io",
        "scope": "Namespaced",
        "names": {
            "kind": "RouteRule",
            "listKind": "RouteRuleList",
            "plural": "routerules",
            "singular": "routerule",
        },
        "versions": [
            {
                "name": "v1alpha2",
                "served": True,
                "storage": True,
                "schema": {
                    "openAPIV3Schema": {
                        "type": "object",
                        "x-kubernetes-preserve-unknown-fields": True,
                    }
                },
            }
        ],
    },
}


def _wait_for_crd(api: k8s_client.ApiextensionsV1Api, name: str, timeout: int = 60) -> None:
    """Wait for a CRD to report the Established condition."""
    deadline = time.time() + timeout
    while time.time() < deadline:
        crd = api.read_custom_resource_definition(name)
        conditions = (crd.status and crd.status.conditions) or []
        if any(c.type == "Established" and c.status == "True" for c in conditions):
            return
        time.sleep(1)
    raise TimeoutError(f"CRD {name} was not established")


@pytest.fixture(scope="session")
def k3s_container() -> Generator[K3SContainer]:
    """Start a k3s cluster for the test session."""
    with K3SContainer() as container:
        yield container


@pytest.fixture(scope="session")
def cluster_provider(
    k3s_container: K3SContainer, tmp_path_factory: pytest.TempPathFactory
) -> ClusterProvider:
    """Provide a ClusterProvider for the k3s cluster with the RouteRule CRD installed."""
    kubeconfig: Path = tmp_path_factory.mktemp("k3s") / "kubeconfig.yaml"
    kubeconfig.write_text(k3s_container.config_yaml())
    provider = ClusterProvider(kubeconfig=str(kubeconfig))

    extensions = k8s_client.ApiextensionsV1Api(provider.client)
    extensions.create_custom_resource_definition(_ROUTE_RULE_CRD)
    _wait_for_crd(extensions, _ROUTE_RULE_CRD["metadata"]["name"])

    core = k8s_client.CoreV1Api(provider.client)
    core.create_namespace({"metadata": {"name": "istio-system"}})
    for name in ("frontend", "backend", "reviews", "ratings"):
        core.create_namespaced_service(
            "default",
            {"metadata": {"name": name}, "spec": {"ports": [{"port": 80}]}},
        )
    return provider
