"""Cluster provider - connection configuration for a Kubernetes cluster."""

from __future__ import annotations

import logging
from functools import cached_property
from typing import TYPE_CHECKING, Self

import yaml
from kubernetes import client as k8s_client
from kubernetes import config as k8s_config
from pydantic import BaseModel, ConfigDict, SecretStr
from urllib3.util import make_headers

from meshroute.errors import ClusterConnectionError

if TYPE_CHECKING:
    from meshroute.config.schema import ClusterSettings
    from meshroute.handlers.route_rules import RouteRuleHandler
    from meshroute.handlers.services import ServiceHandler

logger = logging.getLogger(__name__)

DEFAULT_NAMESPACE = "default"


class BasicAuth(BaseModel):
    """Username/password authentication for the cluster API."""

    username: str
    password: SecretStr


class ClusterProvider(BaseModel):
    """Connection configuration for a Kubernetes cluster.

    The API endpoint is derived from the ambient kubeconfig (or the in-cluster
    service account) unless ``master_url`` overrides it. The client is built
    once on first access and shared by every handler.

    Examples:
        # Current kubeconfig context
        provider = ClusterProvider()

        # Explicit endpoint with basic credentials
        provider = ClusterProvider(
            master_url="https://10.0.0.1:6443",
            auth=BasicAuth(username="dev", password=SecretStr("secret")),
        )

        # Tests
        provider = ClusterProvider.from_client(MagicMock())
    """

    model_config = ConfigDict(arbitrary_types_allowed=True)

    master_url: str | None = None
    auth: BasicAuth | None = None
    kubeconfig: str | None = None
    context: str | None = None
    verify_ssl: bool = True

    # Injected client (for testing)
    _injected_client: k8s_client.ApiClient | None = None

    @classmethod
    def from_client(cls, client: k8s_client.ApiClient) -> Self:
        """Create a provider with an injected client.

        Args:
            client: A pre-configured ApiClient instance
        """
        provider = cls.model_construct()
        provider._injected_client = client
        return provider

    @classmethod
    def from_settings(cls, settings: ClusterSettings) -> Self:
        """Create a provider from loaded cluster settings."""
        auth = None
        if settings.username and settings.password is not None:
            auth = BasicAuth(username=settings.username, password=settings.password)
        return cls(
            master_url=settings.master_url,
            auth=auth,
            kubeconfig=settings.kubeconfig,
            context=settings.context,
            verify_ssl=settings.verify_ssl,
        )

    def _load_configuration(self) -> k8s_client.Configuration:
        configuration = k8s_client.Configuration()
        try:
            k8s_config.load_kube_config(
                config_file=self.kubeconfig,
                context=self.context,
                client_configuration=configuration,
            )
            logger.debug("Loaded kubeconfig (context: %s)", self.context or "current")
        except yaml.YAMLError as exc:
            raise ClusterConnectionError(f"Unreadable kubeconfig: {exc}") from exc
        except k8s_config.ConfigException as exc:
            if self.master_url is not None:
                logger.debug("No usable kubeconfig, using %s only: %s", self.master_url, exc)
                return configuration
            try:
                k8s_config.load_incluster_config(client_configuration=configuration)
            except k8s_config.ConfigException:
                reason = str(exc).rstrip(".")
                raise ClusterConnectionError(
                    f"No cluster configuration found: {reason}. "
                    "Set cluster.master_url or MESHROUTE_MASTER_URL, or provide a kubeconfig"
                ) from exc
            logger.debug("Loaded in-cluster configuration")
        return configuration

    @cached_property
    def client(self) -> k8s_client.ApiClient:
        """Get the Kubernetes API client."""
        if self._injected_client is not None:
            return self._injected_client

        configuration = self._load_configuration()
        if self.master_url:
            configuration.host = self.master_url.rstrip("/")
        if self.auth is not None:
            credentials = f"{self.auth.username}:{self.auth.password.get_secret_value()}"
            configuration.username = self.auth.username
            configuration.password = self.auth.password.get_secret_value()
            configuration.api_key = {
                "authorization": make_headers(basic_auth=credentials)["authorization"]
            }
        if not self.verify_ssl:
            configuration.verify_ssl = False

        if not configuration.host:
            raise ClusterConnectionError("Cluster configuration has no API endpoint")
        logger.debug("Connecting to %s", configuration.host)
        return k8s_client.ApiClient(configuration)

    def current_namespace(self) -> str:
        """Namespace of the active kubeconfig context, or ``default``."""
        try:
            contexts, active = k8s_config.list_kube_config_contexts(config_file=self.kubeconfig)
        except (k8s_config.ConfigException, yaml.YAMLError) as exc:
            logger.debug("Cannot read kubeconfig contexts: %s", exc)
            return DEFAULT_NAMESPACE
        if self.context is not None:
            active = next((c for c in contexts if c.get("name") == self.context), None)
        context = (active or {}).get("context") or {}
        return context.get("namespace") or DEFAULT_NAMESPACE

    # Handlers for each API concern
    @cached_property
    def route_rules(self) -> RouteRuleHandler:
        from meshroute.handlers.route_rules import RouteRuleHandler

        return RouteRuleHandler(self.client)

    @cached_property
    def services(self) -> ServiceHandler:
        from meshroute.handlers.services import ServiceHandler

        return ServiceHandler(self.client)
