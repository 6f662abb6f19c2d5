"""Configuration loading and convenience build/register API."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from meshroute.config.loader import ConfigError, load_config
from meshroute.config.schema import ClusterSettings, Config
from meshroute.core.provider import ClusterProvider
from meshroute.handlers.services import complete_service_names

if TYPE_CHECKING:
    from pathlib import Path

    from meshroute.resources.base import IstioResource

__all__ = [
    "ClusterSettings",
    "Config",
    "ConfigError",
    "complete_services",
    "list_services",
    "load",
    "load_config",
    "provider_from_config",
    "register",
]


def load(path: Path | str) -> Config:
    """Load a YAML configuration file."""
    return load_config(path)


def provider_from_config(config: Config) -> ClusterProvider:
    """Build a ``ClusterProvider`` from a ``Config`` instance."""
    cluster = config.cluster
    if cluster.password is not None and not cluster.username:
        raise ConfigError("cluster.username is required when a password is set")
    return ClusterProvider.from_settings(cluster)


def register(
    resource: IstioResource,
    config: Config,
    *,
    provider: ClusterProvider | None = None,
) -> dict[str, Any]:
    """Register a built resource in the configured namespace."""
    provider = provider or provider_from_config(config)
    return provider.route_rules.register(resource, namespace=config.cluster.namespace)


def _service_namespace(config: Config, provider: ClusterProvider) -> str:
    return config.cluster.service_namespace or provider.current_namespace()


def list_services(
    config: Config,
    *,
    namespace: str | None = None,
    provider: ClusterProvider | None = None,
) -> list[str]:
    """List live service names, sorted."""
    provider = provider or provider_from_config(config)
    ns = namespace or _service_namespace(config, provider)
    return complete_service_names("", provider.services.list_service_names(ns))


def complete_services(
    prefix: str,
    config: Config,
    *,
    namespace: str | None = None,
    provider: ClusterProvider | None = None,
) -> list[str]:
    """Complete a partial service name against the live inventory."""
    provider = provider or provider_from_config(config)
    ns = namespace or _service_namespace(config, provider)
    return provider.services.complete(prefix, ns)
