"""Configuration models for cluster settings."""

from __future__ import annotations

from pydantic import BaseModel, Field, SecretStr
from pydantic_settings import BaseSettings, SettingsConfigDict

from meshroute.handlers.route_rules import CONTROL_PLANE_NAMESPACE


class ClusterSettings(BaseSettings):
    """Cluster connection settings.

    Fields can be set via YAML (constructor kwargs) or environment variables
    with the ``MESHROUTE_`` prefix.  Constructor kwargs take precedence.

    ``password`` is typically provided via the ``MESHROUTE_PASSWORD``
    environment variable rather than YAML to avoid committing secrets to
    version control.  Leaving ``username``/``password`` unset uses whatever
    credentials the kubeconfig carries.
    """

    model_config = SettingsConfigDict(env_prefix="MESHROUTE_")

    master_url: str | None = None
    username: str | None = None
    password: SecretStr | None = None
    kubeconfig: str | None = None
    context: str | None = None
    verify_ssl: bool = True
    namespace: str = Field(default=CONTROL_PLANE_NAMESPACE, min_length=1)
    service_namespace: str | None = None


class Config(BaseModel):
    """meshroute configuration file."""

    cluster: ClusterSettings = Field(default_factory=ClusterSettings)
