"""YAML configuration file loader."""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Any

from dotenv import dotenv_values
from pydantic import ValidationError
from ruamel.yaml import YAML
from ruamel.yaml.constructor import SafeConstructor

from meshroute.config.schema import Config

logger = logging.getLogger(__name__)


class ConfigError(Exception):
    """Raised for configuration loading / validation errors."""


# Field name → environment variable.
_CLUSTER_ENV_MAP: dict[str, str] = {
    "master_url": "MESHROUTE_MASTER_URL",
    "username": "MESHROUTE_USERNAME",
    "password": "MESHROUTE_PASSWORD",
    "kubeconfig": "MESHROUTE_KUBECONFIG",
    "context": "MESHROUTE_CONTEXT",
    "verify_ssl": "MESHROUTE_VERIFY_SSL",
    "namespace": "MESHROUTE_NAMESPACE",
    "service_namespace": "MESHROUTE_SERVICE_NAMESPACE",
}

_CLUSTER_BOOL_FIELDS: frozenset[str] = frozenset({"verify_ssl"})


def _resolve_cluster(raw_cluster: dict[str, Any], config_dir: Path) -> dict[str, Any]:
    """Resolve cluster fields from YAML, env vars, and ``.env`` file.

    Priority (highest wins): YAML value > env var > ``.env`` file.
    """
    env_file = config_dir / ".env"
    dotenv_vals = dotenv_values(env_file, encoding="utf-8-sig") if env_file.is_file() else {}

    resolved: dict[str, Any] = {}
    for field, env_key in _CLUSTER_ENV_MAP.items():
        val = raw_cluster.get(field)
        if val is None:
            val = os.environ.get(env_key)
        if val is None:
            val = dotenv_vals.get(env_key)
        if val is not None:
            if field in _CLUSTER_BOOL_FIELDS and isinstance(val, str):
                if val.lower() not in SafeConstructor.bool_values:
                    raise ConfigError(f"Invalid boolean for {env_key}: {val!r}")
                val = SafeConstructor.bool_values[val.lower()]
            resolved[field] = val

    return resolved


def load_config(path: Path | str) -> Config:
    """Load a YAML configuration file and return a ``Config`` object.

    A missing file is not an error: settings then come from the environment
    and a ``.env`` file in the current directory.

    Raises:
        ConfigError: On YAML parse errors or validation failures.
    """
    path = Path(path)

    raw: Any = {}
    if path.is_file():
        try:
            raw = YAML(typ="safe").load(path) or {}
        except Exception as exc:
            raise ConfigError(f"Failed to read {path}: {exc}") from exc
        if not isinstance(raw, dict):
            raise ConfigError(f"Failed to read {path}: expected a mapping at the top level")
    else:
        logger.debug("No config file at %s, using environment only", path)

    cluster = raw.get("cluster") or {}
    if not isinstance(cluster, dict):
        raise ConfigError(f"Failed to read {path}: 'cluster' must be a mapping")

    try:
        raw["cluster"] = _resolve_cluster(cluster, path.parent)
        config = Config.model_validate(raw)
    except ValidationError as exc:
        raise ConfigError(str(exc)) from exc

    logger.info("Loaded config (namespace: %s)", config.cluster.namespace)
    return config
