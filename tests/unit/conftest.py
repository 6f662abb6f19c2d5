"""Shared fixtures for unit tests."""

from __future__ import annotations

from typing import TYPE_CHECKING

import pytest

from meshroute.config import load

if TYPE_CHECKING:
    from collections.abc import Callable
    from pathlib import Path

    from meshroute.config.schema import Config

_MESHROUTE_ENV_VARS = (
    "MESHROUTE_MASTER_URL",
    "MESHROUTE_USERNAME",
    "MESHROUTE_PASSWORD",
    "MESHROUTE_KUBECONFIG",
    "MESHROUTE_CONTEXT",
    "MESHROUTE_VERIFY_SSL",
    "MESHROUTE_NAMESPACE",
    "MESHROUTE_SERVICE_NAMESPACE",
    "MESHROUTE_LOG",
)


@pytest.fixture(autouse=True)
def _clean_meshroute_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Remove MESHROUTE_* env vars so unit tests don't leak cluster config."""
    for var in _MESHROUTE_ENV_VARS:
        monkeypatch.delenv(var, raising=False)


@pytest.fixture
def make_config(tmp_path: Path) -> Callable[..., Config]:
    """Factory fixture: write YAML + optional .env, return loaded Config."""

    def _make(yaml_str: str, *, dotenv: str | None = None) -> Config:
        (tmp_path / "meshroute.yaml").write_text(yaml_str)
        if dotenv is not None:
            (tmp_path / ".env").write_text(dotenv)
        return load(tmp_path / "meshroute.yaml")

    return _make
