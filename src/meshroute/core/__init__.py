"""Core infrastructure components for meshroute."""

from meshroute.core.provider import BasicAuth, ClusterProvider

__all__ = ["BasicAuth", "ClusterProvider"]
