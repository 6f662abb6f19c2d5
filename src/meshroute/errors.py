"""Error types raised while building and registering resources."""

from __future__ import annotations


class MeshrouteError(Exception):
    """Base exception for meshroute errors."""


class ClusterConnectionError(MeshrouteError):
    """Raised when no usable client can be built for the cluster."""


class UnknownResourceKindError(MeshrouteError):
    """Raised when a manifest kind has no registered spec variant."""

    def __init__(self, kind: str) -> None:
        super().__init__(f"Unknown resource kind: {kind}")
        self.kind = kind


class RegistrationError(MeshrouteError):
    """Raised when the cluster rejects a resource.

    The underlying API exception is chained via ``__cause__``.
    """

    def __init__(self, address: str, *, status: int | None, reason: str) -> None:
        self.address = address
        self.status = status
        self.reason = reason
        msg = f"Failed to register {address}"
        if status is not None:
            msg += f" (HTTP {status})"
        super().__init__(f"{msg}: {reason}")


class ConflictError(RegistrationError):
    """Raised when a resource with the same name already exists."""
