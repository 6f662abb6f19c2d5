"""Map exceptions to clean stderr messages and exit codes."""

from __future__ import annotations

import typer


def _err(msg: str, *, fg: str | None) -> None:
    """Print a styled message to stderr."""
    typer.echo(typer.style(msg, fg=fg), err=True)


def handle_error(exc: Exception, *, color: bool = True) -> int:
    """Print a clean error message to stderr and return an exit code.

    All errors map to exit code 1.  No tracebacks are printed.
    """
    from pydantic import ValidationError

    from meshroute.config.loader import ConfigError
    from meshroute.errors import (
        ClusterConnectionError,
        ConflictError,
        RegistrationError,
    )

    fg = typer.colors.RED if color else None

    if isinstance(exc, ConfigError):
        _err(f"Configuration error: {exc}", fg=fg)
    elif isinstance(exc, ValidationError):
        _err(f"Invalid {exc.title}:", fg=fg)
        for e in exc.errors():
            loc = ".".join(str(p) for p in e["loc"])
            _err(f"  - {loc}: {e['msg']}" if loc else f"  - {e['msg']}", fg=fg)
    elif isinstance(exc, ClusterConnectionError):
        _err(f"Connection failed: {exc}", fg=fg)
    elif isinstance(exc, ConflictError):
        _err(f"Already exists: {exc}", fg=fg)
    elif isinstance(exc, RegistrationError):
        _err(f"Registration failed: {exc}", fg=fg)
    else:
        _err(f"Error: {exc}", fg=fg)

    return 1
