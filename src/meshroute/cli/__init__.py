"""meshroute command line: app object, version flag and log verbosity."""

from __future__ import annotations

import logging
import os
import sys

import typer

from meshroute import __version__

app = typer.Typer(
    name="meshroute",
    help="Build Istio RouteRules and register them with a Kubernetes cluster.",
    no_args_is_help=True,
)

LOG_ENV_VAR = "MESHROUTE_LOG"
_LOG_FORMAT = "%(levelname)s %(name)s: %(message)s"
_VERBOSITY = {1: logging.INFO, 2: logging.DEBUG}

# Loggers of the cluster client stack. They only follow along at debug so
# that ``-v`` shows meshroute's own messages without HTTP wire noise.
_CLIENT_LOGGERS = ("kubernetes", "urllib3")


def _version_callback(value: bool) -> None:
    if value:
        typer.echo(f"meshroute {__version__}")
        raise typer.Exit


def _resolve_level(verbose: int) -> int | None:
    """Pick a log level; ``MESHROUTE_LOG`` wins over ``-v`` flags.

    Returns None when neither is given, which leaves logging unconfigured.
    """
    name = os.environ.get(LOG_ENV_VAR, "").strip().upper()
    if name:
        level = logging.getLevelName(name)
        if isinstance(level, int):
            return level
        typer.echo(
            f"WARNING: invalid {LOG_ENV_VAR} level {name!r}, using INFO",
            err=True,
        )
        return logging.INFO
    if verbose <= 0:
        return None
    return _VERBOSITY.get(verbose, logging.DEBUG)


def _configure_logging(verbose: int) -> None:
    level = _resolve_level(verbose)
    if level is None:
        return
    logging.basicConfig(
        level=logging.WARNING,
        format=_LOG_FORMAT,
        stream=sys.stderr,
        force=True,
    )
    logging.getLogger("meshroute").setLevel(level)
    if level <= logging.DEBUG:
        for name in _CLIENT_LOGGERS:
            logging.getLogger(name).setLevel(level)


@app.callback()
def main(
    version: bool | None = typer.Option(
        None,
        "--version",
        "-V",
        help="Show version and exit.",
        callback=_version_callback,
        is_eager=True,
    ),
    verbose: int = typer.Option(
        0,
        "--verbose",
        "-v",
        count=True,
        help=f"Increase log verbosity (-v info, -vv debug incl. cluster client). "
        f"{LOG_ENV_VAR} overrides.",
    ),
) -> None:
    """Generate Istio RouteRules and register them with a cluster."""
    _ = version
    _configure_logging(verbose)


# Commands import ``app`` from this module, so they are registered last.
from meshroute.cli import commands as _commands  # noqa: E402, F401
