"""CLI command implementations."""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Annotated

import typer

from meshroute.cli import app
from meshroute.cli.errors import handle_error

logger = logging.getLogger(__name__)

DEFAULT_CONFIG = Path("meshroute.yaml")

ConfigPath = Annotated[
    Path,
    typer.Option("--config", "-c", help="Path to the configuration file."),
]

NoColor = Annotated[
    bool,
    typer.Option("--no-color", help="Disable colored output."),
]


def _use_color(no_color: bool) -> bool:
    """Determine whether to use color output."""
    return not (no_color or os.environ.get("NO_COLOR"))


def _required(value: str) -> str:
    if not value.strip():
        raise typer.BadParameter("must not be empty")
    return value


def _required_if_given(value: str | None) -> str | None:
    if value is None:
        return None
    return _required(value)


def _complete_destination(ctx: typer.Context, incomplete: str) -> list[str]:
    """Shell completion for ``--destination`` from the live service inventory."""
    from meshroute.config import ConfigError, complete_services, load
    from meshroute.errors import MeshrouteError

    try:
        cfg = load(ctx.params.get("config") or DEFAULT_CONFIG)
        return complete_services(incomplete, cfg)
    except (ConfigError, MeshrouteError) as exc:
        logger.debug("Service completion unavailable: %s", exc)
        return []


@app.command(name="route-rule")
def route_rule(
    name: Annotated[
        str,
        typer.Argument(help="The base name for the RouteRule.", callback=_required),
    ],
    destination: Annotated[
        str,
        typer.Option(
            "--destination",
            "-d",
            help="The name of the target service.",
            callback=_required,
            autocompletion=_complete_destination,
        ),
    ],
    generate_name: Annotated[
        bool,
        typer.Option(
            "--generate-name",
            help="Use NAME as the basis for automatic name generation.",
        ),
    ] = False,
    namespace: Annotated[
        str | None,
        typer.Option(
            "--namespace",
            "-n",
            help="Override the control-plane namespace.",
            callback=_required_if_given,
        ),
    ] = None,
    dry_run: Annotated[
        bool,
        typer.Option("--dry-run", help="Print the RouteRule without registering it."),
    ] = False,
    config: ConfigPath = DEFAULT_CONFIG,
    no_color: NoColor = False,
) -> None:
    """Generate an Istio RouteRule and register it with the cluster."""
    from rich.console import Console

    from meshroute.cli.formatting import format_created, format_manifest
    from meshroute.config import load, register
    from meshroute.resources import build_route_rule

    color = _use_color(no_color)
    try:
        resource = build_route_rule(name, generate_name, destination)
        if dry_run:
            typer.echo(format_manifest(resource))
            return

        cfg = load(config)
        if namespace is not None:
            cfg.cluster.namespace = namespace
        console = Console(stderr=True, no_color=not color)
        with console.status(f"Registering {resource.address}..."):
            created = register(resource, cfg)
    except Exception as exc:
        raise typer.Exit(handle_error(exc, color=color)) from exc

    typer.echo(format_created(resource, created, color=color))


@app.command()
def services(
    prefix: Annotated[
        str,
        typer.Argument(help="Only list services whose name starts with PREFIX."),
    ] = "",
    namespace: Annotated[
        str | None,
        typer.Option(
            "--namespace",
            "-n",
            help="Namespace to list (defaults to the current kubeconfig namespace).",
            callback=_required_if_given,
        ),
    ] = None,
    config: ConfigPath = DEFAULT_CONFIG,
    no_color: NoColor = False,
) -> None:
    """List the services a RouteRule can target."""
    from meshroute.config import list_services, load
    from meshroute.handlers.services import complete_service_names

    color = _use_color(no_color)
    try:
        cfg = load(config)
        names = complete_service_names(prefix, list_services(cfg, namespace=namespace))
    except Exception as exc:
        raise typer.Exit(handle_error(exc, color=color)) from exc

    if not names:
        typer.echo("No services found.")
        return
    for service_name in names:
        typer.echo(service_name)
