"""Terminal output rendering."""

from __future__ import annotations

from io import StringIO
from typing import TYPE_CHECKING, Any

import typer
from ruamel.yaml import YAML

if TYPE_CHECKING:
    from collections.abc import Callable

    from meshroute.resources.base import IstioResource

# Server bookkeeping that only adds noise to the printed object.
_HIDDEN_METADATA = ("managedFields",)


def styler(color: bool) -> Callable[..., str]:
    """Return ``typer.style`` when *color* is True, otherwise a passthrough."""
    if color:
        return typer.style
    return lambda text, **_kw: text


def to_yaml(doc: dict[str, Any]) -> str:
    """Dump a document as block-style YAML."""
    yaml = YAML()
    yaml.default_flow_style = False
    buf = StringIO()
    yaml.dump(doc, buf)
    return buf.getvalue().rstrip("\n")


def _visible(created: dict[str, Any]) -> dict[str, Any]:
    metadata = {
        k: v for k, v in (created.get("metadata") or {}).items() if k not in _HIDDEN_METADATA
    }
    return {**created, "metadata": metadata}


def format_created(resource: IstioResource, created: dict[str, Any], *, color: bool) -> str:
    """Render the success message followed by the stored object."""
    style = styler(color)
    stored_name = (created.get("metadata") or {}).get("name", "")
    if resource.metadata.name is not None:
        header = f"{resource.kind} {resource.metadata.name} created"
    else:
        header = f"{resource.kind} {resource.metadata.generate_name}* created as {stored_name}"
    return f"{style(header, fg='green')}\n\n{to_yaml(_visible(created))}"


def format_manifest(resource: IstioResource) -> str:
    """Render the manifest that would be submitted."""
    return to_yaml(resource.to_manifest())
