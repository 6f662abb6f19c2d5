"""RouteRule spec models."""

from __future__ import annotations

from typing import ClassVar, Self

from pydantic import BaseModel, ConfigDict, Field, model_validator

TOTAL_WEIGHT = 100


class Destination(BaseModel):
    """The service whose traffic a rule routes."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    name: str = Field(min_length=1)


class Route(BaseModel):
    """A weighted route to one version of the destination."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    weight: int = Field(ge=0, le=TOTAL_WEIGHT)
    labels: dict[str, str] | None = None


class RouteRuleSpec(BaseModel):
    """Spec of a ``RouteRule``: split traffic for one destination across routes.

    Routes are serialized under the ``route`` key, as the CRD expects.
    """

    model_config = ConfigDict(frozen=True, extra="forbid", populate_by_name=True)

    kind: ClassVar[str] = "RouteRule"
    group: ClassVar[str] = "config.istio.io"
    version: ClassVar[str] = "v1alpha2"
    plural: ClassVar[str] = "routerules"

    destination: Destination
    routes: tuple[Route, ...] = Field(alias="route", min_length=1)
    precedence: int | None = None

    @model_validator(mode="after")
    def _weights_add_up(self) -> Self:
        total = sum(r.weight for r in self.routes)
        if total != TOTAL_WEIGHT:
            raise ValueError(f"route weights must sum to {TOTAL_WEIGHT}, got {total}")
        return self
