"""Factory functions that assemble resources from flat, validated fields."""

from __future__ import annotations

from meshroute.resources.base import IstioResource
from meshroute.resources.metadata import ObjectMeta
from meshroute.resources.route_rule import TOTAL_WEIGHT, Destination, Route, RouteRuleSpec


def build_route_rule(name: str, use_generate_name: bool, destination_name: str) -> IstioResource:
    """Build a RouteRule sending all traffic for *destination_name* to one route.

    When *use_generate_name* is true, *name* is used as a ``generateName``
    prefix and the cluster picks the final name.
    """
    if use_generate_name:
        metadata = ObjectMeta(generate_name=name)
    else:
        metadata = ObjectMeta(name=name)
    spec = RouteRuleSpec(
        destination=Destination(name=destination_name),
        routes=(Route(weight=TOTAL_WEIGHT),),
    )
    return IstioResource(metadata=metadata, spec=spec)
