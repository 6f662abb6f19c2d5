"""Istio resource definitions."""

from meshroute.resources.base import SPEC_KINDS, IstioResource, IstioSpec
from meshroute.resources.builder import build_route_rule
from meshroute.resources.metadata import ObjectMeta
from meshroute.resources.route_rule import Destination, Route, RouteRuleSpec

__all__ = [
    "SPEC_KINDS",
    "Destination",
    "IstioResource",
    "IstioSpec",
    "ObjectMeta",
    "Route",
    "RouteRuleSpec",
    "build_route_rule",
]
