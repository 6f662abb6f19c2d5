"""Handlers for cluster API operations."""

from meshroute.handlers.route_rules import CONTROL_PLANE_NAMESPACE, RouteRuleHandler
from meshroute.handlers.services import ServiceHandler, complete_service_names

__all__ = [
    "CONTROL_PLANE_NAMESPACE",
    "RouteRuleHandler",
    "ServiceHandler",
    "complete_service_names",
]
