"""Build Istio RouteRules and register them with a Kubernetes cluster."""

__version__ = "0.1.0"
