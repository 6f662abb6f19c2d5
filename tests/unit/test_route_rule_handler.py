"""Tests for the RouteRuleHandler."""

from __future__ import annotations

from collections.abc import Iterator
from unittest.mock import MagicMock, patch

import pytest

from meshroute.core import ClusterProvider
from meshroute.errors import ConflictError, RegistrationError
from meshroute.handlers.route_rules import RouteRuleHandler
from meshroute.resources import build_route_rule
from tests.unit.fakes import FakeCustomObjectsApi, api_error

_CUSTOM_OBJECTS_API = "meshroute.handlers.route_rules.k8s_client.CustomObjectsApi"


@pytest.fixture
def mock_client() -> MagicMock:
    return MagicMock()


@pytest.fixture
def handler(mock_client: MagicMock) -> RouteRuleHandler:
    return ClusterProvider.from_client(mock_client).route_rules


@pytest.fixture
def mock_api() -> Iterator[MagicMock]:
    with patch(_CUSTOM_OBJECTS_API) as api_cls:
        yield api_cls.return_value


@pytest.fixture
def fake_api() -> Iterator[FakeCustomObjectsApi]:
    fake = FakeCustomObjectsApi()
    with patch(_CUSTOM_OBJECTS_API, return_value=fake):
        yield fake


class TestRegister:
    def test_calls_create_custom_object(
        self, handler: RouteRuleHandler, mock_client: MagicMock
    ) -> None:
        resource = build_route_rule("front-route", False, "frontend")
        with patch(_CUSTOM_OBJECTS_API) as api_cls:
            api_cls.return_value.create_namespaced_custom_object.return_value = {
                "metadata": {"name": "front-route"}
            }
            result = handler.register(resource)

        api_cls.assert_called_once_with(mock_client)
        api_cls.return_value.create_namespaced_custom_object.assert_called_once_with(
            group="config.istio.io",
            version="v1alpha2",
            namespace="istio-system",
            plural="routerules",
            body=resource.to_manifest(),
        )
        assert result == {"metadata": {"name": "front-route"}}

    def test_custom_namespace(self, handler: RouteRuleHandler, mock_api: MagicMock) -> None:
        mock_api.create_namespaced_custom_object.return_value = {"metadata": {"name": "r"}}
        handler.register(build_route_rule("r", False, "svc"), namespace="mesh")

        _, kwargs = mock_api.create_namespaced_custom_object.call_args
        assert kwargs["namespace"] == "mesh"

    def test_stores_exact_name(
        self, handler: RouteRuleHandler, fake_api: FakeCustomObjectsApi
    ) -> None:
        created = handler.register(build_route_rule("front-route", False, "frontend"))

        assert created["metadata"]["name"] == "front-route"
        assert created["metadata"]["namespace"] == "istio-system"
        assert created["spec"] == {"destination": {"name": "frontend"}, "route": [{"weight": 100}]}

    def test_duplicate_exact_name_conflicts(
        self, handler: RouteRuleHandler, fake_api: FakeCustomObjectsApi
    ) -> None:
        resource = build_route_rule("front-route", False, "frontend")
        handler.register(resource)

        with pytest.raises(ConflictError, match="already exists") as exc_info:
            handler.register(resource)
        assert exc_info.value.status == 409
        assert exc_info.value.address == "RouteRule/front-route"

    def test_same_name_in_other_namespace_is_allowed(
        self, handler: RouteRuleHandler, fake_api: FakeCustomObjectsApi
    ) -> None:
        resource = build_route_rule("front-route", False, "frontend")
        handler.register(resource)
        created = handler.register(resource, namespace="other")
        assert created["metadata"]["namespace"] == "other"

    def test_generate_name_creates_distinct_objects(
        self, handler: RouteRuleHandler, fake_api: FakeCustomObjectsApi
    ) -> None:
        resource = build_route_rule("auto-", True, "backend")
        first = handler.register(resource)
        second = handler.register(resource)

        for created in (first, second):
            assert created["metadata"]["name"].startswith("auto-")
            assert created["metadata"]["name"] != "auto-"
        assert first["metadata"]["name"] != second["metadata"]["name"]

    def test_rejection_raises_registration_error(
        self, handler: RouteRuleHandler, mock_api: MagicMock
    ) -> None:
        mock_api.create_namespaced_custom_object.side_effect = api_error(
            403, "Forbidden", 'routerules.config.istio.io is forbidden: User "dev"'
        )

        with pytest.raises(RegistrationError, match="HTTP 403") as exc_info:
            handler.register(build_route_rule("r", False, "svc"))
        assert not isinstance(exc_info.value, ConflictError)
        assert exc_info.value.reason.startswith("routerules.config.istio.io is forbidden")
        assert exc_info.value.__cause__ is mock_api.create_namespaced_custom_object.side_effect

    def test_reason_without_body(self, handler: RouteRuleHandler, mock_api: MagicMock) -> None:
        mock_api.create_namespaced_custom_object.side_effect = api_error(404, "Not Found")

        with pytest.raises(RegistrationError, match="Not Found"):
            handler.register(build_route_rule("r", False, "svc"))

    def test_transport_errors_propagate(
        self, handler: RouteRuleHandler, mock_api: MagicMock
    ) -> None:
        mock_api.create_namespaced_custom_object.side_effect = ConnectionRefusedError("refused")

        with pytest.raises(ConnectionRefusedError):
            handler.register(build_route_rule("r", False, "svc"))

    def test_no_retry(self, handler: RouteRuleHandler, mock_api: MagicMock) -> None:
        mock_api.create_namespaced_custom_object.side_effect = api_error(503, "Unavailable")

        with pytest.raises(RegistrationError):
            handler.register(build_route_rule("r", False, "svc"))
        assert mock_api.create_namespaced_custom_object.call_count == 1


class TestRead:
    def test_get_registered(self, handler: RouteRuleHandler, fake_api: FakeCustomObjectsApi) -> None:
        handler.register(build_route_rule("front-route", False, "frontend"))
        stored = handler.get("front-route")
        assert stored is not None
        assert stored["spec"]["destination"]["name"] == "frontend"

    def test_get_missing(self, handler: RouteRuleHandler, fake_api: FakeCustomObjectsApi) -> None:
        assert handler.get("nope") is None

    def test_get_other_error_propagates(
        self, handler: RouteRuleHandler, mock_api: MagicMock
    ) -> None:
        mock_api.get_namespaced_custom_object.side_effect = api_error(500, "Internal")
        with pytest.raises(Exception, match="Internal"):
            handler.get("r")

    def test_list_names(self, handler: RouteRuleHandler, fake_api: FakeCustomObjectsApi) -> None:
        handler.register(build_route_rule("reviews", False, "reviews"))
        handler.register(build_route_rule("details", False, "details"))
        assert handler.list_names() == ["details", "reviews"]
        assert handler.list_names(namespace="other") == []
