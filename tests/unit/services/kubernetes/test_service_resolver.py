"""Unit tests for ServiceResolver."""

from __future__ import annotations

from unittest.mock import MagicMock

import pytest
from kubernetes.client import V1ObjectMeta, V1Service, V1ServiceSpec

from cluster_control.integrations.kubernetes.exceptions import ResourceNotFoundError
from cluster_control.services.kubernetes.service_resolver import ServiceResolver


def _service(name: str, selector: dict[str, str] | None) -> V1Service:
    return V1Service(
        metadata=V1ObjectMeta(name=name, namespace="shop"),
        spec=V1ServiceSpec(selector=selector),
    )


@pytest.fixture
def mock_resources() -> MagicMock:
    return MagicMock()


@pytest.fixture
def resolver(mock_k8s_client: MagicMock, mock_resources: MagicMock) -> ServiceResolver:
    """Create a ServiceResolver over a mocked ResourceManager."""
    return ServiceResolver(mock_k8s_client, resources=mock_resources)


@pytest.mark.unit
@pytest.mark.kubernetes
class TestListServicesMatching:
    """Tests for list_services_matching."""

    def test_filters_and_preserves_order(
        self, resolver: ServiceResolver, mock_resources: MagicMock
    ) -> None:
        """Only superset selectors match, in cluster order."""
        mock_resources.list_services.return_value = [
            _service("c", {"app": "web", "tier": "fe"}),
            _service("a", {"app": "api"}),
            _service("b", {"app": "web"}),
        ]

        result = resolver.list_services_matching("shop", {"app": "web"})

        assert [s.metadata.name for s in result] == ["c", "b"]
        mock_resources.list_services.assert_called_once_with("shop")

    def test_no_match_returns_empty(
        self, resolver: ServiceResolver, mock_resources: MagicMock
    ) -> None:
        """No matching service yields an empty list."""
        mock_resources.list_services.return_value = [_service("a", {"app": "api"})]

        assert resolver.list_services_matching("shop", {"app": "web"}) == []

    def test_empty_label_map_matches_all(
        self, resolver: ServiceResolver, mock_resources: MagicMock
    ) -> None:
        """An empty label map returns every service."""
        services = [_service("a", {"app": "api"}), _service("b", None)]
        mock_resources.list_services.return_value = services

        assert resolver.list_services_matching("shop", {}) == services


@pytest.mark.unit
@pytest.mark.kubernetes
class TestDeploymentsBehindService:
    """Tests for deployments_behind_service."""

    def test_passes_selector_to_api(
        self, resolver: ServiceResolver, mock_resources: MagicMock
    ) -> None:
        """The service selector is rendered as a server-side label selector."""
        mock_resources.get_service.return_value = _service("web", {"tier": "fe", "app": "web"})
        mock_resources.list_deployments.return_value = ["deployment"]

        result = resolver.deployments_behind_service("shop", "web")

        assert result == ["deployment"]
        mock_resources.get_service.assert_called_once_with("shop", "web")
        mock_resources.list_deployments.assert_called_once_with(
            "shop", label_selector="app=web,tier=fe"
        )

    def test_selector_matching_nothing_returns_empty(
        self, resolver: ServiceResolver, mock_resources: MagicMock
    ) -> None:
        """A selector that no deployment satisfies yields an empty list, not an error."""
        mock_resources.get_service.return_value = _service("web", {"app": "web"})
        mock_resources.list_deployments.return_value = []

        result = resolver.deployments_behind_service("shop", "web")

        assert result == []
        mock_resources.list_deployments.assert_called_once_with("shop", label_selector="app=web")

    def test_empty_selector_returns_empty(
        self, resolver: ServiceResolver, mock_resources: MagicMock
    ) -> None:
        """A service without a selector addresses no deployments."""
        mock_resources.get_service.return_value = _service("headless", None)

        assert resolver.deployments_behind_service("shop", "headless") == []
        mock_resources.list_deployments.assert_not_called()

    def test_missing_service_raises(
        self, resolver: ServiceResolver, mock_resources: MagicMock
    ) -> None:
        """A missing service propagates ResourceNotFoundError."""
        mock_resources.get_service.side_effect = ResourceNotFoundError(
            resource_type="Service", resource_name="web", namespace="shop"
        )

        with pytest.raises(ResourceNotFoundError):
            resolver.deployments_behind_service("shop", "web")
