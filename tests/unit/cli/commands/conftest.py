"""Shared fixtures for CLI command tests."""

from __future__ import annotations

from collections.abc import Callable
from unittest.mock import MagicMock

import pytest


@pytest.fixture
def mock_manifest_manager() -> MagicMock:
    """Create a mock ManifestManager."""
    return MagicMock()


@pytest.fixture
def get_manifest_manager(mock_manifest_manager: MagicMock) -> Callable[[], MagicMock]:
    """Create a factory function that returns the mock ManifestManager."""
    return lambda: mock_manifest_manager


@pytest.fixture
def mock_service_resolver() -> MagicMock:
    """Create a mock ServiceResolver."""
    return MagicMock()


@pytest.fixture
def get_service_resolver(mock_service_resolver: MagicMock) -> Callable[[], MagicMock]:
    return lambda: mock_service_resolver


@pytest.fixture
def mock_rollout_manager() -> MagicMock:
    """Create a mock RolloutManager."""
    return MagicMock()


@pytest.fixture
def get_rollout_manager(mock_rollout_manager: MagicMock) -> Callable[[], MagicMock]:
    return lambda: mock_rollout_manager


@pytest.fixture
def mock_compliance_manager() -> MagicMock:
    """Create a mock ComplianceManager."""
    return MagicMock()


@pytest.fixture
def get_compliance_manager(mock_compliance_manager: MagicMock) -> Callable[[], MagicMock]:
    return lambda: mock_compliance_manager


@pytest.fixture
def mock_resource_manager() -> MagicMock:
    """Create a mock ResourceManager."""
    return MagicMock()


@pytest.fixture
def get_resource_manager(mock_resource_manager: MagicMock) -> Callable[[], MagicMock]:
    return lambda: mock_resource_manager


@pytest.fixture
def mock_resource_accessor() -> MagicMock:
    """Create a mock ResourceAccessor."""
    return MagicMock()


@pytest.fixture
def get_resource_accessor(mock_resource_accessor: MagicMock) -> Callable[[], MagicMock]:
    return lambda: mock_resource_accessor


@pytest.fixture
def mock_cluster_client() -> MagicMock:
    """Create a mock ClusterClient."""
    return MagicMock()


@pytest.fixture
def get_cluster_client(mock_cluster_client: MagicMock) -> Callable[[], MagicMock]:
    return lambda: mock_cluster_client
