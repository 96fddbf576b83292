"""Shared fixtures for cluster control service tests."""

from __future__ import annotations

from unittest.mock import MagicMock

import pytest

from cluster_control.integrations.kubernetes.client import ClusterClient
from cluster_control.integrations.kubernetes.config import ClusterProfile, ControlSettings


@pytest.fixture
def mock_k8s_client(profile: ClusterProfile, settings: ControlSettings) -> MagicMock:
    """Create a mock ClusterClient.

    Handle builders (core_v1, apps_v1, custom_objects, dynamic) are plain
    MagicMocks. Error translation is the real implementation so managers
    raise the same exceptions they would against a cluster.
    """
    mock_client = MagicMock(spec=ClusterClient)
    mock_client.profile = profile
    mock_client.settings = settings
    mock_client.translate_api_exception.side_effect = ClusterClient.translate_api_exception
    return mock_client
