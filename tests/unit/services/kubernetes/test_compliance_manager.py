"""Unit tests for ComplianceManager."""

from __future__ import annotations

from unittest.mock import MagicMock, patch

import pytest
from kubernetes.client import (
    ApiException,
    V1Node,
    V1NodeStatus,
    V1NodeSystemInfo,
    V1ObjectMeta,
)

from cluster_control.integrations.kubernetes.config import ControlSettings
from cluster_control.integrations.kubernetes.exceptions import (
    ClientConstructionError,
    InspectionError,
)
from cluster_control.services.kubernetes.compliance_manager import (
    ComplianceManager,
    NodeRuntimeReport,
)


def _node(name: str, runtime: str | None) -> V1Node:
    info = MagicMock(spec=V1NodeSystemInfo)
    info.container_runtime_version = runtime
    return V1Node(metadata=V1ObjectMeta(name=name), status=V1NodeStatus(node_info=info))


@pytest.fixture
def manager(mock_k8s_client: MagicMock) -> ComplianceManager:
    """Create a ComplianceManager with a mocked client."""
    return ComplianceManager(mock_k8s_client)


@pytest.fixture
def core_v1(mock_k8s_client: MagicMock) -> MagicMock:
    return mock_k8s_client.core_v1.return_value


def _set_nodes(core_v1: MagicMock, *nodes: V1Node) -> None:
    core_v1.list_node.return_value = MagicMock(items=list(nodes))


@pytest.mark.unit
@pytest.mark.kubernetes
class TestCheckNodeRuntime:
    """Tests for check_node_runtime."""

    def test_all_compliant(self, manager: ComplianceManager, core_v1: MagicMock) -> None:
        """Every node on containerd is compliant."""
        _set_nodes(
            core_v1,
            _node("n1", "containerd://1.7.2"),
            _node("n2", "containerd://1.6.0"),
        )

        result = manager.check_node_runtime()

        assert result.compliant is True
        assert result.nodes_inspected == 2
        assert result.violation is None
        assert result.reason == "all nodes run containerd"

    def test_violation_names_node(self, manager: ComplianceManager, core_v1: MagicMock) -> None:
        """A docker node is reported as a violation, not an error."""
        _set_nodes(core_v1, _node("n1", "docker://20.10.7"))

        result = manager.check_node_runtime()

        assert result.compliant is False
        assert result.violation is not None
        assert result.violation.node_name == "n1"
        assert result.violation.scheme == "docker"
        assert result.violation.runtime_identifier == "docker://20.10.7"
        assert "not running containerd" in result.reason

    def test_stops_at_first_violation(
        self, manager: ComplianceManager, core_v1: MagicMock
    ) -> None:
        """Nodes after the first violation are not inspected."""
        _set_nodes(
            core_v1,
            _node("n1", "containerd://1.7.2"),
            _node("n2", "containerd://1.7.2"),
            _node("n3", "cri-o://1.28.1"),
            _node("n4", "containerd://1.7.2"),
            _node("n5", "not a uri ::"),
        )

        with patch.object(
            manager, "_runtime_report", wraps=manager._runtime_report
        ) as mock_report:
            result = manager.check_node_runtime()

        assert result.compliant is False
        assert result.violation.node_name == "n3"
        assert result.nodes_inspected == 3
        assert mock_report.call_count == 3

    def test_no_nodes_is_compliant(self, manager: ComplianceManager, core_v1: MagicMock) -> None:
        """An empty node list is vacuously compliant."""
        _set_nodes(core_v1)

        result = manager.check_node_runtime()

        assert result.compliant is True
        assert result.nodes_inspected == 0

    def test_configured_runtime(self, mock_k8s_client: MagicMock, core_v1: MagicMock) -> None:
        """The approved runtime comes from settings."""
        mock_k8s_client.settings = ControlSettings(approved_runtime="CRI-O")
        _set_nodes(core_v1, _node("n1", "cri-o://1.28.1"))

        result = ComplianceManager(mock_k8s_client).check_node_runtime()

        assert result.compliant is True
        assert result.approved_runtime == "cri-o"

    def test_list_failure_raises(self, manager: ComplianceManager, core_v1: MagicMock) -> None:
        """A failed node listing raises InspectionError."""
        core_v1.list_node.side_effect = ApiException(status=403, reason="Forbidden")

        with pytest.raises(InspectionError, match="Failed to list cluster nodes") as exc_info:
            manager.check_node_runtime()

        assert isinstance(exc_info.value.original_error, ApiException)

    def test_construction_failure_raises(
        self, manager: ComplianceManager, mock_k8s_client: MagicMock
    ) -> None:
        """A handle that cannot be built is not an inspection failure."""
        mock_k8s_client.core_v1.side_effect = ClientConstructionError("bad profile")

        with pytest.raises(ClientConstructionError):
            manager.check_node_runtime()

    def test_unparseable_runtime_raises(
        self, manager: ComplianceManager, core_v1: MagicMock
    ) -> None:
        """A runtime string urlsplit rejects raises InspectionError."""
        _set_nodes(core_v1, _node("n1", "containerd://[::1"))

        with pytest.raises(InspectionError) as exc_info:
            manager.check_node_runtime()

        assert exc_info.value.node_name == "n1"

    def test_missing_runtime_raises(self, manager: ComplianceManager, core_v1: MagicMock) -> None:
        """A node that reports no runtime raises InspectionError."""
        _set_nodes(core_v1, _node("n1", None))

        with pytest.raises(InspectionError, match="does not report a container runtime"):
            manager.check_node_runtime()


@pytest.mark.unit
@pytest.mark.kubernetes
class TestNodeRuntimeReports:
    """Tests for node_runtime_reports."""

    def test_reports_every_node(self, manager: ComplianceManager, core_v1: MagicMock) -> None:
        """All nodes are reported, compliant or not."""
        _set_nodes(core_v1, _node("n1", "docker://20.10.7"), _node("n2", "containerd://1.7"))

        reports = manager.node_runtime_reports()

        assert reports == [
            NodeRuntimeReport("n1", "docker://20.10.7", "docker"),
            NodeRuntimeReport("n2", "containerd://1.7", "containerd"),
        ]
