"""Node container-runtime compliance check.

Gates install workflows on every node running the approved container
runtime. The runtime is read from ``status.nodeInfo.containerRuntimeVersion``
(e.g. ``containerd://1.7.2``), whose URI scheme names the runtime.
"""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass
from typing import Any
from urllib.parse import urlsplit

from cluster_control.integrations.kubernetes.exceptions import InspectionError
from cluster_control.integrations.kubernetes.models.base import _safe_get
from cluster_control.services.kubernetes.base import K8sBaseManager


@dataclass(frozen=True)
class NodeRuntimeReport:
    """Runtime reported by one node."""

    node_name: str
    runtime_identifier: str
    scheme: str


@dataclass(frozen=True)
class ComplianceViolation:
    """The first node found running a runtime other than the approved one."""

    node_name: str
    runtime_identifier: str
    scheme: str
    reason: str


@dataclass(frozen=True)
class RuntimeComplianceResult:
    """Outcome of a runtime check. A violation is a result, not an error."""

    compliant: bool
    approved_runtime: str
    nodes_inspected: int
    violation: ComplianceViolation | None = None

    @property
    def reason(self) -> str:
        if self.violation is None:
            return f"all nodes run {self.approved_runtime}"
        return self.violation.reason


class ComplianceManager(K8sBaseManager):
    """Check that cluster nodes run the approved container runtime."""

    _entity_name = "compliance"

    @property
    def approved_runtime(self) -> str:
        return self.settings.approved_runtime

    def check_node_runtime(self) -> RuntimeComplianceResult:
        """Verify every node reports the approved runtime.

        Stops at the first non-compliant node; later nodes are not inspected.

        Returns:
            A compliant result, or one carrying the :class:`ComplianceViolation`.

        Raises:
            ClientConstructionError: If the API handle cannot be built.
            InspectionError: If nodes cannot be listed or a runtime string
                cannot be parsed.
        """
        inspected = 0
        for report in self._iter_reports():
            inspected += 1
            if report.scheme != self.approved_runtime:
                violation = ComplianceViolation(
                    node_name=report.node_name,
                    runtime_identifier=report.runtime_identifier,
                    scheme=report.scheme,
                    reason=(
                        f"cluster has nodes not running {self.approved_runtime}; "
                        "installation requirements are not met"
                    ),
                )
                self._log.warning(
                    "non_compliant_node_runtime",
                    node=report.node_name,
                    runtime=report.runtime_identifier,
                    approved=self.approved_runtime,
                )
                return RuntimeComplianceResult(
                    compliant=False,
                    approved_runtime=self.approved_runtime,
                    nodes_inspected=inspected,
                    violation=violation,
                )

        self._log.info("node_runtime_compliant", nodes=inspected, approved=self.approved_runtime)
        return RuntimeComplianceResult(
            compliant=True,
            approved_runtime=self.approved_runtime,
            nodes_inspected=inspected,
        )

    def node_runtime_reports(self) -> list[NodeRuntimeReport]:
        """Runtime reports for every node, without short-circuiting."""
        return list(self._iter_reports())

    def _iter_reports(self) -> Iterator[NodeRuntimeReport]:
        for node in self._list_nodes():
            yield self._runtime_report(node)

    def _list_nodes(self) -> list[Any]:
        core_v1 = self._client.core_v1()
        try:
            result = core_v1.list_node()
        except Exception as e:
            self._log.error("list_nodes_failed", error=str(e))
            raise InspectionError(
                message=f"Failed to list cluster nodes: {e}",
                original_error=e,
            ) from e
        return list(result.items or [])

    def _runtime_report(self, node: Any) -> NodeRuntimeReport:
        name = _safe_get(node, "metadata", "name", default="")
        runtime = _safe_get(node, "status", "node_info", "container_runtime_version")
        if not isinstance(runtime, str):
            raise InspectionError(
                message=f"Node '{name}' does not report a container runtime",
                node_name=name,
            )
        try:
            scheme = urlsplit(runtime).scheme
        except ValueError as e:
            self._log.error("runtime_parse_failed", node=name, runtime=runtime, error=str(e))
            raise InspectionError(
                message=f"Cannot parse container runtime '{runtime}' of node '{name}': {e}",
                node_name=name,
                original_error=e,
            ) from e
        return NodeRuntimeReport(node_name=name, runtime_identifier=runtime, scheme=scheme)
