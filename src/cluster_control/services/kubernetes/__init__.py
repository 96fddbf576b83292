"""Cluster control service managers."""

from cluster_control.services.kubernetes.compliance_manager import (
    ComplianceManager,
    ComplianceViolation,
    NodeRuntimeReport,
    RuntimeComplianceResult,
)
from cluster_control.services.kubernetes.control import ClusterControl
from cluster_control.services.kubernetes.manifest_manager import (
    ManifestManager,
    ManifestOperationResult,
    ValidationResult,
)
from cluster_control.services.kubernetes.mesh_manager import MeshManager
from cluster_control.services.kubernetes.resource_accessor import ResourceAccessor
from cluster_control.services.kubernetes.resource_manager import ResourceManager
from cluster_control.services.kubernetes.rollout_manager import RestartResult, RolloutManager
from cluster_control.services.kubernetes.selector import (
    format_label_selector,
    service_matches_selector,
)
from cluster_control.services.kubernetes.service_resolver import ServiceResolver

__all__ = [
    "ClusterControl",
    "ComplianceManager",
    "ComplianceViolation",
    "ManifestManager",
    "ManifestOperationResult",
    "MeshManager",
    "NodeRuntimeReport",
    "ResourceAccessor",
    "ResourceManager",
    "RestartResult",
    "RolloutManager",
    "RuntimeComplianceResult",
    "ServiceResolver",
    "ValidationResult",
    "format_label_selector",
    "service_matches_selector",
]
