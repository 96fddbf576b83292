"""Kubernetes integration - connection profile, API handles and error taxonomy."""

from cluster_control.integrations.kubernetes.client import ClusterClient
from cluster_control.integrations.kubernetes.config import (
    ClusterProfile,
    ConnectionConfig,
    ControlSettings,
)
from cluster_control.integrations.kubernetes.exceptions import (
    ApplyError,
    ClientConstructionError,
    ClusterControlError,
    ConfigurationError,
    DeleteError,
    InspectionError,
    KubectlNotFoundError,
    ManifestError,
    ResourceAccessError,
    ResourceNotFoundError,
)
from cluster_control.integrations.kubernetes.kubectl_client import KubectlClient

__all__ = [
    "ApplyError",
    "ClientConstructionError",
    "ClusterClient",
    "ClusterControlError",
    "ClusterProfile",
    "ConfigurationError",
    "ConnectionConfig",
    "ControlSettings",
    "DeleteError",
    "InspectionError",
    "KubectlClient",
    "KubectlNotFoundError",
    "ManifestError",
    "ResourceAccessError",
    "ResourceNotFoundError",
]
