"""Kubernetes resource models."""

from cluster_control.integrations.kubernetes.models.base import K8sEntityBase
from cluster_control.integrations.kubernetes.models.cluster import NamespaceSummary
from cluster_control.integrations.kubernetes.models.networking import (
    ServicePort,
    ServiceSummary,
)
from cluster_control.integrations.kubernetes.models.unstructured import (
    ResourceCoordinate,
    ResourceNotFound,
    UnstructuredObject,
)
from cluster_control.integrations.kubernetes.models.workloads import DeploymentSummary

__all__ = [
    "DeploymentSummary",
    "K8sEntityBase",
    "NamespaceSummary",
    "ResourceCoordinate",
    "ResourceNotFound",
    "ServicePort",
    "ServiceSummary",
    "UnstructuredObject",
]
