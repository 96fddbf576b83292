"""Workload display models."""

from __future__ import annotations

from typing import Any, ClassVar

from pydantic import Field

from cluster_control.integrations.kubernetes.models.base import (
    K8sEntityBase,
    _metadata_fields,
    _safe_get,
)


class DeploymentSummary(K8sEntityBase):
    """Deployment display model."""

    _entity_name: ClassVar[str] = "deployment"

    replicas: int = Field(default=0, description="Desired replicas")
    ready_replicas: int = Field(default=0, description="Ready replicas")
    available_replicas: int = Field(default=0, description="Available replicas")
    updated_replicas: int = Field(default=0, description="Updated replicas")

    @classmethod
    def from_k8s_object(cls, obj: Any) -> DeploymentSummary:
        """Create from a kubernetes V1Deployment object."""
        return cls(
            **_metadata_fields(obj),
            replicas=_safe_get(obj, "spec", "replicas", default=0) or 0,
            ready_replicas=_safe_get(obj, "status", "ready_replicas", default=0) or 0,
            available_replicas=_safe_get(obj, "status", "available_replicas", default=0) or 0,
            updated_replicas=_safe_get(obj, "status", "updated_replicas", default=0) or 0,
        )
