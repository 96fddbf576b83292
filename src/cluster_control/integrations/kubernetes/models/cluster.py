"""Namespace display models."""

from __future__ import annotations

from typing import Any, ClassVar

from pydantic import Field

from cluster_control.integrations.kubernetes.models.base import (
    K8sEntityBase,
    _metadata_fields,
    _safe_get,
)


class NamespaceSummary(K8sEntityBase):
    """Namespace display model."""

    _entity_name: ClassVar[str] = "namespace"

    status: str = Field(default="Active", description="Namespace phase")

    @classmethod
    def from_k8s_object(cls, obj: Any) -> NamespaceSummary:
        """Create from a kubernetes V1Namespace object."""
        return cls(
            **_metadata_fields(obj),
            status=_safe_get(obj, "status", "phase", default="Active"),
        )
