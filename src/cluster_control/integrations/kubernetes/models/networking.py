"""Service display models."""

from __future__ import annotations

from typing import Any, ClassVar

from pydantic import Field

from cluster_control.integrations.kubernetes.models.base import (
    K8sEntityBase,
    _metadata_fields,
    _safe_get,
)


class ServicePort(K8sEntityBase):
    """Service port definition."""

    _entity_name: ClassVar[str] = "serviceport"

    port: int = Field(description="Service port number")
    target_port: str | None = Field(default=None, description="Target port")
    protocol: str = Field(default="TCP", description="Protocol")
    node_port: int | None = Field(default=None, description="Node port")

    @classmethod
    def from_k8s_object(cls, obj: Any) -> ServicePort:
        """Create from a kubernetes V1ServicePort object."""
        target_port = getattr(obj, "target_port", None)
        return cls(
            name=getattr(obj, "name", "") or "",
            port=getattr(obj, "port", 0),
            target_port=str(target_port) if target_port is not None else None,
            protocol=getattr(obj, "protocol", "TCP") or "TCP",
            node_port=getattr(obj, "node_port", None),
        )


class ServiceSummary(K8sEntityBase):
    """Service display model."""

    _entity_name: ClassVar[str] = "service"

    type: str = Field(default="ClusterIP", description="Service type")
    cluster_ip: str | None = Field(default=None, description="Cluster IP")
    ports: list[ServicePort] = Field(default_factory=list, description="Service ports")
    selector: dict[str, str] | None = Field(default=None, description="Pod selector")

    @classmethod
    def from_k8s_object(cls, obj: Any) -> ServiceSummary:
        """Create from a kubernetes V1Service object."""
        spec = getattr(obj, "spec", None)
        ports = _safe_get(spec, "ports") or []
        selector = _safe_get(spec, "selector")
        return cls(
            **_metadata_fields(obj),
            type=_safe_get(spec, "type", default="ClusterIP"),
            cluster_ip=_safe_get(spec, "cluster_ip"),
            ports=[ServicePort.from_k8s_object(p) for p in ports],
            selector=dict(selector) if selector else None,
        )
