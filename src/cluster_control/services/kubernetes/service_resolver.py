"""Resolve which services and deployments a label selector addresses."""

from __future__ import annotations

from collections.abc import Mapping
from typing import TYPE_CHECKING

from cluster_control.services.kubernetes.base import K8sBaseManager
from cluster_control.services.kubernetes.resource_manager import ResourceManager
from cluster_control.services.kubernetes.selector import (
    format_label_selector,
    service_matches_selector,
    service_selector,
)

if TYPE_CHECKING:
    from kubernetes.client import V1Deployment, V1Service

    from cluster_control.integrations.kubernetes.client import ClusterClient


class ServiceResolver(K8sBaseManager):
    """Map services to the deployments they route to."""

    _entity_name = "service_resolver"

    def __init__(self, client: ClusterClient, resources: ResourceManager | None = None) -> None:
        super().__init__(client)
        self._resources = resources or ResourceManager(client)

    def list_services_matching(
        self, namespace: str, label_map: Mapping[str, str]
    ) -> list[V1Service]:
        """List services whose selector contains every entry of ``label_map``.

        Cluster order is preserved.
        """
        services = self._resources.list_services(namespace)
        matched = [s for s in services if service_matches_selector(s, label_map)]
        self._log.debug(
            "matched_services",
            namespace=namespace,
            total=len(services),
            matched=len(matched),
        )
        return matched

    def deployments_behind_service(self, namespace: str, service_name: str) -> list[V1Deployment]:
        """List deployments whose labels satisfy the named service's selector.

        Selection is evaluated by the API server. A service that declares
        no selector addresses no deployments.

        Raises:
            ResourceNotFoundError: If the service does not exist.
        """
        service = self._resources.get_service(namespace, service_name)
        selector = service_selector(service)
        if not selector:
            self._log.debug("service_has_no_selector", name=service_name, namespace=namespace)
            return []
        deployments = self._resources.list_deployments(
            namespace, label_selector=format_label_selector(selector)
        )
        self._log.debug(
            "resolved_service_deployments",
            name=service_name,
            namespace=namespace,
            count=len(deployments),
        )
        return deployments
