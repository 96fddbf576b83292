"""Typed operations for well-known Kubernetes resource kinds.

Each operation builds its own API handle from the cluster profile.
Absence raises :class:`ResourceNotFoundError`, except for
:meth:`ResourceManager.resource_definition_exists`, which answers False.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from cluster_control.integrations.kubernetes.exceptions import ResourceNotFoundError
from cluster_control.integrations.kubernetes.models import ServicePort
from cluster_control.integrations.kubernetes.models.unstructured import (
    CORE_GROUP,
    ResourceCoordinate,
    ResourceNotFound,
    UnstructuredObject,
)
from cluster_control.services.kubernetes.base import K8sBaseManager
from cluster_control.services.kubernetes.resource_accessor import ResourceAccessor

if TYPE_CHECKING:
    from kubernetes.client import (
        V1ConfigMap,
        V1DaemonSet,
        V1Deployment,
        V1Namespace,
        V1Node,
        V1Service,
    )

    from cluster_control.integrations.kubernetes.client import ClusterClient

SERVICES = ResourceCoordinate(CORE_GROUP, "v1", "services")
CUSTOM_RESOURCE_DEFINITIONS = ResourceCoordinate(
    "apiextensions.k8s.io", "v1", "customresourcedefinitions"
)


class ResourceManager(K8sBaseManager):
    """Get, list and update services, workloads and cluster-scoped kinds."""

    _entity_name = "resource"

    def __init__(self, client: ClusterClient, accessor: ResourceAccessor | None = None) -> None:
        super().__init__(client)
        self._accessor = accessor or ResourceAccessor(client)

    # =========================================================================
    # Services
    # =========================================================================

    def get_service(self, namespace: str, name: str) -> V1Service:
        """Get a service by name."""
        self._log.debug("getting_service", name=name, namespace=namespace)
        core_v1 = self._client.core_v1()
        try:
            return core_v1.read_namespaced_service(name=name, namespace=namespace)
        except Exception as e:
            self._handle_api_error(e, "Service", name, namespace)

    def list_services(self, namespace: str, label_selector: str | None = None) -> list[V1Service]:
        """List services in a namespace, in the order the cluster reports them."""
        self._log.debug("listing_services", namespace=namespace, selector=label_selector)
        core_v1 = self._client.core_v1()
        kwargs: dict[str, Any] = {}
        if label_selector:
            kwargs["label_selector"] = label_selector
        try:
            result = core_v1.list_namespaced_service(namespace=namespace, **kwargs)
        except Exception as e:
            self._handle_api_error(e, "Service", None, namespace)
        items = list(result.items or [])
        self._log.debug("listed_services", count=len(items), namespace=namespace)
        return items

    def update_service(self, namespace: str, service: V1Service) -> V1Service:
        """Replace a service with the given full object."""
        name = service.metadata.name
        self._log.info("updating_service", name=name, namespace=namespace)
        core_v1 = self._client.core_v1()
        try:
            result = core_v1.replace_namespaced_service(
                name=name, namespace=namespace, body=service
            )
        except Exception as e:
            self._handle_api_error(e, "Service", name, namespace)
        self._log.info("updated_service", name=name, namespace=namespace)
        return result

    def get_service_ports(self, namespace: str, name: str) -> list[ServicePort]:
        """Get the declared ports of a service."""
        service = self.get_service(namespace, name)
        ports = service.spec.ports if service.spec else None
        return [ServicePort.from_k8s_object(p) for p in ports or []]

    def get_service_selector(self, namespace: str, name: str) -> dict[str, str]:
        """Get a service's label selector, read through the generic accessor.

        Returns:
            The selector; empty when the service declares none.

        Raises:
            ResourceNotFoundError: If the service does not exist.
        """
        result = self._accessor.get(SERVICES.with_name(name, namespace))
        if isinstance(result, ResourceNotFound):
            raise ResourceNotFoundError(
                resource_type="Service", resource_name=name, namespace=namespace
            )
        selector = result.get("spec", "selector", default={}) or {}
        return {str(k): str(v) for k, v in selector.items()}

    # =========================================================================
    # Workloads
    # =========================================================================

    def get_deployment(self, namespace: str, name: str) -> V1Deployment:
        """Get a deployment by name."""
        self._log.debug("getting_deployment", name=name, namespace=namespace)
        apps_v1 = self._client.apps_v1()
        try:
            return apps_v1.read_namespaced_deployment(name=name, namespace=namespace)
        except Exception as e:
            self._handle_api_error(e, "Deployment", name, namespace)

    def list_deployments(
        self, namespace: str, label_selector: str | None = None
    ) -> list[V1Deployment]:
        """List deployments, filtered server-side by ``label_selector`` when given."""
        self._log.debug("listing_deployments", namespace=namespace, selector=label_selector)
        apps_v1 = self._client.apps_v1()
        kwargs: dict[str, Any] = {}
        if label_selector:
            kwargs["label_selector"] = label_selector
        try:
            result = apps_v1.list_namespaced_deployment(namespace=namespace, **kwargs)
        except Exception as e:
            self._handle_api_error(e, "Deployment", None, namespace)
        items = list(result.items or [])
        self._log.debug("listed_deployments", count=len(items), namespace=namespace)
        return items

    def update_deployment(self, namespace: str, deployment: V1Deployment) -> V1Deployment:
        """Replace a deployment with the given full object."""
        name = deployment.metadata.name
        self._log.info("updating_deployment", name=name, namespace=namespace)
        apps_v1 = self._client.apps_v1()
        try:
            result = apps_v1.replace_namespaced_deployment(
                name=name, namespace=namespace, body=deployment
            )
        except Exception as e:
            self._handle_api_error(e, "Deployment", name, namespace)
        self._log.info("updated_deployment", name=name, namespace=namespace)
        return result

    def get_daemon_set(self, namespace: str, name: str) -> V1DaemonSet:
        """Get a daemonset by name."""
        self._log.debug("getting_daemon_set", name=name, namespace=namespace)
        apps_v1 = self._client.apps_v1()
        try:
            return apps_v1.read_namespaced_daemon_set(name=name, namespace=namespace)
        except Exception as e:
            self._handle_api_error(e, "DaemonSet", name, namespace)

    # =========================================================================
    # Configuration
    # =========================================================================

    def get_config_map(self, namespace: str, name: str) -> V1ConfigMap:
        """Get a config map by name."""
        self._log.debug("getting_config_map", name=name, namespace=namespace)
        core_v1 = self._client.core_v1()
        try:
            return core_v1.read_namespaced_config_map(name=name, namespace=namespace)
        except Exception as e:
            self._handle_api_error(e, "ConfigMap", name, namespace)

    # =========================================================================
    # Cluster-scoped
    # =========================================================================

    def list_namespaces(self) -> list[V1Namespace]:
        """List all namespaces."""
        self._log.debug("listing_namespaces")
        core_v1 = self._client.core_v1()
        try:
            result = core_v1.list_namespace()
        except Exception as e:
            self._handle_api_error(e, "Namespace")
        return list(result.items or [])

    def list_nodes(self) -> list[V1Node]:
        """List all nodes."""
        self._log.debug("listing_nodes")
        core_v1 = self._client.core_v1()
        try:
            result = core_v1.list_node()
        except Exception as e:
            self._handle_api_error(e, "Node")
        return list(result.items or [])

    # =========================================================================
    # Custom Resource Definitions
    # =========================================================================

    def get_resource_definition(self, name: str) -> UnstructuredObject | ResourceNotFound:
        """Get a CustomResourceDefinition, e.g. ``widgets.example.io``."""
        return self._accessor.get(CUSTOM_RESOURCE_DEFINITIONS.with_name(name))

    def resource_definition_exists(self, name: str) -> bool:
        """Check whether a CustomResourceDefinition is installed.

        Absence is an ordinary ``False``; any other failure still raises.
        """
        exists = bool(self.get_resource_definition(name))
        self._log.debug("checked_resource_definition", name=name, exists=exists)
        return exists
