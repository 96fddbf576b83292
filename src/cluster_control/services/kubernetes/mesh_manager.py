"""Istio mesh traffic policy manager.

Manages EnvoyFilters through the Kubernetes ``CustomObjectsApi``.
Objects are exchanged as :class:`UnstructuredObject` documents.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from cluster_control.integrations.kubernetes.exceptions import ResourceAccessError
from cluster_control.integrations.kubernetes.models.unstructured import UnstructuredObject
from cluster_control.services.kubernetes.base import K8sBaseManager

# networking.istio.io CRD coordinates
ISTIO_NETWORKING_GROUP = "networking.istio.io"
ISTIO_NETWORKING_VERSION = "v1alpha3"
ENVOY_FILTER_PLURAL = "envoyfilters"
ENVOY_FILTER_KIND = "EnvoyFilter"


def _body(envoy_filter: UnstructuredObject | Mapping[str, Any]) -> dict[str, Any]:
    if isinstance(envoy_filter, UnstructuredObject):
        return envoy_filter.to_dict()
    return dict(envoy_filter)


class MeshManager(K8sBaseManager):
    """Manager for Istio EnvoyFilter resources.

    Create and update take the namespace from the object's own metadata.
    """

    _entity_name = "mesh"

    def create_envoy_filter(
        self, envoy_filter: UnstructuredObject | Mapping[str, Any]
    ) -> UnstructuredObject:
        """Create an EnvoyFilter.

        Args:
            envoy_filter: Full EnvoyFilter document with ``metadata.name``
                and ``metadata.namespace``.

        Returns:
            The created object as stored by the cluster.
        """
        body = self._prepare(envoy_filter)
        name, ns = body["metadata"]["name"], body["metadata"]["namespace"]
        self._log.info("creating_envoy_filter", name=name, namespace=ns)
        custom_objects = self._client.custom_objects()
        try:
            result = custom_objects.create_namespaced_custom_object(
                ISTIO_NETWORKING_GROUP,
                ISTIO_NETWORKING_VERSION,
                ns,
                ENVOY_FILTER_PLURAL,
                body,
            )
        except Exception as e:
            self._handle_api_error(e, ENVOY_FILTER_KIND, name, ns)
        self._log.info("created_envoy_filter", name=name, namespace=ns)
        return UnstructuredObject(result)

    def get_envoy_filter(self, namespace: str, name: str) -> UnstructuredObject:
        """Get an EnvoyFilter by name.

        Raises:
            ResourceNotFoundError: If it does not exist.
        """
        self._log.debug("getting_envoy_filter", name=name, namespace=namespace)
        custom_objects = self._client.custom_objects()
        try:
            result = custom_objects.get_namespaced_custom_object(
                ISTIO_NETWORKING_GROUP,
                ISTIO_NETWORKING_VERSION,
                namespace,
                ENVOY_FILTER_PLURAL,
                name,
            )
        except Exception as e:
            self._handle_api_error(e, ENVOY_FILTER_KIND, name, namespace)
        return UnstructuredObject(result)

    def list_envoy_filters(self, namespace: str) -> list[UnstructuredObject]:
        """List EnvoyFilters in a namespace."""
        self._log.debug("listing_envoy_filters", namespace=namespace)
        custom_objects = self._client.custom_objects()
        try:
            result = custom_objects.list_namespaced_custom_object(
                ISTIO_NETWORKING_GROUP,
                ISTIO_NETWORKING_VERSION,
                namespace,
                ENVOY_FILTER_PLURAL,
            )
        except Exception as e:
            self._handle_api_error(e, ENVOY_FILTER_KIND, None, namespace)
        items: list[dict[str, Any]] = result.get("items", [])
        self._log.debug("listed_envoy_filters", count=len(items), namespace=namespace)
        return [UnstructuredObject(item) for item in items]

    def update_envoy_filter(
        self, envoy_filter: UnstructuredObject | Mapping[str, Any]
    ) -> UnstructuredObject:
        """Replace an EnvoyFilter with the given full document."""
        body = self._prepare(envoy_filter)
        name, ns = body["metadata"]["name"], body["metadata"]["namespace"]
        self._log.info("updating_envoy_filter", name=name, namespace=ns)
        custom_objects = self._client.custom_objects()
        try:
            result = custom_objects.replace_namespaced_custom_object(
                ISTIO_NETWORKING_GROUP,
                ISTIO_NETWORKING_VERSION,
                ns,
                ENVOY_FILTER_PLURAL,
                name,
                body,
            )
        except Exception as e:
            self._handle_api_error(e, ENVOY_FILTER_KIND, name, ns)
        self._log.info("updated_envoy_filter", name=name, namespace=ns)
        return UnstructuredObject(result)

    def delete_envoy_filter(self, namespace: str, name: str) -> None:
        """Delete an EnvoyFilter."""
        self._log.info("deleting_envoy_filter", name=name, namespace=namespace)
        custom_objects = self._client.custom_objects()
        try:
            custom_objects.delete_namespaced_custom_object(
                ISTIO_NETWORKING_GROUP,
                ISTIO_NETWORKING_VERSION,
                namespace,
                ENVOY_FILTER_PLURAL,
                name,
            )
        except Exception as e:
            self._handle_api_error(e, ENVOY_FILTER_KIND, name, namespace)
        self._log.info("deleted_envoy_filter", name=name, namespace=namespace)

    @staticmethod
    def _prepare(envoy_filter: UnstructuredObject | Mapping[str, Any]) -> dict[str, Any]:
        body = _body(envoy_filter)
        metadata = body.get("metadata") or {}
        if not metadata.get("name") or not metadata.get("namespace"):
            raise ResourceAccessError(
                message="EnvoyFilter requires metadata.name and metadata.namespace",
                resource_type=ENVOY_FILTER_KIND,
                resource_name=metadata.get("name"),
            )
        body.setdefault("apiVersion", f"{ISTIO_NETWORKING_GROUP}/{ISTIO_NETWORKING_VERSION}")
        body.setdefault("kind", ENVOY_FILTER_KIND)
        return body
