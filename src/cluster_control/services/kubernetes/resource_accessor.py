"""Generic, schema-less resource access.

Reads and writes any resource kind addressed by a
:class:`ResourceCoordinate` through the Kubernetes dynamic client.
Absence is reported as a :class:`ResourceNotFound` value; every other
failure raises :class:`ResourceAccessError`.
"""

from __future__ import annotations

import copy
from collections.abc import Mapping
from typing import TYPE_CHECKING, Any, NoReturn

from cluster_control.integrations.kubernetes.exceptions import (
    ClusterControlError,
    ResourceAccessError,
)
from cluster_control.integrations.kubernetes.models.unstructured import (
    CORE_GROUP,
    ResourceCoordinate,
    ResourceNotFound,
    UnstructuredObject,
)
from cluster_control.services.kubernetes.base import K8sBaseManager

if TYPE_CHECKING:
    from kubernetes.dynamic import DynamicClient
    from kubernetes.dynamic.resource import Resource

CORE_API_PREFIX = "api"
GROUP_API_PREFIX = "apis"


def _is_not_found(e: Exception) -> bool:
    """True for a 404 response or a kind the cluster does not serve."""
    from kubernetes.dynamic.exceptions import NotFoundError, ResourceNotFoundError

    return isinstance(e, (NotFoundError, ResourceNotFoundError))


def _to_mapping(result: Any) -> dict[str, Any]:
    """Convert a dynamic client ``ResourceInstance`` to a plain dict."""
    if isinstance(result, Mapping):
        return dict(result)
    to_dict = getattr(result, "to_dict", None)
    if to_dict is None:
        raise ResourceAccessError(
            message=f"Unexpected response type from API: {type(result).__name__}"
        )
    return to_dict()


class ResourceAccessor(K8sBaseManager):
    """Get, replace and list arbitrary resources by coordinate.

    Example:
        ```python
        coordinate = ResourceCoordinate("apps", "v1", "deployments", "default", "web")
        result = accessor.get(coordinate)
        if result:
            print(result.labels)
        ```
    """

    _entity_name = "resource"

    def _resource_api(self, dynamic: DynamicClient, coordinate: ResourceCoordinate) -> Resource:
        prefix = CORE_API_PREFIX if coordinate.group == CORE_GROUP else GROUP_API_PREFIX
        return dynamic.resources.get(
            prefix=prefix,
            group=coordinate.group,
            api_version=coordinate.version,
            name=coordinate.resource,
        )

    def get(self, coordinate: ResourceCoordinate) -> UnstructuredObject | ResourceNotFound:
        """Fetch one object as the cluster reports it.

        Args:
            coordinate: Coordinate including the object name.

        Returns:
            The object, or :class:`ResourceNotFound` if it does not exist.

        Raises:
            ClientConstructionError: If the API client cannot be built from the profile.
            ResourceAccessError: On any failure other than absence, discovery included.
        """
        self._require_name(coordinate)
        self._log.debug("getting_resource", coordinate=str(coordinate))
        dynamic = self._client.dynamic()
        try:
            api = self._resource_api(dynamic, coordinate)
            result = api.get(name=coordinate.name, namespace=coordinate.namespace)
            return UnstructuredObject(_to_mapping(result))
        except Exception as e:
            return self._not_found_or_raise(e, coordinate)

    def update(
        self,
        coordinate: ResourceCoordinate,
        obj: UnstructuredObject | Mapping[str, Any],
    ) -> UnstructuredObject | ResourceNotFound:
        """Replace an object with the given full representation.

        No merge or patch is performed; the caller supplies the complete
        document, including ``metadata.resourceVersion`` when optimistic
        concurrency is wanted.

        Returns:
            The stored object, or :class:`ResourceNotFound` if it does not exist.

        Raises:
            ClientConstructionError: If the API client cannot be built from the profile.
            ResourceAccessError: On any failure other than absence, discovery included.
        """
        self._require_name(coordinate)
        body = obj.to_dict() if isinstance(obj, UnstructuredObject) else copy.deepcopy(dict(obj))
        body.setdefault("metadata", {}).setdefault("name", coordinate.name)
        self._log.info("updating_resource", coordinate=str(coordinate))
        dynamic = self._client.dynamic()
        try:
            api = self._resource_api(dynamic, coordinate)
            result = api.replace(body=body, name=coordinate.name, namespace=coordinate.namespace)
            self._log.info("updated_resource", coordinate=str(coordinate))
            return UnstructuredObject(_to_mapping(result))
        except Exception as e:
            return self._not_found_or_raise(e, coordinate)

    def list(
        self,
        coordinate: ResourceCoordinate,
        label_selector: str | None = None,
    ) -> list[UnstructuredObject]:
        """List objects of a kind, in a namespace or cluster-wide.

        A kind the cluster does not serve lists as empty.

        Raises:
            ClientConstructionError: If the API client cannot be built from the profile.
            ResourceAccessError: On any other failure, discovery included.
        """
        self._log.debug("listing_resources", coordinate=str(coordinate))
        dynamic = self._client.dynamic()
        try:
            api = self._resource_api(dynamic, coordinate)
            kwargs: dict[str, Any] = {"namespace": coordinate.namespace}
            if label_selector:
                kwargs["label_selector"] = label_selector
            result = _to_mapping(api.get(**kwargs))
        except Exception as e:
            if _is_not_found(e):
                return []
            self._raise_access_error(e, coordinate)
        return [UnstructuredObject(item) for item in result.get("items") or []]

    @staticmethod
    def _require_name(coordinate: ResourceCoordinate) -> None:
        if not coordinate.name:
            raise ResourceAccessError(
                message=f"A resource name is required to address a single object: {coordinate}",
                resource_type=coordinate.resource,
                namespace=coordinate.namespace,
            )

    def _not_found_or_raise(
        self, e: Exception, coordinate: ResourceCoordinate
    ) -> ResourceNotFound:
        if _is_not_found(e):
            self._log.debug("resource_not_found", coordinate=str(coordinate))
            return ResourceNotFound(coordinate=coordinate, message=f"{coordinate} not found")
        self._raise_access_error(e, coordinate)

    def _raise_access_error(self, e: Exception, coordinate: ResourceCoordinate) -> NoReturn:
        if isinstance(e, ClusterControlError):
            raise e
        status = getattr(e, "status", None)
        reason = getattr(e, "reason", None)
        self._log.error("resource_access_failed", coordinate=str(coordinate), error=str(e))
        raise ResourceAccessError(
            message=f"Cannot access {coordinate}: {reason or e}",
            status_code=status if isinstance(status, int) else None,
            resource_type=coordinate.resource,
            resource_name=coordinate.name,
            namespace=coordinate.namespace,
            reason=reason if isinstance(reason, str) else None,
        ) from e
