"""Kubernetes API handle factory.

Builds typed, custom-object and dynamic API handles from a
:class:`ClusterProfile`, one fresh handle per call, and translates
Kubernetes API exceptions into the cluster control error taxonomy.
"""

from __future__ import annotations

import os
import tempfile
import uuid
from typing import TYPE_CHECKING, Any

from cluster_control.integrations.kubernetes.config import ControlSettings
from cluster_control.integrations.kubernetes.exceptions import (
    ClientConstructionError,
    ClusterControlError,
    ResourceAccessError,
    ResourceNotFoundError,
)
from cluster_control.logging.config import get_logger

if TYPE_CHECKING:
    from kubernetes.client import (
        ApiClient,
        AppsV1Api,
        CoreV1Api,
        CustomObjectsApi,
    )
    from kubernetes.dynamic import DynamicClient

    from cluster_control.integrations.kubernetes.config import ClusterProfile

DISCOVERY_CACHE_PREFIX = "clusterctl-discovery-"


def in_memory_discoverer() -> type:
    """Return a ``LazyDiscoverer`` subclass that never persists its cache."""
    from kubernetes.dynamic.discovery import LazyDiscoverer

    class InMemoryDiscoverer(LazyDiscoverer):
        def _write_cache(self) -> None:
            return None

    return InMemoryDiscoverer


def _unwritten_cache_path() -> str:
    # A path that does not exist makes discovery start from an empty cache
    return os.path.join(
        tempfile.gettempdir(), f"{DISCOVERY_CACHE_PREFIX}{uuid.uuid4().hex}.json"
    )


class ClusterClient:
    """Per-call Kubernetes API handle factory for one cluster.

    Holds only the immutable profile and settings. Every accessor derives
    a new connection configuration and returns a new handle, so concurrent
    callers never share client state.

    Example:
        ```python
        from cluster_control.integrations.kubernetes import ClusterClient, ClusterProfile

        profile = ClusterProfile(api_endpoint="10.0.0.1:6443", bearer_token=token)
        client = ClusterClient(profile)
        nodes = client.core_v1().list_node()
        ```
    """

    def __init__(
        self,
        profile: ClusterProfile,
        settings: ControlSettings | None = None,
    ) -> None:
        """Initialize the factory.

        Args:
            profile: Connection profile for the target cluster.
            settings: Control settings; defaults are used when omitted.
        """
        self._profile = profile
        self._settings = settings or ControlSettings()
        self._log = get_logger(__name__, level=self._settings.log_level, cluster=profile.host)

    @property
    def profile(self) -> ClusterProfile:
        """The connection profile handles are built from."""
        return self._profile

    @property
    def settings(self) -> ControlSettings:
        """Control settings shared with managers built on this client."""
        return self._settings

    # =========================================================================
    # API Handle Construction
    # =========================================================================

    def api_client(self) -> ApiClient:
        """Build a fresh ``ApiClient`` from the profile.

        Raises:
            ClientConstructionError: If the configuration cannot be built.
        """
        from kubernetes.client import ApiClient

        try:
            configuration = self._profile.derive_connection_config().to_kubernetes_configuration()
            return ApiClient(configuration)
        except Exception as e:
            self._log.error("api_client_construction_failed", error=str(e))
            raise ClientConstructionError(
                message=f"Cannot build Kubernetes API client for {self._profile.host}: {e}",
                original_error=e,
            ) from e

    def core_v1(self) -> CoreV1Api:
        """Build a CoreV1Api handle (services, namespaces, nodes, configmaps)."""
        from kubernetes.client import CoreV1Api

        return CoreV1Api(self.api_client())

    def apps_v1(self) -> AppsV1Api:
        """Build an AppsV1Api handle (deployments, daemonsets, statefulsets)."""
        from kubernetes.client import AppsV1Api

        return AppsV1Api(self.api_client())

    def custom_objects(self) -> CustomObjectsApi:
        """Build a CustomObjectsApi handle for CRD-backed kinds."""
        from kubernetes.client import CustomObjectsApi

        return CustomObjectsApi(self.api_client())

    def dynamic(self) -> DynamicClient:
        """Build a ``DynamicClient`` whose discovery results live only in memory.

        Construction runs API discovery against the cluster, so an
        unreachable endpoint or rejected credential surfaces here as an
        access failure. Discovery results are never written to disk, so no
        later call and no other process reuses them.

        Raises:
            ClientConstructionError: If the API client cannot be built from the profile.
            ResourceAccessError: If discovery fails.
        """
        from kubernetes.dynamic import DynamicClient

        api_client = self.api_client()
        try:
            return DynamicClient(
                api_client,
                cache_file=_unwritten_cache_path(),
                discoverer=in_memory_discoverer(),
            )
        except Exception as e:
            self._log.error("api_discovery_failed", error=str(e))
            status = getattr(e, "status", None)
            reason = getattr(e, "reason", None)
            raise ResourceAccessError(
                message=f"API discovery against {self._profile.host} failed: {e}",
                status_code=status if isinstance(status, int) else None,
                reason=reason if isinstance(reason, str) else None,
            ) from e

    # =========================================================================
    # Error Translation
    # =========================================================================

    @staticmethod
    def translate_api_exception(
        e: Exception,
        resource_type: str | None = None,
        resource_name: str | None = None,
        namespace: str | None = None,
    ) -> ClusterControlError:
        """Translate a kubernetes ApiException to a cluster control exception.

        Args:
            e: The original exception.
            resource_type: Type of resource being operated on.
            resource_name: Name of the resource.
            namespace: Namespace of the resource.

        Returns:
            :class:`ResourceNotFoundError` for a 404, :class:`ResourceAccessError`
            otherwise. Cluster control errors pass through unchanged.
        """
        from kubernetes.client import ApiException

        if isinstance(e, ClusterControlError):
            return e

        if not isinstance(e, ApiException):
            return ResourceAccessError(
                message=f"Kubernetes API request failed: {e}",
                resource_type=resource_type,
                resource_name=resource_name,
                namespace=namespace,
            )

        if e.status == 404:
            return ResourceNotFoundError(
                resource_type=resource_type,
                resource_name=resource_name,
                namespace=namespace,
            )

        return ResourceAccessError(
            message=e.reason or f"Kubernetes API error: {e.status}",
            status_code=e.status,
            resource_type=resource_type,
            resource_name=resource_name,
            namespace=namespace,
            reason=e.reason,
        )

    # =========================================================================
    # Connection Check
    # =========================================================================

    def get_cluster_version(self) -> str:
        """Get the Kubernetes cluster version string.

        Returns:
            Kubernetes version (e.g., "v1.28").

        Raises:
            ResourceAccessError: If the cluster is unreachable.
        """
        from kubernetes.client import VersionApi

        try:
            version_info = VersionApi(self.api_client()).get_code()
        except ClientConstructionError:
            raise
        except Exception as e:
            raise self.translate_api_exception(e, "Version") from e
        return f"v{version_info.major}.{version_info.minor}"

    def describe(self) -> dict[str, Any]:
        """Connection facts safe to log or print (no credentials)."""
        config = self._profile.derive_connection_config()
        return {
            "host": config.host,
            "verify_ssl": config.verify_ssl,
            "ca_cert_path": config.ca_cert_path,
        }
