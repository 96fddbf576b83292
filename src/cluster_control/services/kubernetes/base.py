"""Base manager for cluster control service managers.

Provides shared infrastructure for all managers: the per-call handle
factory, a logger filtered at the configured level, and error translation.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, NoReturn

from cluster_control.logging.config import get_logger

if TYPE_CHECKING:
    from cluster_control.integrations.kubernetes.client import ClusterClient
    from cluster_control.integrations.kubernetes.config import ControlSettings


class K8sBaseManager:
    """Base class for cluster control managers.

    Subclasses set ``_entity_name`` for structured log context.

    Example:
        >>> class RolloutManager(K8sBaseManager):
        ...     _entity_name = "rollout"
    """

    _entity_name: str = ""

    def __init__(self, client: ClusterClient) -> None:
        """Initialize the manager.

        Args:
            client: Per-call API handle factory for the target cluster.
        """
        self._client = client
        self._log = get_logger(
            __name__,
            level=client.settings.log_level,
            entity=self._entity_name,
        )

    @property
    def settings(self) -> ControlSettings:
        """Control settings this manager was constructed with."""
        return self._client.settings

    def _handle_api_error(
        self,
        e: Exception,
        resource_type: str | None = None,
        resource_name: str | None = None,
        namespace: str | None = None,
    ) -> NoReturn:
        """Translate a Kubernetes API exception and re-raise.

        Args:
            e: The original exception (typically ApiException).
            resource_type: Type of resource being operated on.
            resource_name: Name of the resource.
            namespace: Namespace of the resource.

        Raises:
            ClusterControlError: Always raises an appropriate subclass.
        """
        error = self._client.translate_api_exception(
            e,
            resource_type=resource_type,
            resource_name=resource_name,
            namespace=namespace,
        )
        if error is e:
            raise error
        raise error from e
