"""Rolling restart of workloads.

A restart patches the ``kubectl.kubernetes.io/restartedAt`` annotation on
the pod template, the same mechanism as ``kubectl rollout restart``. The
controller then replaces pods according to the workload's update strategy.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import UTC, datetime
from typing import Any

from cluster_control.integrations.kubernetes.exceptions import ResourceAccessError
from cluster_control.services.kubernetes.base import K8sBaseManager

RESTARTED_AT_ANNOTATION = "kubectl.kubernetes.io/restartedAt"

# kind -> (display kind, AppsV1Api patch method)
RESTARTABLE_KINDS: dict[str, tuple[str, str]] = {
    "deployment": ("Deployment", "patch_namespaced_deployment"),
    "statefulset": ("StatefulSet", "patch_namespaced_stateful_set"),
    "daemonset": ("DaemonSet", "patch_namespaced_daemon_set"),
}


@dataclass
class RestartResult:
    """A restart directive accepted by the API server."""

    kind: str
    name: str
    namespace: str
    restarted_at: str


class RolloutManager(K8sBaseManager):
    """Trigger rolling restarts. Completion of the rollout is not awaited."""

    _entity_name = "rollout"

    def restart(self, namespace: str, name: str, kind: str = "deployment") -> RestartResult:
        """Restart a workload by bumping its pod template annotation.

        Args:
            namespace: Workload namespace.
            name: Workload name.
            kind: ``deployment``, ``statefulset`` or ``daemonset``.

        Returns:
            The accepted restart directive.

        Raises:
            ResourceNotFoundError: If the workload does not exist.
            ResourceAccessError: If the kind is unsupported or the patch is rejected.
        """
        try:
            display_kind, method = RESTARTABLE_KINDS[kind.lower()]
        except KeyError:
            raise ResourceAccessError(
                message=(
                    f"Cannot restart kind '{kind}'; "
                    f"supported: {', '.join(sorted(RESTARTABLE_KINDS))}"
                ),
                resource_type=kind,
                resource_name=name,
                namespace=namespace,
            ) from None

        restarted_at = datetime.now(UTC).strftime("%Y-%m-%dT%H:%M:%SZ")
        self._log.info("restarting_workload", kind=display_kind, name=name, namespace=namespace)
        apps_v1 = self._client.apps_v1()
        try:
            getattr(apps_v1, method)(
                name=name, namespace=namespace, body=self._restart_patch(restarted_at)
            )
        except Exception as e:
            self._handle_api_error(e, display_kind, name, namespace)

        self._log.info("restarted_workload", kind=display_kind, name=name, namespace=namespace)
        return RestartResult(
            kind=display_kind,
            name=name,
            namespace=namespace,
            restarted_at=restarted_at,
        )

    @staticmethod
    def _restart_patch(restarted_at: str) -> dict[str, Any]:
        return {
            "spec": {
                "template": {"metadata": {"annotations": {RESTARTED_AT_ANNOTATION: restarted_at}}}
            }
        }
