"""Single entry point wiring every cluster control manager to one profile."""

from __future__ import annotations

from cluster_control.integrations.kubernetes.client import ClusterClient
from cluster_control.integrations.kubernetes.config import ClusterProfile, ControlSettings
from cluster_control.logging.config import get_logger
from cluster_control.services.kubernetes.compliance_manager import ComplianceManager
from cluster_control.services.kubernetes.manifest_manager import ManifestManager
from cluster_control.services.kubernetes.mesh_manager import MeshManager
from cluster_control.services.kubernetes.resource_accessor import ResourceAccessor
from cluster_control.services.kubernetes.resource_manager import ResourceManager
from cluster_control.services.kubernetes.rollout_manager import RolloutManager
from cluster_control.services.kubernetes.service_resolver import ServiceResolver


class ClusterControl:
    """All control operations for one cluster.

    Managers hold no API handles of their own; each call builds what it
    needs from the immutable profile, so one instance may be shared across
    threads.

    Example:
        ```python
        control = ClusterControl(ClusterProfile(api_endpoint="10.0.0.1:6443", bearer_token=token))
        control.manifests.apply_content(manifest_text)
        control.rollouts.restart("default", "web")
        ```
    """

    def __init__(self, profile: ClusterProfile, settings: ControlSettings | None = None) -> None:
        self.client = ClusterClient(profile, settings)
        self.accessor = ResourceAccessor(self.client)
        self.resources = ResourceManager(self.client, self.accessor)
        self.mesh = MeshManager(self.client)
        self.manifests = ManifestManager(self.client)
        self.services = ServiceResolver(self.client, self.resources)
        self.rollouts = RolloutManager(self.client)
        self.compliance = ComplianceManager(self.client)
        get_logger(__name__, level=self.client.settings.log_level).debug(
            "cluster_control_ready", cluster=profile.host
        )

    @property
    def profile(self) -> ClusterProfile:
        return self.client.profile

    @property
    def settings(self) -> ControlSettings:
        return self.client.settings
