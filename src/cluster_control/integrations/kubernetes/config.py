"""Cluster connection profile and control settings."""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import TYPE_CHECKING, Any

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from cluster_control.integrations.kubernetes.exceptions import ConfigurationError
from cluster_control.logging.config import DEFAULT_LOG_LEVEL, LOG_LEVELS

if TYPE_CHECKING:
    from kubernetes.client import Configuration

DEFAULT_SCHEME = "https://"
DEFAULT_APPROVED_RUNTIME = "containerd"
DEFAULT_KUBECTL_BINARY = "kubectl"
BEARER_PREFIX = "Bearer"
KUBECONFIG_ENTRY = "clusterctl"

_TRUE_VALUES = {"1", "true", "yes", "on"}


def normalize_host(api_endpoint: str) -> str:
    """Return the endpoint with a URL scheme, prepending ``https://`` if absent.

    An empty endpoint is used as given; no default host is substituted.
    """
    if api_endpoint.startswith("http"):
        return api_endpoint
    return DEFAULT_SCHEME + api_endpoint


@dataclass(frozen=True)
class ConnectionConfig:
    """Per-call connection configuration derived from a :class:`ClusterProfile`."""

    host: str
    bearer_token: str = field(repr=False)
    verify_ssl: bool = False
    ca_cert_path: str | None = None

    def to_kubernetes_configuration(self) -> Configuration:
        """Build a fresh ``kubernetes.client.Configuration``.

        urllib3 retries are disabled; the caller owns retry policy.
        """
        from kubernetes.client import Configuration

        configuration = Configuration()
        configuration.host = self.host
        configuration.api_key = {"authorization": self.bearer_token}
        configuration.api_key_prefix = {"authorization": BEARER_PREFIX}
        configuration.verify_ssl = self.verify_ssl
        if self.ca_cert_path:
            configuration.ssl_ca_cert = self.ca_cert_path
        configuration.retries = 0
        return configuration

    def kubeconfig(self) -> dict[str, Any]:
        """Return a single-context kubeconfig document for this cluster.

        Passed to kubectl with ``--kubeconfig`` so the credential never
        appears on a command line and no local context is merged in.
        """
        cluster: dict[str, Any] = {"server": self.host}
        if not self.verify_ssl:
            cluster["insecure-skip-tls-verify"] = True
        elif self.ca_cert_path:
            cluster["certificate-authority"] = self.ca_cert_path

        return {
            "apiVersion": "v1",
            "kind": "Config",
            "clusters": [{"name": KUBECONFIG_ENTRY, "cluster": cluster}],
            "users": [{"name": KUBECONFIG_ENTRY, "user": {"token": self.bearer_token}}],
            "contexts": [
                {
                    "name": KUBECONFIG_ENTRY,
                    "context": {"cluster": KUBECONFIG_ENTRY, "user": KUBECONFIG_ENTRY},
                }
            ],
            "current-context": KUBECONFIG_ENTRY,
        }


class ClusterProfile(BaseModel):
    """API endpoint and bearer credential for one cluster.

    Immutable once constructed. Every operation derives its own
    :class:`ConnectionConfig` from the profile.

    Example:
        >>> profile = ClusterProfile(api_endpoint="cluster.example.com", bearer_token="t")
        >>> profile.derive_connection_config().host
        'https://cluster.example.com'
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    api_endpoint: str
    bearer_token: str = Field(repr=False)
    insecure_skip_tls_verify: bool = True
    ca_cert_path: str | None = None

    @field_validator("ca_cert_path")
    @classmethod
    def validate_ca_cert_path(cls, v: str | None) -> str | None:
        """Expand ~ in the CA bundle path."""
        if v is None:
            return v
        return str(Path(v).expanduser())

    @classmethod
    def create(cls, **values: Any) -> ClusterProfile:
        """Construct a profile, reporting invalid input as :class:`ConfigurationError`."""
        try:
            return cls.model_validate(values)
        except ValidationError as e:
            raise ConfigurationError(f"Invalid cluster profile: {e}") from e

    @classmethod
    def from_env(cls) -> ClusterProfile:
        """Create a profile from environment variables.

        Supported environment variables:
            CLUSTERCTL_API_ENDPOINT: API server address (required)
            CLUSTERCTL_TOKEN: Bearer token (required)
            CLUSTERCTL_INSECURE_SKIP_TLS_VERIFY: Skip certificate checks (default true)
            CLUSTERCTL_CA_CERT: CA bundle used when verification is enabled

        Raises:
            ConfigurationError: If the endpoint or token is not set.
        """
        api_endpoint = os.environ.get("CLUSTERCTL_API_ENDPOINT")
        if api_endpoint is None:
            raise ConfigurationError("CLUSTERCTL_API_ENDPOINT is not set")
        token = os.environ.get("CLUSTERCTL_TOKEN")
        if token is None:
            raise ConfigurationError("CLUSTERCTL_TOKEN is not set")

        values: dict[str, Any] = {"api_endpoint": api_endpoint, "bearer_token": token}
        if (insecure := os.environ.get("CLUSTERCTL_INSECURE_SKIP_TLS_VERIFY")) is not None:
            values["insecure_skip_tls_verify"] = insecure.strip().lower() in _TRUE_VALUES
        if ca_cert := os.environ.get("CLUSTERCTL_CA_CERT"):
            values["ca_cert_path"] = ca_cert
        return cls.create(**values)

    @property
    def host(self) -> str:
        """Normalized API server URL."""
        return normalize_host(self.api_endpoint)

    def derive_connection_config(self) -> ConnectionConfig:
        """Derive a fresh, non-persisted connection configuration."""
        return ConnectionConfig(
            host=self.host,
            bearer_token=self.bearer_token,
            verify_ssl=not self.insecure_skip_tls_verify,
            ca_cert_path=self.ca_cert_path,
        )


class ControlSettings(BaseModel):
    """Settings passed to every cluster control component at construction."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    log_level: str = DEFAULT_LOG_LEVEL
    approved_runtime: str = DEFAULT_APPROVED_RUNTIME
    kubectl_binary: str = DEFAULT_KUBECTL_BINARY
    temp_dir: str | None = None
    kubectl_timeout: int | None = None

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Normalize the level name; unknown names fall back to info."""
        name = v.strip().lower()
        return name if name in LOG_LEVELS else DEFAULT_LOG_LEVEL

    @field_validator("approved_runtime")
    @classmethod
    def validate_approved_runtime(cls, v: str) -> str:
        """Validate the approved runtime is a non-empty URI scheme."""
        if not v.strip():
            raise ValueError("approved_runtime must not be empty")
        return v.strip().lower()

    @field_validator("kubectl_timeout")
    @classmethod
    def validate_kubectl_timeout(cls, v: int | None) -> int | None:
        """Validate timeout is positive when set."""
        if v is not None and v <= 0:
            raise ValueError("kubectl_timeout must be positive")
        return v

    @classmethod
    def from_env(cls, base_config: dict[str, Any] | None = None) -> ControlSettings:
        """Create settings with environment variable overrides.

        Environment variables take precedence over base_config values.

        Supported environment variables:
            CLUSTERCTL_LOG_LEVEL: panic, fatal, error, warn, info, debug or trace
            CLUSTERCTL_APPROVED_RUNTIME: Container runtime scheme required on nodes
            CLUSTERCTL_KUBECTL: Path or name of the kubectl binary
            CLUSTERCTL_TEMP_DIR: Directory for transient manifest files
        """
        config_dict = base_config.copy() if base_config else {}

        if log_level := os.environ.get("CLUSTERCTL_LOG_LEVEL"):
            config_dict["log_level"] = log_level
        if runtime := os.environ.get("CLUSTERCTL_APPROVED_RUNTIME"):
            config_dict["approved_runtime"] = runtime
        if kubectl := os.environ.get("CLUSTERCTL_KUBECTL"):
            config_dict["kubectl_binary"] = kubectl
        if temp_dir := os.environ.get("CLUSTERCTL_TEMP_DIR"):
            config_dict["temp_dir"] = temp_dir

        try:
            return cls.model_validate(config_dict)
        except ValidationError as e:
            raise ConfigurationError(f"Invalid control settings: {e}") from e
