"""Unit tests for the connection profile and control settings."""

from __future__ import annotations

from pathlib import Path

import pytest
from pydantic import ValidationError

from cluster_control.integrations.kubernetes.config import (
    ClusterProfile,
    ConnectionConfig,
    ControlSettings,
    normalize_host,
)
from cluster_control.integrations.kubernetes.exceptions import ConfigurationError


@pytest.mark.unit
@pytest.mark.kubernetes
class TestNormalizeHost:
    """Tests for endpoint scheme normalization."""

    def test_prepends_https_when_scheme_missing(self) -> None:
        """A bare host gets https:// prepended."""
        assert normalize_host("cluster.example.com") == "https://cluster.example.com"

    def test_keeps_host_with_port(self) -> None:
        """Host and port are kept as given."""
        assert normalize_host("10.0.0.1:6443") == "https://10.0.0.1:6443"

    @pytest.mark.parametrize("endpoint", ["https://c.example.com", "http://127.0.0.1:8080"])
    def test_keeps_existing_scheme(self, endpoint: str) -> None:
        """Endpoints already carrying a scheme are unchanged."""
        assert normalize_host(endpoint) == endpoint

    def test_empty_endpoint_gets_only_scheme(self) -> None:
        """No default host is substituted for an empty endpoint."""
        assert normalize_host("") == "https://"


@pytest.mark.unit
@pytest.mark.kubernetes
class TestClusterProfile:
    """Tests for ClusterProfile."""

    def test_derive_connection_config_scenario(self) -> None:
        """The scheme is prepended and verification skipped by default."""
        profile = ClusterProfile(api_endpoint="cluster.example.com", bearer_token="t")

        config = profile.derive_connection_config()

        assert config.host == "https://cluster.example.com"
        assert config.bearer_token == "t"
        assert config.verify_ssl is False

    def test_derive_returns_fresh_config(self) -> None:
        """Each call derives a new, equal configuration."""
        profile = ClusterProfile(api_endpoint="c", bearer_token="t")

        first = profile.derive_connection_config()
        second = profile.derive_connection_config()

        assert first == second
        assert first is not second

    def test_profile_is_immutable(self) -> None:
        """Profiles cannot be modified after construction."""
        profile = ClusterProfile(api_endpoint="c", bearer_token="t")

        with pytest.raises(ValidationError):
            profile.api_endpoint = "other"  # type: ignore[misc]

    def test_token_not_in_repr(self) -> None:
        """The bearer token never appears in repr output."""
        profile = ClusterProfile(api_endpoint="c", bearer_token="s3cret")

        assert "s3cret" not in repr(profile)
        assert "s3cret" not in repr(profile.derive_connection_config())

    def test_verification_enabled_with_ca(self, tmp_path: Path) -> None:
        """Verification can be turned on with a CA bundle."""
        ca = tmp_path / "ca.crt"
        profile = ClusterProfile(
            api_endpoint="c",
            bearer_token="t",
            insecure_skip_tls_verify=False,
            ca_cert_path=str(ca),
        )

        config = profile.derive_connection_config()

        assert config.verify_ssl is True
        assert config.ca_cert_path == str(ca)

    def test_ca_path_expands_home(self) -> None:
        """A ~ in the CA path is expanded."""
        profile = ClusterProfile(api_endpoint="c", bearer_token="t", ca_cert_path="~/ca.crt")

        assert profile.ca_cert_path == str(Path("~/ca.crt").expanduser())

    def test_create_wraps_validation_error(self) -> None:
        """Invalid input surfaces as ConfigurationError."""
        with pytest.raises(ConfigurationError, match="Invalid cluster profile"):
            ClusterProfile.create(api_endpoint="c")

    def test_create_rejects_unknown_fields(self) -> None:
        """Unknown fields are rejected."""
        with pytest.raises(ConfigurationError):
            ClusterProfile.create(api_endpoint="c", bearer_token="t", kubeconfig="x")


@pytest.mark.unit
@pytest.mark.kubernetes
class TestClusterProfileFromEnv:
    """Tests for ClusterProfile.from_env."""

    def test_reads_endpoint_and_token(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """Endpoint and token come from the environment."""
        monkeypatch.setenv("CLUSTERCTL_API_ENDPOINT", "10.0.0.1:6443")
        monkeypatch.setenv("CLUSTERCTL_TOKEN", "abc")

        profile = ClusterProfile.from_env()

        assert profile.host == "https://10.0.0.1:6443"
        assert profile.bearer_token == "abc"
        assert profile.insecure_skip_tls_verify is True

    def test_reads_tls_settings(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """TLS verification and CA bundle can be set from the environment."""
        monkeypatch.setenv("CLUSTERCTL_API_ENDPOINT", "c")
        monkeypatch.setenv("CLUSTERCTL_TOKEN", "abc")
        monkeypatch.setenv("CLUSTERCTL_INSECURE_SKIP_TLS_VERIFY", "false")
        monkeypatch.setenv("CLUSTERCTL_CA_CERT", "/etc/ca.crt")

        profile = ClusterProfile.from_env()

        assert profile.insecure_skip_tls_verify is False
        assert profile.ca_cert_path == "/etc/ca.crt"

    def test_missing_endpoint(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """A missing endpoint is a configuration error."""
        monkeypatch.setenv("CLUSTERCTL_TOKEN", "abc")

        with pytest.raises(ConfigurationError, match="CLUSTERCTL_API_ENDPOINT"):
            ClusterProfile.from_env()

    def test_missing_token(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """A missing token is a configuration error."""
        monkeypatch.setenv("CLUSTERCTL_API_ENDPOINT", "c")

        with pytest.raises(ConfigurationError, match="CLUSTERCTL_TOKEN"):
            ClusterProfile.from_env()


@pytest.mark.unit
@pytest.mark.kubernetes
class TestConnectionConfig:
    """Tests for ConnectionConfig conversions."""

    def test_to_kubernetes_configuration(self) -> None:
        """The kubernetes Configuration carries host, bearer token and TLS policy."""
        config = ConnectionConfig(host="https://c:6443", bearer_token="abc")

        k8s_config = config.to_kubernetes_configuration()

        assert k8s_config.host == "https://c:6443"
        assert k8s_config.api_key == {"authorization": "abc"}
        assert k8s_config.api_key_prefix == {"authorization": "Bearer"}
        assert k8s_config.verify_ssl is False
        assert k8s_config.retries == 0

    def test_kubeconfig_insecure(self) -> None:
        """Skipping verification maps to insecure-skip-tls-verify in a single context."""
        config = ConnectionConfig(host="https://c", bearer_token="abc")

        document = config.kubeconfig()

        assert document["current-context"] == "clusterctl"
        assert document["clusters"][0]["cluster"] == {
            "server": "https://c",
            "insecure-skip-tls-verify": True,
        }
        assert document["users"][0]["user"] == {"token": "abc"}
        assert document["contexts"][0]["context"] == {"cluster": "clusterctl", "user": "clusterctl"}

    def test_kubeconfig_with_ca(self) -> None:
        """Verification with a CA bundle names the bundle."""
        config = ConnectionConfig(
            host="https://c", bearer_token="abc", verify_ssl=True, ca_cert_path="/ca.crt"
        )

        assert config.kubeconfig()["clusters"][0]["cluster"] == {
            "server": "https://c",
            "certificate-authority": "/ca.crt",
        }


@pytest.mark.unit
@pytest.mark.kubernetes
class TestControlSettings:
    """Tests for ControlSettings."""

    def test_defaults(self) -> None:
        """Defaults match the documented behavior."""
        settings = ControlSettings()

        assert settings.log_level == "info"
        assert settings.approved_runtime == "containerd"
        assert settings.kubectl_binary == "kubectl"
        assert settings.temp_dir is None
        assert settings.kubectl_timeout is None

    def test_unknown_log_level_falls_back_to_info(self) -> None:
        """Unrecognized level names become info."""
        assert ControlSettings(log_level="LOUD").log_level == "info"

    def test_log_level_normalized(self) -> None:
        """Level names are lowercased."""
        assert ControlSettings(log_level="TRACE").log_level == "trace"

    def test_approved_runtime_lowercased(self) -> None:
        """Runtime schemes compare lowercased."""
        assert ControlSettings(approved_runtime="CRI-O").approved_runtime == "cri-o"

    def test_empty_approved_runtime_rejected(self) -> None:
        """An empty approved runtime is invalid."""
        with pytest.raises(ValidationError):
            ControlSettings(approved_runtime=" ")

    def test_non_positive_timeout_rejected(self) -> None:
        """Timeouts must be positive."""
        with pytest.raises(ValidationError):
            ControlSettings(kubectl_timeout=0)

    def test_from_env_overrides_base(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """Environment variables win over base values."""
        monkeypatch.setenv("CLUSTERCTL_LOG_LEVEL", "debug")
        monkeypatch.setenv("CLUSTERCTL_APPROVED_RUNTIME", "docker")
        monkeypatch.setenv("CLUSTERCTL_KUBECTL", "/opt/kubectl")
        monkeypatch.setenv("CLUSTERCTL_TEMP_DIR", "/var/tmp")

        settings = ControlSettings.from_env({"log_level": "error", "kubectl_timeout": 30})

        assert settings.log_level == "debug"
        assert settings.approved_runtime == "docker"
        assert settings.kubectl_binary == "/opt/kubectl"
        assert settings.temp_dir == "/var/tmp"
        assert settings.kubectl_timeout == 30

    def test_from_env_invalid_raises_configuration_error(self) -> None:
        """Invalid values surface as ConfigurationError."""
        with pytest.raises(ConfigurationError, match="Invalid control settings"):
            ControlSettings.from_env({"kubectl_timeout": -1})
