"""Main CLI entry point using Typer."""

from __future__ import annotations

from pathlib import Path
from typing import Any

import typer
from rich.console import Console

from cluster_control import __version__
from cluster_control.cli.commands.base import handle_control_error
from cluster_control.cli.commands.cluster import register_cluster_commands
from cluster_control.cli.commands.manifests import register_manifest_commands
from cluster_control.cli.commands.workloads import register_workload_commands
from cluster_control.integrations.kubernetes.config import ClusterProfile, ControlSettings
from cluster_control.integrations.kubernetes.exceptions import (
    ClusterControlError,
    ConfigurationError,
)
from cluster_control.logging.config import configure_logging
from cluster_control.services.kubernetes.control import ClusterControl

app = typer.Typer(
    name="clusterctl",
    help="Apply manifests, restart workloads and check node compliance on a cluster.",
    no_args_is_help=True,
)

console = Console()

# Root options of the current invocation and the control built from them
_invocation: dict[str, Any] = {}


def version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        console.print(f"clusterctl version {__version__}")
        raise typer.Exit()


def build_control(options: dict[str, Any]) -> ClusterControl:
    """Build a ClusterControl from the root CLI options.

    Raises:
        ConfigurationError: If the endpoint or token is missing or invalid.
    """
    if options.get("server") is None:
        raise ConfigurationError("No API endpoint: pass --server or set CLUSTERCTL_API_ENDPOINT")
    if options.get("token") is None:
        raise ConfigurationError("No bearer token: pass --token or set CLUSTERCTL_TOKEN")

    values: dict[str, Any] = {
        "api_endpoint": options["server"],
        "bearer_token": options["token"],
    }
    if options.get("insecure") is not None:
        values["insecure_skip_tls_verify"] = options["insecure"]
    if options.get("ca_cert"):
        values["ca_cert_path"] = options["ca_cert"]
    profile = ClusterProfile.create(**values)

    settings = ControlSettings.from_env()
    if options.get("log_level"):
        # --log-level wins over CLUSTERCTL_LOG_LEVEL
        settings = ControlSettings.model_validate(
            {**settings.model_dump(), "log_level": options["log_level"]}
        )
    return ClusterControl(profile, settings)


def get_control() -> ClusterControl:
    """Return the ClusterControl for this invocation, building it on first use."""
    if "control" not in _invocation:
        try:
            _invocation["control"] = build_control(_invocation)
        except ClusterControlError as e:
            handle_control_error(e)
    return _invocation["control"]


@app.callback()
def main(
    version: bool | None = typer.Option(
        None,
        "--version",
        "-V",
        callback=version_callback,
        is_eager=True,
        help="Show version and exit.",
    ),
    log_level: str = typer.Option(
        "info",
        "--log-level",
        envvar="CLUSTERCTL_LOG_LEVEL",
        help="panic, fatal, error, warn, info, debug or trace.",
    ),
    log_file: Path | None = typer.Option(
        None,
        "--log-file",
        help="Also write JSON logs to this file.",
    ),
    server: str | None = typer.Option(
        None,
        "--server",
        "-s",
        envvar="CLUSTERCTL_API_ENDPOINT",
        help="API server address; https:// is assumed when no scheme is given.",
    ),
    token: str | None = typer.Option(
        None,
        "--token",
        envvar="CLUSTERCTL_TOKEN",
        help="Bearer token.",
    ),
    insecure: bool | None = typer.Option(
        None,
        "--insecure-skip-tls-verify/--verify-tls",
        envvar="CLUSTERCTL_INSECURE_SKIP_TLS_VERIFY",
        help="Skip or enforce TLS certificate verification (default: skip).",
    ),
    ca_cert: str | None = typer.Option(
        None,
        "--certificate-authority",
        envvar="CLUSTERCTL_CA_CERT",
        help="CA bundle used when verifying TLS.",
    ),
) -> None:
    """Cluster control CLI."""
    configure_logging(log_level, log_file=log_file)
    _invocation.clear()
    _invocation.update(
        log_level=log_level,
        server=server,
        token=token,
        insecure=insecure,
        ca_cert=ca_cert,
    )


register_manifest_commands(app, lambda: get_control().manifests)
register_workload_commands(
    app,
    lambda: get_control().services,
    lambda: get_control().rollouts,
)
register_cluster_commands(
    app,
    lambda: get_control().compliance,
    lambda: get_control().resources,
    lambda: get_control().accessor,
    lambda: get_control().client,
)


if __name__ == "__main__":
    app()
