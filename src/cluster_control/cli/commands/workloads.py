"""CLI commands for services, the deployments behind them, and restarts."""

from __future__ import annotations

from collections.abc import Callable
from typing import TYPE_CHECKING, Annotated

import typer

from cluster_control.cli.commands.base import (
    LabelMapOption,
    NamespaceOption,
    OutputOption,
    console,
    handle_control_error,
    parse_label_map,
)
from cluster_control.cli.output import OutputFormat, get_formatter
from cluster_control.integrations.kubernetes.exceptions import ClusterControlError
from cluster_control.integrations.kubernetes.models import DeploymentSummary, ServiceSummary
from cluster_control.services.kubernetes.rollout_manager import RESTARTABLE_KINDS

if TYPE_CHECKING:
    from cluster_control.services.kubernetes.rollout_manager import RolloutManager
    from cluster_control.services.kubernetes.service_resolver import ServiceResolver

# ---------------------------------------------------------------------------
# Column definitions for table output
# ---------------------------------------------------------------------------

SERVICE_COLUMNS = [
    ("name", "Name"),
    ("namespace", "Namespace"),
    ("type", "Type"),
    ("cluster_ip", "Cluster IP"),
    ("selector", "Selector"),
]

DEPLOYMENT_COLUMNS = [
    ("name", "Name"),
    ("namespace", "Namespace"),
    ("ready_replicas", "Ready"),
    ("replicas", "Desired"),
    ("available_replicas", "Available"),
]

KindOption = Annotated[
    str,
    typer.Option(
        "--kind",
        "-k",
        help=f"Workload kind: {', '.join(RESTARTABLE_KINDS)}",
    ),
]


def register_workload_commands(
    app: typer.Typer,
    get_resolver: Callable[[], ServiceResolver],
    get_rollouts: Callable[[], RolloutManager],
) -> None:
    """Register service resolution and restart commands with the CLI app."""

    @app.command("services")
    def list_services(
        namespace: NamespaceOption = "default",
        selector: LabelMapOption = None,
        output: OutputOption = OutputFormat.TABLE,
    ) -> None:
        """List services whose selector contains the given labels.

        Examples:
            clusterctl services -n shop
            clusterctl services -n shop -l app=web
        """
        label_map = parse_label_map(selector)
        try:
            services = get_resolver().list_services_matching(namespace, label_map)
        except ClusterControlError as e:
            handle_control_error(e)
        summaries = [ServiceSummary.from_k8s_object(s) for s in services]
        get_formatter(output, console).format_list(
            summaries, SERVICE_COLUMNS, title=f"Services in {namespace}"
        )

    @app.command("service-deployments")
    def service_deployments(
        service: Annotated[str, typer.Argument(help="Service name")],
        namespace: NamespaceOption = "default",
        output: OutputOption = OutputFormat.TABLE,
    ) -> None:
        """List the deployments a service routes to.

        Examples:
            clusterctl service-deployments web -n shop
        """
        try:
            deployments = get_resolver().deployments_behind_service(namespace, service)
        except ClusterControlError as e:
            handle_control_error(e)
        summaries = [DeploymentSummary.from_k8s_object(d) for d in deployments]
        get_formatter(output, console).format_list(
            summaries, DEPLOYMENT_COLUMNS, title=f"Deployments behind {namespace}/{service}"
        )

    @app.command("restart")
    def restart(
        name: Annotated[str, typer.Argument(help="Workload name")],
        namespace: NamespaceOption = "default",
        kind: KindOption = "deployment",
    ) -> None:
        """Trigger a rolling restart. Does not wait for the rollout to finish.

        Examples:
            clusterctl restart web -n shop
            clusterctl restart agent -n kube-system --kind daemonset
        """
        try:
            result = get_rollouts().restart(namespace, name, kind=kind)
        except ClusterControlError as e:
            handle_control_error(e)
        console.print(
            f"[green]{result.kind} {result.namespace}/{result.name} restarted[/green] "
            f"at {result.restarted_at}"
        )
