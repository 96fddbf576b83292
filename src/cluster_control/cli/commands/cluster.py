"""CLI commands for cluster inspection and generic resource reads."""

from __future__ import annotations

from collections.abc import Callable
from typing import TYPE_CHECKING, Annotated

import typer

from cluster_control.cli.commands.base import (
    OutputOption,
    console,
    handle_control_error,
)
from cluster_control.cli.output import OutputFormat, get_formatter
from cluster_control.integrations.kubernetes.exceptions import ClusterControlError
from cluster_control.integrations.kubernetes.models import NamespaceSummary
from cluster_control.integrations.kubernetes.models.unstructured import (
    ResourceCoordinate,
    ResourceNotFound,
)

if TYPE_CHECKING:
    from cluster_control.integrations.kubernetes.client import ClusterClient
    from cluster_control.services.kubernetes.compliance_manager import ComplianceManager
    from cluster_control.services.kubernetes.resource_accessor import ResourceAccessor
    from cluster_control.services.kubernetes.resource_manager import ResourceManager

NODE_RUNTIME_COLUMNS = [
    ("node_name", "Node"),
    ("runtime_identifier", "Runtime"),
    ("scheme", "Scheme"),
]

NAMESPACE_COLUMNS = [
    ("name", "Name"),
    ("status", "Status"),
    ("creation_timestamp", "Created"),
]


def register_cluster_commands(
    app: typer.Typer,
    get_compliance: Callable[[], ComplianceManager],
    get_resources: Callable[[], ResourceManager],
    get_accessor: Callable[[], ResourceAccessor],
    get_client: Callable[[], ClusterClient],
) -> None:
    """Register cluster inspection and generic resource commands with the CLI app."""

    @app.command("check-runtime")
    def check_runtime(
        show_nodes: Annotated[
            bool,
            typer.Option("--show-nodes", help="List the runtime of every node"),
        ] = False,
        output: OutputOption = OutputFormat.TABLE,
    ) -> None:
        """Check that every node runs the approved container runtime.

        Exits 1 when a node runs another runtime.

        Examples:
            clusterctl check-runtime
            clusterctl check-runtime --show-nodes
        """
        try:
            manager = get_compliance()
            if show_nodes:
                get_formatter(output, console).format_list(
                    manager.node_runtime_reports(), NODE_RUNTIME_COLUMNS, title="Node runtimes"
                )
            result = manager.check_node_runtime()
        except ClusterControlError as e:
            handle_control_error(e)

        if result.compliant:
            console.print(
                f"[green]Compliant:[/green] {result.nodes_inspected} node(s) run "
                f"{result.approved_runtime}"
            )
            return

        violation = result.violation
        console.print(f"[red]Not compliant:[/red] {result.reason}")
        if violation is not None:
            console.print(
                f"  node {violation.node_name} reports {violation.runtime_identifier}",
                markup=False,
            )
        raise typer.Exit(1)

    @app.command("crd-exists")
    def crd_exists(
        name: Annotated[str, typer.Argument(help="CRD name, e.g. widgets.example.io")],
    ) -> None:
        """Check whether a CustomResourceDefinition is installed.

        Prints true or false; exits 1 when absent.

        Examples:
            clusterctl crd-exists envoyfilters.networking.istio.io
        """
        try:
            exists = get_resources().resource_definition_exists(name)
        except ClusterControlError as e:
            handle_control_error(e)
        console.print("true" if exists else "false")
        if not exists:
            raise typer.Exit(1)

    @app.command("get")
    def get_resource(
        resource: Annotated[str, typer.Argument(help="Resource plural, e.g. deployments")],
        name: Annotated[str, typer.Argument(help="Object name")],
        group: Annotated[
            str, typer.Option("--group", "-g", help="API group; empty for the core group")
        ] = "",
        version: Annotated[str, typer.Option("--api-version", help="API version")] = "v1",
        namespace: Annotated[
            str | None,
            typer.Option("--namespace", "-n", help="Namespace; omit for cluster-scoped kinds"),
        ] = None,
        output: OutputOption = OutputFormat.YAML,
    ) -> None:
        """Get any object by group/version/resource coordinate.

        Examples:
            clusterctl get deployments web -g apps -n shop
            clusterctl get customresourcedefinitions widgets.example.io -g apiextensions.k8s.io
        """
        coordinate = ResourceCoordinate(group, version, resource, namespace, name)
        try:
            result = get_accessor().get(coordinate)
        except ClusterControlError as e:
            handle_control_error(e)

        if isinstance(result, ResourceNotFound):
            console.print(f"[yellow]Not found:[/yellow] {result.message}")
            raise typer.Exit(1)
        get_formatter(output, console).format_dict(result.to_dict(), title=str(coordinate))

    @app.command("namespaces")
    def list_namespaces(output: OutputOption = OutputFormat.TABLE) -> None:
        """List namespaces.

        Examples:
            clusterctl namespaces
            clusterctl namespaces -o json
        """
        try:
            namespaces = get_resources().list_namespaces()
        except ClusterControlError as e:
            handle_control_error(e)
        summaries = [NamespaceSummary.from_k8s_object(ns) for ns in namespaces]
        get_formatter(output, console).format_list(summaries, NAMESPACE_COLUMNS, title="Namespaces")

    @app.command("cluster-info")
    def cluster_info(output: OutputOption = OutputFormat.TABLE) -> None:
        """Show the target cluster and its Kubernetes version.

        Exits 1 when the API server cannot be reached with the profile.

        Examples:
            clusterctl cluster-info
        """
        try:
            client = get_client()
            info = {**client.describe(), "version": client.get_cluster_version()}
        except ClusterControlError as e:
            handle_control_error(e)
        get_formatter(output, console).format_dict(info, title="Cluster")
