"""Shared options, error handling and parsing for CLI commands."""

from __future__ import annotations

from typing import Annotated, NoReturn

import typer
from rich.console import Console

from cluster_control.cli.output import OutputFormat
from cluster_control.integrations.kubernetes.exceptions import (
    ClientConstructionError,
    ClusterControlError,
    ConfigurationError,
    InspectionError,
    KubectlNotFoundError,
    ManifestError,
    ResourceAccessError,
    ResourceNotFoundError,
)

# Shared console instance
console = Console()


# =============================================================================
# Common Typer Option Annotations
# =============================================================================

OutputOption = Annotated[
    OutputFormat,
    typer.Option(
        "--output",
        "-o",
        help="Output format: table, json, or yaml",
        case_sensitive=False,
    ),
]

NamespaceOption = Annotated[
    str,
    typer.Option(
        "--namespace",
        "-n",
        help="Kubernetes namespace",
    ),
]

LabelMapOption = Annotated[
    str | None,
    typer.Option(
        "--selector",
        "-l",
        help="Labels the service selector must contain (e.g., 'app=web,tier=frontend')",
    ),
]


# =============================================================================
# Parsing
# =============================================================================


def parse_label_map(value: str | None) -> dict[str, str]:
    """Parse ``key=value[,key=value...]`` into a label map.

    Raises:
        typer.BadParameter: On an entry without ``=`` or with an empty key.
    """
    labels: dict[str, str] = {}
    if not value:
        return labels
    for entry in value.split(","):
        key, sep, label_value = entry.strip().partition("=")
        if not sep or not key.strip():
            raise typer.BadParameter(f"Invalid label '{entry}', expected key=value")
        labels[key.strip()] = label_value.strip()
    return labels


# =============================================================================
# Error Handling
# =============================================================================


def handle_control_error(error: ClusterControlError) -> NoReturn:
    """Print a cluster control error and exit.

    Raises:
        typer.Exit: Always exits with code 1.
    """
    if isinstance(error, ConfigurationError):
        console.print("[red]Error:[/red] Invalid configuration")
        console.print(f"  {error.message}")
        console.print(
            "\n[dim]Hint: Pass --server/--token or set CLUSTERCTL_API_ENDPOINT "
            "and CLUSTERCTL_TOKEN.[/dim]"
        )

    elif isinstance(error, ClientConstructionError):
        console.print("[red]Error:[/red] Cannot connect to the cluster")
        console.print(f"  {error.message}")
        console.print("\n[dim]Hint: Check the API endpoint, token and TLS settings.[/dim]")

    elif isinstance(error, ResourceNotFoundError):
        console.print("[red]Error:[/red] Resource not found")
        console.print(f"  {error.message}")

    elif isinstance(error, KubectlNotFoundError):
        console.print(f"[red]Error:[/red] {error.message}")

    elif isinstance(error, ManifestError):
        console.print("[red]Error:[/red] Manifest operation failed")
        console.print(error.stderr or f"  {error.message}", markup=False, highlight=False)

    elif isinstance(error, InspectionError):
        console.print("[red]Error:[/red] Node inspection failed")
        console.print(f"  {error.message}")

    elif isinstance(error, ResourceAccessError):
        console.print("[red]Error:[/red] Kubernetes API request failed")
        console.print(f"  {error.message}")
        if error.status_code:
            console.print(f"  HTTP Status: {error.status_code}")

    else:
        console.print(f"[red]Error:[/red] {error.message}")

    raise typer.Exit(1)
