"""CLI commands for applying and deleting manifests."""

from __future__ import annotations

import sys
from collections.abc import Callable
from pathlib import Path
from typing import TYPE_CHECKING, Annotated

import typer

from cluster_control.cli.commands.base import console, handle_control_error
from cluster_control.integrations.kubernetes.exceptions import ClusterControlError

if TYPE_CHECKING:
    from cluster_control.services.kubernetes.manifest_manager import (
        ManifestManager,
        ManifestOperationResult,
    )

STDIN_SOURCE = "-"

# ---------------------------------------------------------------------------
# Manifest-specific options
# ---------------------------------------------------------------------------

ManifestSourcesArgument = Annotated[
    list[str],
    typer.Argument(help="Manifest files or directories, or '-' to read manifest text from stdin"),
]

SkipValidationOption = Annotated[
    bool,
    typer.Option(
        "--skip-validation",
        help="Skip the client-side apiVersion/kind/metadata.name check",
    ),
]


def _validate_sources(manager: ManifestManager, sources: list[str], content: str | None) -> None:
    """Exit 1 if any manifest fails client-side validation."""
    if content is not None:
        labelled = [(STDIN_SOURCE, manager.load_manifests(content))]
    else:
        labelled = [
            (str(path), manager.load_manifests(path))
            for s in sources
            for path in manager.manifest_files(Path(s))
        ]

    failures = []
    for label, manifests in labelled:
        failures.extend(r for r in manager.validate_manifests(manifests, label) if not r.valid)

    if failures:
        console.print("[red]Validation errors:[/red]")
        for result in failures:
            for err in result.errors:
                console.print(f"  {result.source}: {result.resource}: {err}")
        raise typer.Exit(1)


def _print_result(result: ManifestOperationResult) -> None:
    if result.output:
        console.print(result.output.rstrip(), markup=False, highlight=False)
    console.print(f"[green]{result.operation} succeeded[/green] ({len(result.sources)} source(s))")


def register_manifest_commands(
    app: typer.Typer,
    get_manager: Callable[[], ManifestManager],
) -> None:
    """Register ``apply`` and ``delete`` with the CLI app."""

    def _run(operation: str, sources: list[str], skip_validation: bool) -> None:
        content = sys.stdin.read() if sources == [STDIN_SOURCE] else None
        if STDIN_SOURCE in sources and content is None:
            console.print("[red]Error:[/red] '-' cannot be combined with file paths")
            raise typer.Exit(1)

        try:
            manager = get_manager()
            if operation == "apply" and not skip_validation:
                _validate_sources(manager, sources, content)

            if operation == "apply":
                result = (
                    manager.apply_content(content)
                    if content is not None
                    else manager.apply(sources)
                )
            else:
                result = (
                    manager.delete_content(content)
                    if content is not None
                    else manager.delete(sources)
                )
            _print_result(result)
        except (FileNotFoundError, ValueError) as e:
            console.print(f"[red]Error:[/red] {e}")
            raise typer.Exit(1) from None
        except ClusterControlError as e:
            handle_control_error(e)

    @app.command("apply")
    def apply_manifests(
        sources: ManifestSourcesArgument,
        skip_validation: SkipValidationOption = False,
    ) -> None:
        """Apply manifests to the cluster.

        Directories contribute their top-level files only. Manifests are
        validated client-side first.

        Examples:
            clusterctl apply deployment.yaml service.yaml
            cat app.yaml | clusterctl apply -
        """
        _run("apply", sources, skip_validation)

    @app.command("delete")
    def delete_manifests(sources: ManifestSourcesArgument) -> None:
        """Delete the objects described by manifests.

        Dependents are removed in the background.

        Examples:
            clusterctl delete deployment.yaml
            cat app.yaml | clusterctl delete -
        """
        _run("delete", sources, skip_validation=True)
