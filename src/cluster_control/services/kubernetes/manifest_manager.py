"""Kubernetes manifest apply/delete engine.

Delegates declarative apply (three-way merge against the last-applied
configuration) and background-cascading delete to kubectl, pinned to the
caller's cluster by a kubeconfig staged for the run. Raw manifest text is
staged in a transient file too; both are removed on every exit path.
"""

from __future__ import annotations

import subprocess
import tempfile
from collections.abc import Iterator, Sequence
from contextlib import contextmanager
from dataclasses import dataclass, field
from pathlib import Path
from typing import TYPE_CHECKING, Any

import yaml

from cluster_control.integrations.kubernetes.exceptions import (
    ApplyError,
    DeleteError,
    ManifestError,
)
from cluster_control.integrations.kubernetes.kubectl_client import KubectlClient
from cluster_control.services.kubernetes.base import K8sBaseManager

if TYPE_CHECKING:
    from cluster_control.integrations.kubernetes.client import ClusterClient
    from cluster_control.integrations.kubernetes.config import ConnectionConfig

# ---------------------------------------------------------------------------
# Constants
# ---------------------------------------------------------------------------

OPERATION_APPLY = "apply"
OPERATION_DELETE = "delete"
TRANSIENT_PREFIX = "clusterctl-"
TRANSIENT_SUFFIX = ".yaml"
REQUIRED_MANIFEST_FIELDS = ("apiVersion", "kind", "metadata")
CONTENT_SOURCE = "<content>"
KUBECONFIG_LABEL = "kubeconfig"
MANIFEST_EXTENSIONS = (".json", ".yaml", ".yml")


# ---------------------------------------------------------------------------
# Result Dataclasses
# ---------------------------------------------------------------------------


@dataclass
class ManifestOperationResult:
    """Outcome of a successful apply or delete run."""

    operation: str
    sources: list[str]
    success: bool
    output: str = ""


@dataclass
class ValidationResult:
    """Result of validating a single manifest."""

    source: str
    resource: str
    valid: bool
    errors: list[str] = field(default_factory=list)


@contextmanager
def _transient_file(content: str, prefix: str, directory: str | None) -> Iterator[str]:
    # NamedTemporaryFile creates the file readable and writable by the owner only
    handle = tempfile.NamedTemporaryFile(
        mode="w",
        encoding="utf-8",
        prefix=prefix,
        suffix=TRANSIENT_SUFFIX,
        dir=directory,
        delete=False,
    )
    path = Path(handle.name)
    try:
        with handle:
            handle.write(content)
        yield str(path)
    finally:
        path.unlink(missing_ok=True)


@contextmanager
def transient_manifest(
    content: str,
    operation: str,
    directory: str | None = None,
) -> Iterator[str]:
    """Stage manifest text in a uniquely named file, removed on exit.

    Args:
        content: Manifest text (YAML or JSON).
        operation: Operation name used in the file prefix.
        directory: Directory for the file; the system temp dir when None.

    Yields:
        Path of the staged file.
    """
    with _transient_file(content, f"{TRANSIENT_PREFIX}{operation}-", directory) as path:
        yield path


@contextmanager
def transient_kubeconfig(
    connection: ConnectionConfig,
    directory: str | None = None,
) -> Iterator[str]:
    """Stage a single-cluster kubeconfig for one kubectl run, removed on exit.

    The file is created with mode 0600.
    """
    content = yaml.safe_dump(connection.kubeconfig(), default_flow_style=False)
    with _transient_file(content, f"{TRANSIENT_PREFIX}{KUBECONFIG_LABEL}-", directory) as path:
        yield path


# ---------------------------------------------------------------------------
# ManifestManager
# ---------------------------------------------------------------------------


class ManifestManager(K8sBaseManager):
    """Apply and delete manifests from files or raw text.

    Partial application of a multi-object manifest is possible when a later
    object fails; it is reported, not rolled back.
    """

    _entity_name = "manifest"

    def __init__(self, client: ClusterClient, kubectl: KubectlClient | None = None) -> None:
        super().__init__(client)
        self._kubectl = kubectl

    def _kubectl_client(self) -> KubectlClient:
        if self._kubectl is not None:
            return self._kubectl
        return KubectlClient(
            binary_path=self.settings.kubectl_binary,
            timeout=self.settings.kubectl_timeout,
            log_level=self.settings.log_level,
        )

    # -----------------------------------------------------------------------
    # Apply / Delete
    # -----------------------------------------------------------------------

    def apply(self, sources: Sequence[str | Path]) -> ManifestOperationResult:
        """Apply manifest files to the cluster.

        A directory source contributes its top-level manifest files only.

        Args:
            sources: Manifest file paths.

        Returns:
            Result carrying kubectl's output.

        Raises:
            ApplyError: If kubectl reports a failure; its stderr is kept verbatim.
            KubectlNotFoundError: If kubectl is not installed.
        """
        return self._run(OPERATION_APPLY, sources, ApplyError)

    def delete(self, sources: Sequence[str | Path]) -> ManifestOperationResult:
        """Delete the objects described by manifest files.

        Dependents are removed in the background; the call does not wait.

        Raises:
            DeleteError: If kubectl reports a failure; its stderr is kept verbatim.
            KubectlNotFoundError: If kubectl is not installed.
        """
        return self._run(OPERATION_DELETE, sources, DeleteError)

    def apply_content(self, content: str) -> ManifestOperationResult:
        """Apply raw manifest text via a transient file."""
        with transient_manifest(content, OPERATION_APPLY, self.settings.temp_dir) as path:
            return self.apply([path])

    def delete_content(self, content: str) -> ManifestOperationResult:
        """Delete the objects described by raw manifest text via a transient file."""
        with transient_manifest(content, OPERATION_DELETE, self.settings.temp_dir) as path:
            return self.delete([path])

    def _run(
        self,
        operation: str,
        sources: Sequence[str | Path],
        error_cls: type[ManifestError],
    ) -> ManifestOperationResult:
        filenames = [str(s) for s in sources]
        if not filenames:
            raise error_cls(f"No manifest sources given to {operation}")

        kubectl = self._kubectl_client()
        connection = self._client.profile.derive_connection_config()
        runner = kubectl.apply if operation == OPERATION_APPLY else kubectl.delete
        self._log.info("running_manifest_operation", operation=operation, sources=filenames)

        try:
            with transient_kubeconfig(connection, self.settings.temp_dir) as kubeconfig:
                proc = runner(filenames, kubeconfig)
        except subprocess.TimeoutExpired as e:
            self._log.error("manifest_run_timed_out", operation=operation, sources=filenames)
            raise error_cls(
                f"kubectl {operation} timed out after {e.timeout}s",
                sources=filenames,
            ) from e
        except OSError as e:
            self._log.error("manifest_run_failed", operation=operation, error=str(e))
            raise error_cls(f"Cannot run kubectl {operation}: {e}", sources=filenames) from e

        if proc.returncode != 0:
            stderr = proc.stderr or ""
            self._log.error(
                "manifest_run_failed",
                operation=operation,
                sources=filenames,
                returncode=proc.returncode,
                stderr=stderr.strip(),
            )
            raise error_cls(
                stderr.strip() or f"kubectl {operation} exited with code {proc.returncode}",
                sources=filenames,
                stderr=stderr,
            )

        self._log.info("manifest_operation_succeeded", operation=operation, sources=filenames)
        return ManifestOperationResult(
            operation=operation,
            sources=filenames,
            success=True,
            output=proc.stdout or "",
        )

    # -----------------------------------------------------------------------
    # Load / Validate
    # -----------------------------------------------------------------------

    def manifest_files(self, source: Path) -> list[Path]:
        """Return the manifest files kubectl reads for one non-recursive source.

        A directory yields its top-level ``.json``, ``.yaml`` and ``.yml``
        files in name order; a file yields itself.

        Raises:
            FileNotFoundError: If the source does not exist.
        """
        if source.is_dir():
            return sorted(
                p for p in source.iterdir() if p.is_file() and p.suffix in MANIFEST_EXTENSIONS
            )
        if not source.is_file():
            raise FileNotFoundError(f"Manifest file not found: {source}")
        return [source]

    def load_manifests(self, source: Path | str) -> list[dict[str, Any]]:
        """Parse manifests from a file path or from raw YAML/JSON text.

        Multi-document YAML (``---`` separated) yields one entry per
        document; empty documents are skipped.

        Raises:
            FileNotFoundError: If a path is given and does not exist.
            ValueError: If the content cannot be parsed.
        """
        from ruamel.yaml import YAML
        from ruamel.yaml.error import YAMLError

        if isinstance(source, Path):
            if not source.is_file():
                raise FileNotFoundError(f"Manifest file not found: {source}")
            label = str(source)
            content = source.read_text(encoding="utf-8")
        else:
            label = CONTENT_SOURCE
            content = source

        yaml = YAML(typ="safe")
        try:
            documents = list(yaml.load_all(content))
        except YAMLError as e:
            raise ValueError(f"Failed to parse manifests from {label}: {e}") from e

        manifests: list[dict[str, Any]] = []
        for doc in documents:
            if doc is None:
                continue
            if not isinstance(doc, dict):
                self._log.warning(
                    "skipping_non_mapping_document", source=label, type=type(doc).__name__
                )
                continue
            manifests.append(doc)
        self._log.debug("loaded_manifests", count=len(manifests), source=label)
        return manifests

    def validate_manifests(
        self,
        manifests: list[dict[str, Any]],
        source: str = CONTENT_SOURCE,
    ) -> list[ValidationResult]:
        """Check ``apiVersion``, ``kind`` and ``metadata.name`` client-side."""
        results = [self._validate_single(m, source) for m in manifests]
        self._log.debug(
            "validated_manifests",
            total=len(results),
            valid=sum(1 for r in results if r.valid),
        )
        return results

    def _validate_single(self, manifest: dict[str, Any], source: str) -> ValidationResult:
        errors: list[str] = []
        for req_field in REQUIRED_MANIFEST_FIELDS:
            if req_field not in manifest:
                errors.append(f"Missing required field: {req_field}")

        for key in ("apiVersion", "kind"):
            value = manifest.get(key)
            if value is not None and not isinstance(value, str):
                errors.append(f"{key} must be a string, got {type(value).__name__}")

        metadata = manifest.get("metadata")
        if isinstance(metadata, dict):
            if "name" not in metadata and "generateName" not in metadata:
                errors.append("Missing required field: metadata.name")
            elif "name" in metadata and not isinstance(metadata["name"], str):
                errors.append("metadata.name must be a string")
        elif metadata is not None:
            errors.append(f"metadata must be a mapping, got {type(metadata).__name__}")

        return ValidationResult(
            source=source,
            resource=self._resource_identifier(manifest),
            valid=not errors,
            errors=errors,
        )

    @staticmethod
    def _resource_identifier(manifest: dict[str, Any]) -> str:
        kind = manifest.get("kind", "Unknown")
        metadata = manifest.get("metadata")
        name = metadata.get("name", "unnamed") if isinstance(metadata, dict) else "unnamed"
        return f"{kind}/{name}"
