"""kubectl CLI wrapper for declarative apply and cascading delete.

Wraps the kubectl binary via subprocess. Every invocation is pointed at a
caller-staged kubeconfig, so a command never falls back to the local
default context and the credential never appears in the process arguments.
"""

from __future__ import annotations

import shutil
import subprocess
from collections.abc import Sequence
from pathlib import Path

from cluster_control.integrations.kubernetes.exceptions import KubectlNotFoundError
from cluster_control.logging.config import get_logger

# ---------------------------------------------------------------------------
# Constants
# ---------------------------------------------------------------------------

CASCADE_BACKGROUND = "background"


class KubectlClient:
    """Client for the kubectl CLI.

    Returns ``CompletedProcess`` results with captured output; a non-zero
    exit is reported through ``returncode`` and left to the caller.
    """

    def __init__(
        self,
        binary_path: str = "kubectl",
        timeout: int | None = None,
        log_level: str | None = None,
    ) -> None:
        """Initialize kubectl client.

        Args:
            binary_path: Path to the kubectl binary or a name to look up in PATH.
            timeout: Optional timeout in seconds; no timeout when None.
            log_level: Minimum level for this client's log events.

        Raises:
            KubectlNotFoundError: If binary not found.
        """
        self._binary = self._find_binary(binary_path)
        self._timeout = timeout
        self._log = get_logger(__name__, level=log_level, binary=self._binary)

    @staticmethod
    def _find_binary(binary_path: str) -> str:
        """Locate the kubectl binary.

        Args:
            binary_path: Explicit path, or a bare name to search PATH.

        Returns:
            Path to the kubectl binary.

        Raises:
            KubectlNotFoundError: If not found.
        """
        path = Path(binary_path).expanduser()
        if path.parent != Path(".") or path.is_absolute():
            if not path.exists():
                raise KubectlNotFoundError(binary_path)
            return str(path.resolve())

        found = shutil.which(binary_path)
        if not found:
            raise KubectlNotFoundError(binary_path)
        return found

    def run(
        self,
        args: Sequence[str],
        kubeconfig: str,
    ) -> subprocess.CompletedProcess[str]:
        """Run a kubectl command against an explicit cluster.

        Args:
            args: Command arguments (without the ``kubectl`` prefix).
            kubeconfig: Path of a kubeconfig naming only the target cluster.

        Returns:
            CompletedProcess result.

        Raises:
            subprocess.TimeoutExpired: If a timeout was configured and exceeded.
            OSError: If the binary cannot be executed.
        """
        cmd = [self._binary, f"--kubeconfig={kubeconfig}", *args]
        self._log.debug("running_kubectl_command", args=list(args))
        return subprocess.run(
            cmd,
            capture_output=True,
            text=True,
            check=False,
            timeout=self._timeout,
        )

    def apply(
        self,
        filenames: Sequence[str],
        kubeconfig: str,
    ) -> subprocess.CompletedProcess[str]:
        """Run ``kubectl apply`` over the given files, non-recursively."""
        return self.run(
            ["apply", *self._filename_args(filenames), "--recursive=false"],
            kubeconfig,
        )

    def delete(
        self,
        filenames: Sequence[str],
        kubeconfig: str,
    ) -> subprocess.CompletedProcess[str]:
        """Run ``kubectl delete`` with background cascading, without waiting."""
        return self.run(
            [
                "delete",
                *self._filename_args(filenames),
                "--recursive=false",
                f"--cascade={CASCADE_BACKGROUND}",
                "--wait=false",
            ],
            kubeconfig,
        )

    @staticmethod
    def _filename_args(filenames: Sequence[str]) -> list[str]:
        args: list[str] = []
        for filename in filenames:
            args.extend(["-f", filename])
        return args
