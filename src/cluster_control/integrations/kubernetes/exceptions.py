"""Cluster control custom exceptions."""

from __future__ import annotations


class ClusterControlError(Exception):
    """Base exception for cluster control operations.

    Attributes:
        message: Human-readable error message.
        status_code: HTTP status code from the Kubernetes API (if applicable).
        resource_type: Type of resource involved (e.g., "Service", "Deployment").
        resource_name: Name of the resource involved.
        namespace: Namespace of the resource (if applicable).
    """

    def __init__(
        self,
        message: str,
        status_code: int | None = None,
        resource_type: str | None = None,
        resource_name: str | None = None,
        namespace: str | None = None,
    ) -> None:
        """Initialize ClusterControlError.

        Args:
            message: Human-readable error message.
            status_code: HTTP status code from the Kubernetes API.
            resource_type: Type of resource involved.
            resource_name: Name of the resource involved.
            namespace: Namespace of the resource.
        """
        super().__init__(message)
        self.message = message
        self.status_code = status_code
        self.resource_type = resource_type
        self.resource_name = resource_name
        self.namespace = namespace

    def __str__(self) -> str:
        """Return string representation of the error."""
        parts = [self.message]
        if self.status_code:
            parts.append(f"(status: {self.status_code})")
        if self.resource_type and self.resource_name:
            loc = f"[{self.resource_type}/{self.resource_name}"
            if self.namespace:
                loc += f" in {self.namespace}"
            loc += "]"
            parts.append(loc)
        return " ".join(parts)


class ConfigurationError(ClusterControlError):
    """Exception raised when a connection profile or setting is missing or invalid."""

    def __init__(self, message: str = "Invalid cluster configuration") -> None:
        super().__init__(message=message)


class ClientConstructionError(ClusterControlError):
    """Exception raised when an API handle cannot be built from a profile.

    This points at the profile (endpoint, credentials, TLS material) rather
    than at the request, so the caller can fix the profile and retry.
    """

    def __init__(
        self,
        message: str = "Failed to construct Kubernetes API client",
        original_error: Exception | None = None,
    ) -> None:
        """Initialize ClientConstructionError.

        Args:
            message: Human-readable error message.
            original_error: The original exception that caused this error.
        """
        super().__init__(message=message)
        self.original_error = original_error


class ResourceAccessError(ClusterControlError):
    """Exception raised when a get, list or update fails for a reason other than absence.

    Covers API rejections (401/403/409/422/5xx), unreachable API servers and
    malformed responses.
    """

    def __init__(
        self,
        message: str = "Kubernetes resource access failed",
        status_code: int | None = None,
        resource_type: str | None = None,
        resource_name: str | None = None,
        namespace: str | None = None,
        reason: str | None = None,
    ) -> None:
        """Initialize ResourceAccessError.

        Args:
            message: Human-readable error message.
            status_code: HTTP status code (if the API answered).
            resource_type: Type of resource.
            resource_name: Name of the resource.
            namespace: Namespace of the resource.
            reason: Kubernetes API reason string.
        """
        super().__init__(
            message=message,
            status_code=status_code,
            resource_type=resource_type,
            resource_name=resource_name,
            namespace=namespace,
        )
        self.reason = reason


class ResourceNotFoundError(ClusterControlError):
    """Exception raised by typed operations when the requested resource is absent.

    Not a subclass of :class:`ResourceAccessError`: absence and failure are
    handled separately by callers.
    """

    def __init__(
        self,
        message: str = "Kubernetes resource not found",
        resource_type: str | None = None,
        resource_name: str | None = None,
        namespace: str | None = None,
    ) -> None:
        """Initialize ResourceNotFoundError.

        Args:
            message: Human-readable error message.
            resource_type: Type of resource (e.g., "Service", "Deployment").
            resource_name: Name of the resource.
            namespace: Namespace of the resource.
        """
        if resource_type and resource_name:
            message = f"{resource_type} '{resource_name}' not found"
            if namespace:
                message += f" in namespace '{namespace}'"
        super().__init__(
            message=message,
            status_code=404,
            resource_type=resource_type,
            resource_name=resource_name,
            namespace=namespace,
        )


class ManifestError(ClusterControlError):
    """Base exception for manifest apply/delete runs.

    Attributes:
        sources: Manifest paths passed to the run.
        stderr: Output of the underlying engine, verbatim.
    """

    def __init__(
        self,
        message: str,
        sources: list[str] | None = None,
        stderr: str | None = None,
    ) -> None:
        super().__init__(message=message)
        self.sources = sources or []
        self.stderr = stderr


class ApplyError(ManifestError):
    """Raised when applying manifests fails (possibly after partial application)."""


class DeleteError(ManifestError):
    """Raised when deleting manifests fails (possibly after partial deletion)."""


class KubectlNotFoundError(ManifestError):
    """Raised when the kubectl binary is not found in PATH."""

    def __init__(self, binary: str = "kubectl") -> None:
        super().__init__(
            message=(
                f"{binary} binary not found. "
                "Install from: https://kubernetes.io/docs/tasks/tools/"
            ),
        )


class InspectionError(ClusterControlError):
    """Raised when cluster nodes cannot be listed or a runtime string cannot be parsed."""

    def __init__(
        self,
        message: str = "Failed to inspect cluster nodes",
        node_name: str | None = None,
        original_error: Exception | None = None,
    ) -> None:
        """Initialize InspectionError.

        Args:
            message: Human-readable error message.
            node_name: Node whose runtime string failed to parse, if any.
            original_error: The original exception that caused this error.
        """
        super().__init__(
            message=message,
            resource_type="Node" if node_name else None,
            resource_name=node_name,
        )
        self.node_name = node_name
        self.original_error = original_error
