"""Schema-less resource addressing and documents.

A :class:`ResourceCoordinate` addresses any cluster object by
group/version/resource, and an :class:`UnstructuredObject` holds the
document the cluster reports for it without binding to a typed model.
"""

from __future__ import annotations

import copy
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

CORE_GROUP = ""


@dataclass(frozen=True)
class ResourceCoordinate:
    """Address of a resource kind, optionally narrowed to a namespace and name."""

    group: str
    version: str
    resource: str
    namespace: str | None = None
    name: str | None = None

    @property
    def api_version(self) -> str:
        """``version`` for the core group, ``group/version`` otherwise."""
        if self.group == CORE_GROUP:
            return self.version
        return f"{self.group}/{self.version}"

    def with_name(self, name: str, namespace: str | None = None) -> ResourceCoordinate:
        """Return a copy addressing a single named object."""
        return ResourceCoordinate(
            group=self.group,
            version=self.version,
            resource=self.resource,
            namespace=namespace if namespace is not None else self.namespace,
            name=name,
        )

    def __str__(self) -> str:
        path = f"{self.resource}.{self.api_version}"
        if self.namespace:
            path = f"{self.namespace}/{path}"
        if self.name:
            path = f"{path}/{self.name}"
        return path


class UnstructuredObject:
    """A cluster resource document with no fixed schema.

    Only the metadata accessors assume any structure. The wrapped mapping
    is copied on construction and on :meth:`to_dict`, so holders cannot
    mutate each other's view.
    """

    __slots__ = ("_content",)

    def __init__(self, content: Mapping[str, Any]) -> None:
        self._content: dict[str, Any] = copy.deepcopy(dict(content))

    @property
    def api_version(self) -> str | None:
        return self._content.get("apiVersion")

    @property
    def kind(self) -> str | None:
        return self._content.get("kind")

    @property
    def metadata(self) -> dict[str, Any]:
        metadata = self._content.get("metadata")
        return metadata if isinstance(metadata, dict) else {}

    @property
    def name(self) -> str | None:
        return self.metadata.get("name")

    @property
    def namespace(self) -> str | None:
        return self.metadata.get("namespace")

    @property
    def labels(self) -> dict[str, str]:
        return dict(self.metadata.get("labels") or {})

    @property
    def annotations(self) -> dict[str, str]:
        return dict(self.metadata.get("annotations") or {})

    def get(self, *path: str, default: Any = None) -> Any:
        """Read a nested field, e.g. ``obj.get("spec", "selector")``."""
        current: Any = self._content
        for key in path:
            if not isinstance(current, Mapping) or key not in current:
                return default
            current = current[key]
        return copy.deepcopy(current)

    def to_dict(self) -> dict[str, Any]:
        """Return a deep copy of the full document."""
        return copy.deepcopy(self._content)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, UnstructuredObject):
            return NotImplemented
        return self._content == other._content

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        return (
            f"UnstructuredObject(kind={self.kind!r}, name={self.name!r}, "
            f"namespace={self.namespace!r})"
        )


@dataclass(frozen=True)
class ResourceNotFound:
    """Outcome of a generic lookup whose target does not exist.

    Falsy, so ``if result:`` reads as "found". Returned, never raised.
    """

    coordinate: ResourceCoordinate
    message: str = "resource not found"

    def __bool__(self) -> bool:
        return False
