"""Label selector matching over already-fetched services."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from cluster_control.integrations.kubernetes.models.networking import ServiceSummary
from cluster_control.integrations.kubernetes.models.unstructured import UnstructuredObject


def service_selector(service: Any) -> dict[str, str]:
    """Return the declared selector of a service in any supported shape.

    Accepts a kubernetes ``V1Service``, a :class:`ServiceSummary`, an
    :class:`UnstructuredObject` or a plain ``{"spec": {"selector": ...}}``
    mapping. A service without a selector yields an empty dict.
    """
    if isinstance(service, ServiceSummary):
        selector = service.selector
    elif isinstance(service, UnstructuredObject):
        selector = service.get("spec", "selector")
    elif isinstance(service, Mapping):
        spec = service.get("spec")
        selector = spec.get("selector") if isinstance(spec, Mapping) else None
    else:
        spec = getattr(service, "spec", None)
        selector = getattr(spec, "selector", None)
    return dict(selector) if selector else {}


def service_matches_selector(service: Any, label_map: Mapping[str, str]) -> bool:
    """True iff every entry of ``label_map`` appears in the service's selector.

    Subset match: keys the service selects on beyond ``label_map`` do not
    disqualify it. An empty ``label_map`` matches every service.
    """
    selector = service_selector(service)
    return all(key in selector and selector[key] == value for key, value in label_map.items())


def format_label_selector(label_map: Mapping[str, str]) -> str:
    """Render an equality-based label selector, e.g. ``app=web,tier=frontend``.

    Keys are sorted so equal maps render identically.
    """
    return ",".join(f"{key}={label_map[key]}" for key in sorted(label_map))
