"""Output formatters for CLI commands: table, JSON or YAML."""

from __future__ import annotations

import json
from abc import ABC, abstractmethod
from collections.abc import Sequence
from dataclasses import asdict, is_dataclass
from enum import StrEnum
from typing import Any

import yaml
from rich.console import Console

from cluster_control.cli.output.table import Table


class OutputFormat(StrEnum):
    """Supported output formats."""

    TABLE = "table"
    JSON = "json"
    YAML = "yaml"


def to_data(item: Any) -> Any:
    """Convert display models, result dataclasses and documents to plain data."""
    if hasattr(item, "model_dump"):
        return item.model_dump(exclude_none=True)
    if hasattr(item, "to_dict"):
        return item.to_dict()
    if is_dataclass(item) and not isinstance(item, type):
        return asdict(item)
    return item


class Formatter(ABC):
    """Renders command results to a console."""

    def __init__(self, console: Console) -> None:
        self.console = console

    @abstractmethod
    def format_list(
        self,
        items: Sequence[Any],
        columns: list[tuple[str, str]],
        title: str = "",
    ) -> None:
        """Render a list of items."""

    @abstractmethod
    def format_dict(self, data: dict[str, Any], title: str = "") -> None:
        """Render a single mapping."""


class TableFormatter(Formatter):
    """Rich table output."""

    def format_list(
        self,
        items: Sequence[Any],
        columns: list[tuple[str, str]],
        title: str = "",
    ) -> None:
        table = Table(title=title, show_header=True)
        for _field, header in columns:
            style = "cyan" if header.lower() in ("name", "namespace") else None
            table.add_column(header, style=style)

        for item in items:
            data = to_data(item)
            table.add_row(*(self._cell(self._nested(data, f)) for f, _ in columns))

        self.console.print(table)
        self.console.print(f"\n[dim]Total: {len(items)}[/dim]")

    def format_dict(self, data: dict[str, Any], title: str = "") -> None:
        table = Table(title=title, show_header=True)
        table.add_column("Key", style="cyan", no_wrap=True)
        table.add_column("Value")
        for key, value in data.items():
            table.add_row(key, self._cell(value))
        self.console.print(table)

    @staticmethod
    def _nested(data: Any, path: str) -> Any:
        value = data
        for key in path.split("."):
            if not isinstance(value, dict) or key not in value:
                return None
            value = value[key]
        return value

    @staticmethod
    def _cell(value: Any) -> str:
        if isinstance(value, bool):
            return "Yes" if value else "No"
        if value is None:
            return "-"
        if isinstance(value, dict):
            return ",".join(f"{k}={v}" for k, v in value.items()) or "-"
        if isinstance(value, list):
            return ", ".join(str(v) for v in value) or "-"
        return str(value)


class JsonFormatter(Formatter):
    """JSON output."""

    def format_list(
        self,
        items: Sequence[Any],
        columns: list[tuple[str, str]],
        title: str = "",
    ) -> None:
        data = [to_data(i) for i in items]
        self.console.print_json(json.dumps({"data": data, "total": len(data)}, default=str))

    def format_dict(self, data: dict[str, Any], title: str = "") -> None:
        self.console.print_json(json.dumps(data, default=str))


class YamlFormatter(Formatter):
    """YAML output."""

    def format_list(
        self,
        items: Sequence[Any],
        columns: list[tuple[str, str]],
        title: str = "",
    ) -> None:
        data = [to_data(i) for i in items]
        self.console.print(
            yaml.safe_dump(data, default_flow_style=False, sort_keys=False),
            markup=False,
            highlight=False,
        )

    def format_dict(self, data: dict[str, Any], title: str = "") -> None:
        self.console.print(
            yaml.safe_dump(data, default_flow_style=False, sort_keys=False),
            markup=False,
            highlight=False,
        )


def get_formatter(format_type: OutputFormat, console: Console | None = None) -> Formatter:
    """Return the formatter for ``format_type``."""
    formatters: dict[OutputFormat, type[Formatter]] = {
        OutputFormat.TABLE: TableFormatter,
        OutputFormat.JSON: JsonFormatter,
        OutputFormat.YAML: YamlFormatter,
    }
    return formatters.get(format_type, TableFormatter)(console or Console())
