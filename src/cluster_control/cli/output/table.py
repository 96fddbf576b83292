"""Rich table with cluster control CLI defaults."""

from __future__ import annotations

from typing import Any

from rich.table import Table as RichTable


class Table(RichTable):
    """Rich Table whose columns wrap long values instead of truncating.

    Resource names, selectors and kubectl messages are often long; folding
    keeps them readable in narrow terminals.
    """

    def add_column(self, *args: Any, overflow: Any = "fold", **kwargs: Any) -> None:
        """Add a column, defaulting ``overflow`` to ``"fold"``."""
        super().add_column(*args, overflow=overflow, **kwargs)
