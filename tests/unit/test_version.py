"""Tests for version module."""

from __future__ import annotations

import pytest

from cluster_control import __version__
from cluster_control.__version__ import __version__ as version_string


class TestVersion:
    """Test version information."""

    @pytest.mark.unit
    def test_version_format(self) -> None:
        """Version should be major.minor.patch."""
        parts = __version__.split(".")
        assert len(parts) == 3
        assert all(part.isdigit() for part in parts)

    @pytest.mark.unit
    def test_version_importable(self) -> None:
        """Version is re-exported from the package root."""
        assert __version__ == version_string
