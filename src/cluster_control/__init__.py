"""Cluster resource control client for Kubernetes workloads."""

from cluster_control.__version__ import __version__

__all__ = ["__version__"]
