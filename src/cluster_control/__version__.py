"""Version information for cluster_control."""

__version__ = "0.1.0"
