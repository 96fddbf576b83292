"""Logging configuration for cluster_control."""

from cluster_control.logging.config import configure_logging, get_logger, resolve_log_level

__all__ = ["configure_logging", "get_logger", "resolve_log_level"]
