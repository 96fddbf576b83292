"""Service layer for cluster operations."""
