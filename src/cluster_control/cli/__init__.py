"""Command-line interface for cluster control."""
