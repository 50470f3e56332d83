"""Command-line interface for CIRCULATION."""
