"""Adapters for filesystem path discovery and file parsing."""
