"""Structured file loaders."""
