"""Candidate path resolvers."""
