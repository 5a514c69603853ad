"""Shared builders for container installer tests."""
