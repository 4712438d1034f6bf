"""Shared helpers: logging setup and query-string parsing."""
