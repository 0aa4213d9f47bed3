"""Shared infrastructure used by datasources (HTTP client with retry)."""
