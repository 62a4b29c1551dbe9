"""Shared utilities used across layers (logging, datetime, env lookup)."""
