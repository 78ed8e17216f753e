"""Endpoint modules for API v1; each exposes a ``router``."""
