"""
Top‑level package for the User API.

This file makes ``user_api`` a Python package so that modules within
``app`` can be imported using fully qualified names like
``user_api.app.main``.  Tests and the command line tools rely on these
absolute imports.

The package provides no public exports; all functionality lives in
submodules under ``app``.
"""

__all__ = []
