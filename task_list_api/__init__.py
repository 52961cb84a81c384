"""
Top‑level package for the Task List API.

This file makes ``task_list_api`` a Python package so that modules
within ``app`` can be imported using fully qualified names like
``task_list_api.app.main``.  Tests and the command line helpers at the
repository root rely on these absolute imports.

The package provides no public exports; all functionality lives in
submodules under ``app``.
"""

__all__ = []
