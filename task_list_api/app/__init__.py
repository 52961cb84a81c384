"""
Application package initializer.

This package contains the main entrypoint for the API and all of its
submodules.  Configuration, logging, persistence and authentication
live in ``core``; request and response models in ``schemas``; business
rules in ``services``; and HTTP routes in ``api/v1/endpoints``.
Versioning is handled by grouping routers under the ``api/<version>/``
hierarchy.
"""

from .main import app  # noqa: F401
