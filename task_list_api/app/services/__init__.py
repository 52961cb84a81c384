"""
Service layer abstraction.

Each service encapsulates business logic for a domain and talks to
SQLite through ``core.db``.  Endpoints call services and translate
their exceptions into HTTP responses.
"""
