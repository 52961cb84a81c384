"""
Pydantic schema definitions for API payloads.

Users and tasks each define their own request and response models.
Schemas are separated from the database layer to decouple API
representation from persistence.
"""
