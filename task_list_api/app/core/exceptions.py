"""
Error types raised by the service layer.

Services raise these exceptions and endpoints translate them into
HTTP responses.  Both derive from ``ValueError`` so that callers which
only care about "bad input" can catch them together.
"""

from typing import Dict, List, Optional


class NotFoundError(ValueError):
    """The requested record does not exist for the caller.

    Raised identically whether the record is absent, soft-deleted or
    owned by somebody else.
    """


class ValidationError(ValueError):
    """Submitted attributes failed validation.

    ``errors`` maps a field name to a list of human readable messages,
    e.g. ``{"title": ["can't be blank"]}``.
    """

    def __init__(self, errors: Dict[str, List[str]], message: Optional[str] = None) -> None:
        self.errors = errors
        if message is None:
            message = "; ".join(
                f"{field} {msg}" for field, msgs in errors.items() for msg in msgs
            )
        super().__init__(message)
