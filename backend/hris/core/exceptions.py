"""
Domain exceptions raised by the service layer.

Each carries the HTTP status and machine-readable code used when the API
renders it into the error envelope.
"""

from typing import List, Optional


class HRISError(Exception):
    status_code = 400
    code = "BAD_REQUEST"

    def __init__(
        self,
        message: str,
        code: Optional[str] = None,
        errors: Optional[List[dict]] = None,
    ):
        super().__init__(message)
        self.message = message
        if code:
            self.code = code
        self.errors = errors


class NotFoundError(HRISError):
    status_code = 404
    code = "NOT_FOUND"


class ConflictError(HRISError):
    status_code = 409
    code = "CONFLICT"


class InvalidTransitionError(ConflictError):
    """A workflow record is not in a state that allows the requested action."""

    code = "INVALID_TRANSITION"


class BusinessRuleError(HRISError):
    status_code = 422
    code = "BUSINESS_RULE_VIOLATION"


class PermissionDeniedError(HRISError):
    status_code = 403
    code = "FORBIDDEN"
