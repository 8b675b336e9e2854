"""
Realty CRM Error Taxonomy

Every client-visible failure is one of these. The HTTP layer renders them
through the handlers registered in main.py; services only raise.
"""

from typing import Optional


class CRMError(Exception):
    """Base class for all domain errors"""

    status_code: int = 400
    error: str = "error"

    def __init__(self, message: str, field: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.field = field

    def to_dict(self) -> dict:
        body = {
            "status": "error",
            "error": self.error,
            "message": self.message,
        }
        if self.field:
            body["field"] = self.field
        return body


class ValidationError(CRMError):
    """Required field missing or identifier malformed"""

    status_code = 400
    error = "validation_error"


class NotFoundError(CRMError):
    """Referenced record does not exist"""

    status_code = 404
    error = "not_found"


class ForbiddenError(CRMError):
    """Actor is authenticated but not permitted"""

    status_code = 403
    error = "forbidden"


class UnauthenticatedError(CRMError):
    """Credential missing or invalid"""

    status_code = 401
    error = "unauthenticated"


class StoreError(CRMError):
    """Underlying persistence failure"""

    status_code = 500
    error = "store_error"

    def to_dict(self) -> dict:
        # Never leak driver detail to the caller
        return {
            "status": "error",
            "error": self.error,
            "message": "The operation could not be completed and may have been partially applied",
        }
