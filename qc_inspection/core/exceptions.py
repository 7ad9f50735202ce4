"""
Domain errors raised by the inspection core and services.

Every error carries a human-readable message, a stable error_code and an
optional details dict. The API layer maps each class to an HTTP status in
one place (see qc_inspection.main).
"""
from typing import Dict, Optional


class InspectionError(Exception):
    """Base exception for inspection workflow errors."""
    default_code = "INSPECTION_ERROR"

    def __init__(self, message: str, error_code: str = None, details: Optional[Dict] = None):
        self.message = message
        self.error_code = error_code or self.default_code
        self.details = details or {}
        super().__init__(self.message)


class Unauthenticated(InspectionError):
    """Raised when an operation is attempted without an acting identity."""
    default_code = "UNAUTHENTICATED"


class Forbidden(InspectionError):
    """Raised when the acting role is not authorized for the operation."""
    default_code = "FORBIDDEN"


class InvalidState(InspectionError):
    """Raised when a report's current status does not allow the transition."""
    default_code = "INVALID_STATE"


class ConcurrentUpdateError(InvalidState):
    """Raised when a guarded update finds the document already changed."""
    default_code = "CONCURRENT_UPDATE"


class ValidationFailed(InspectionError):
    """Raised when required input (confirmation, signature, part fields) is missing."""
    default_code = "VALIDATION_FAILED"


class NotFound(InspectionError):
    """Raised when a referenced part, report or user does not exist."""
    default_code = "NOT_FOUND"


class StoreError(InspectionError):
    """Raised when the document store fails to apply a change."""
    default_code = "STORE_ERROR"
