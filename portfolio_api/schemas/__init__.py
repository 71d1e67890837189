"""
Request/Response models for the contact API.
"""
from portfolio_api.schemas.contact import (
    ContactResponse,
    ContactSubmission,
    ErrorResponse,
    validate_submission,
)

__all__ = [
    "ContactResponse",
    "ContactSubmission",
    "ErrorResponse",
    "validate_submission",
]
