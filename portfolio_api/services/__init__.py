"""
Contact pipeline services.
"""

from portfolio_api.services.contact import (
    ContactService,
    SubmissionOutcome,
    create_contact_service,
)
from portfolio_api.services.spam_filter import SpamFilter, SpamReason

__all__ = [
    "ContactService",
    "SubmissionOutcome",
    "create_contact_service",
    "SpamFilter",
    "SpamReason",
]
