"""
Email Delivery
Renders and sends the owner notification for a contact submission.
"""
from portfolio_api.delivery.channels import ResendChannel
from portfolio_api.delivery.models import DeliveryStatus, EmailContent
from portfolio_api.delivery.templates import build_contact_email

__all__ = [
    "ResendChannel",
    "DeliveryStatus",
    "EmailContent",
    "build_contact_email",
]
