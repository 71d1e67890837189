"""
Email Delivery Models
Pydantic models for outbound notification payloads and delivery tracking.
"""

from datetime import datetime
from typing import Optional
from uuid import UUID, uuid4

from pydantic import BaseModel, Field


class EmailContent(BaseModel):
    """Generated email content."""

    subject: str
    body_html: str
    body_text: str
    from_email: str
    from_name: str
    to_email: str
    reply_to: Optional[str] = None


class DeliveryStatus(BaseModel):
    """Outcome of a single dispatch."""

    delivery_id: UUID = Field(default_factory=uuid4)
    channel: str = "email"
    status: str = "pending"  # pending, sent, failed
    sent_at: Optional[datetime] = None
    error_message: Optional[str] = None
    provider_message_id: Optional[str] = None
    attempts: int = 0

    @property
    def succeeded(self) -> bool:
        return self.status == "sent"
