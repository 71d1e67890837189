"""Notification email rendering for contact submissions."""
import html
from datetime import datetime, timezone
from typing import Optional

from portfolio_api.core.config import Settings
from portfolio_api.delivery.models import EmailContent
from portfolio_api.schemas.contact import ContactSubmission

HTML_TEMPLATE = """
<div style="font-family: Arial, sans-serif; max-width: 600px; margin: 0 auto;">
  <h2 style="color: #1b2651;">New Contact Form Submission</h2>

  <div style="background: #edeae1; padding: 20px; border-radius: 8px; margin: 20px 0;">
    <p><strong>Name:</strong> {name}</p>
    <p><strong>Email:</strong> {email}</p>
  </div>

  <div style="background: white; padding: 20px; border-radius: 8px; border-left: 4px solid #1b2651;">
    <h3>Message:</h3>
    <p style="line-height: 1.6;">{message}</p>
  </div>

  <div style="margin-top: 20px; padding: 15px; background: #f5f5f5; border-radius: 8px; font-size: 12px; color: #666;">
    <p>This message was sent from the portfolio contact form at {site_url}</p>
    <p>Timestamp: {timestamp}</p>
  </div>
</div>
"""

TEXT_TEMPLATE = """
New Contact Form Submission

Name: {name}
Email: {email}

Message:
{message}

---
This message was sent from the portfolio contact form at {site_url}
Timestamp: {timestamp}
"""


def message_to_html(message: str) -> str:
    """Escape a plain-text message and turn its line breaks into <br>."""
    escaped = html.escape(message)
    return escaped.replace("\r\n", "\n").replace("\n", "<br>")


def build_contact_email(
    submission: ContactSubmission,
    settings: Settings,
    now: Optional[datetime] = None,
) -> EmailContent:
    """Render the notification sent to the site owner for one submission."""
    timestamp = (now or datetime.now(timezone.utc)).isoformat()
    site_url = settings.site_url or ""

    body_html = HTML_TEMPLATE.format(
        name=html.escape(submission.name),
        email=html.escape(submission.email),
        message=message_to_html(submission.message),
        site_url=html.escape(site_url),
        timestamp=timestamp,
    )
    body_text = TEXT_TEMPLATE.format(
        name=submission.name,
        email=submission.email,
        message=submission.message,
        site_url=site_url,
        timestamp=timestamp,
    )

    return EmailContent(
        subject=f"Portfolio Contact: Message from {submission.name}",
        body_html=body_html,
        body_text=body_text,
        from_email=settings.from_email,
        from_name=settings.from_name,
        to_email=settings.contact_email,
        reply_to=submission.email,
    )
