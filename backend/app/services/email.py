# backend/app/services/email.py
"""
Email delivery for Courtside.

``EmailService`` sends through the Resend API. ``get_email_sender`` returns
``ConsoleEmailService`` instead when the console provider is configured or no
API key is set, so local runs and tests never reach the network.
"""

import logging
import re
from typing import Any, Dict, Optional, Union

import resend
from sqlalchemy.orm import Session

from ..core.config import settings
from ..core.exceptions import ServiceException
from ..monitoring.prometheus_metrics import prometheus_metrics
from .base import BaseService
from .email_console import ConsoleEmailService

logger = logging.getLogger(__name__)


def html_to_text(html_content: str) -> str:
    """Plain-text fallback for an HTML body."""
    text = re.sub(r"<[^>]+>", "", html_content)
    return re.sub(r"\s+", " ", text).strip()


class EmailService(BaseService):
    """Resend-backed email sender."""

    provider_name = "resend"

    def __init__(self, db: Session, api_key: Optional[str] = None):
        super().__init__(db)
        api_key = api_key or settings.resend_api_key
        if not api_key:
            raise ServiceException("Resend API key not configured")
        resend.api_key = api_key
        self.from_email = settings.from_email

    @BaseService.measure_operation("send_email")
    def send_email(
        self,
        to_email: str,
        subject: str,
        html_content: str,
        text_content: Optional[str] = None,
    ) -> Dict[str, Any]:
        """
        Send an email.

        Raises:
            ServiceException: If the provider rejects the message
        """
        email_data = {
            "from": self.from_email,
            "to": to_email,
            "subject": subject,
            "html": html_content,
            "text": text_content or html_to_text(html_content),
        }
        try:
            response = resend.Emails.send(email_data)
        except Exception as e:
            self.logger.error(f"Failed to send email to {to_email}: {str(e)}")
            prometheus_metrics.inc_email(self.provider_name, "failed")
            raise ServiceException(f"Email sending failed: {str(e)}")

        self.log_operation("email_sent", to_email=to_email, subject=subject)
        prometheus_metrics.inc_email(self.provider_name, "sent")
        return dict(response) if response else {}


EmailSender = Union[EmailService, ConsoleEmailService]


def get_email_sender(db: Session) -> EmailSender:
    """Pick the configured email backend."""
    if settings.email_provider == "console" or not settings.resend_api_key:
        return ConsoleEmailService()
    return EmailService(db)
