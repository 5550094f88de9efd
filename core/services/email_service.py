# =============================================================================
# core/services/email_service.py - Inquiry Emails
# =============================================================================
# Sends two messages for every contact form submission:
# - a thank-you note to the person who inquired
# - a "New Inquiry from <name>" notification to the academy inbox
#
# Without SMTP credentials the messages are only logged ([MOCK EMAIL]), so
# local development and tests never need a mail server.
# =============================================================================

from __future__ import annotations

import html
import logging
import smtplib
from email.mime.multipart import MIMEMultipart
from email.mime.text import MIMEText
from email.utils import formataddr
from typing import TYPE_CHECKING, Any

from app.exceptions import EmailDeliveryError

if TYPE_CHECKING:
    from app.config import Settings

logger = logging.getLogger(__name__)


class EmailService:
    """
    SMTP sender for inquiry emails.

    Example:
        email = EmailService(settings)
        sent = email.send_inquiry_emails({"name": "Asha", "email": "asha@example.com", ...})
    """

    def __init__(self, settings: Settings):
        self.settings = settings

    @property
    def configured(self) -> bool:
        return self.settings.email_configured

    @property
    def academy_inbox(self) -> str:
        return self.settings.ACADEMY_EMAIL or self.settings.SMTP_USER

    # -------------------------------------------------------------------------
    # Message bodies
    # -------------------------------------------------------------------------

    def _thank_you_html(self, inquiry: dict[str, Any]) -> str:
        e = {k: html.escape(str(v or "")) for k, v in inquiry.items()}
        academy = html.escape(self.settings.ACADEMY_NAME)
        instagram = html.escape(self.settings.ACADEMY_INSTAGRAM_URL)
        return f"""
<div style="font-family: Arial, sans-serif; line-height: 1.6;">
  <p>Dear {e.get('name', '')},</p>
  <p>Thank you for reaching out to {academy}!</p>
  <p>We have received your inquiry and will get in touch with you very soon to discuss your requirements in detail.</p>
  <p>Here's a summary of your inquiry:</p>
  <ul>
    <li><strong>Course:</strong> {e.get('course', '')}</li>
    <li><strong>Mode:</strong> {e.get('mode', '')}</li>
    <li><strong>Contact:</strong> {e.get('mobile', '')}</li>
  </ul>
  <p>In the meantime, explore our Instagram page for glimpses of our performances, classes and student progress:
  <a href="{instagram}">{instagram}</a></p>
  <p>Looking forward to connecting with you!</p>
  <p>Warm regards,<br />{academy}</p>
</div>
"""

    @staticmethod
    def _notification_html(inquiry: dict[str, Any]) -> str:
        e = {k: html.escape(str(v or "")) for k, v in inquiry.items()}
        rows = "\n".join(
            f"  <p><strong>{label}:</strong> {e.get(field, '')}</p>"
            for label, field in (
                ("Name", "name"),
                ("Email", "email"),
                ("Mobile", "mobile"),
                ("Address", "address"),
                ("Course", "course"),
                ("Mode", "mode"),
            )
        )
        return (
            '<div style="font-family: Arial, sans-serif; line-height: 1.6;">\n'
            "  <h2>New Student Inquiry</h2>\n"
            f"{rows}\n"
            "</div>\n"
        )

    def build_messages(self, inquiry: dict[str, Any]) -> list[MIMEMultipart]:
        """Thank-you message first, academy notification second."""
        sender = self.settings.SMTP_USER or self.academy_inbox

        thank_you = MIMEMultipart()
        thank_you["From"] = formataddr((self.settings.EMAIL_FROM_NAME, sender))
        thank_you["To"] = str(inquiry["email"])
        thank_you["Subject"] = f"Thank You for Your Inquiry - {self.settings.ACADEMY_NAME}"
        thank_you.attach(MIMEText(self._thank_you_html(inquiry), "html", "utf-8"))

        notification = MIMEMultipart()
        notification["From"] = formataddr((f"{self.settings.ACADEMY_NAME} Website", sender))
        notification["To"] = self.academy_inbox
        notification["Subject"] = f"New Inquiry from {inquiry.get('name', '')}"
        notification["Reply-To"] = str(inquiry["email"])
        notification.attach(MIMEText(self._notification_html(inquiry), "html", "utf-8"))

        return [thank_you, notification]

    # -------------------------------------------------------------------------
    # Sending
    # -------------------------------------------------------------------------

    def send_inquiry_emails(self, inquiry: dict[str, Any]) -> bool:
        """
        Send both inquiry emails.

        Returns:
            True if both were handed to the SMTP server,
            False if SMTP is not configured (messages logged only)

        Raises:
            EmailDeliveryError: If the SMTP server fails
        """
        messages = self.build_messages(inquiry)

        if not self.configured:
            for msg in messages:
                logger.info(f"[MOCK EMAIL] To: {msg['To']} | Subject: {msg['Subject']}")
            logger.warning("SMTP credentials missing; inquiry emails were not sent")
            return False

        try:
            with smtplib.SMTP_SSL(self.settings.SMTP_HOST, self.settings.SMTP_PORT) as server:
                server.login(self.settings.SMTP_USER, self.settings.SMTP_PASSWORD)
                for msg in messages:
                    server.send_message(msg)
        except (smtplib.SMTPException, OSError) as e:
            logger.error(f"[EMAIL FAILED] {e}")
            raise EmailDeliveryError(str(e))

        for msg in messages:
            logger.info(f"[EMAIL SENT] To: {msg['To']} | Subject: {msg['Subject']}")
        return True

    def notify_in_background(self, inquiry: dict[str, Any]) -> None:
        """
        Background-task entry point used after a form submission.

        A delivery failure is logged; the inquiry is already saved.
        """
        try:
            self.send_inquiry_emails(inquiry)
        except EmailDeliveryError as e:
            logger.error(f"Inquiry emails for {inquiry.get('email')} failed: {e.message}")
