# =============================================================================
# app/routers/notifications.py - Inquiry Email Endpoint
# =============================================================================
# Sends the thank-you and academy notification emails for an inquiry
# without storing anything. POST /inquiries already does this in the
# background; this endpoint is for callers that want the delivery result.
# =============================================================================

from fastapi import APIRouter
from pydantic import BaseModel

from app.dependencies import EmailDep
from core.models.inquiry import InquiryCreate

router = APIRouter()


class EmailResponse(BaseModel):
    """sent=false means SMTP is not configured and the emails were only logged."""
    sent: bool
    message: str


@router.post("/inquiry", response_model=EmailResponse)
def send_inquiry_email(body: InquiryCreate, email: EmailDep):
    """
    Send the inquiry emails now.

    Returns 502 EMAIL_DELIVERY_FAILED when the SMTP server fails.
    """
    sent = email.send_inquiry_emails(body.model_dump(mode="json"))
    return EmailResponse(
        sent=sent,
        message="Emails sent successfully" if sent else "Email is not configured; messages were logged",
    )
