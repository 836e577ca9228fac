"""
Notification dispatch for accepted submissions.

Two sends happen per submission, in order: the business-critical email to the
operations inbox, then the best-effort acknowledgment to the submitter. The
acknowledgment is only attempted once the business email has been delivered.
"""

from datetime import datetime, timezone
from typing import Any, Callable, Mapping, Optional

from util.logging import logger
from ..core.config import Settings
from ..core.errors import DispatchFailure
from ..core.messages import resolve_language
from ..core.schema import DispatchOutcome, EmailDispatchRecord, EmailMessage, NotificationReport
from . import templates
from .resend import ResendClient

# form kind -> (business template, acknowledgment template)
FORM_TEMPLATES = {
    "contact": (templates.CONTACT_ADMIN, templates.CONTACT_ACK),
    "request-data": (templates.REQUEST_ADMIN, templates.REQUEST_ACK),
}


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class NotificationDispatcher:
    def __init__(self, settings: Settings, client: ResendClient = None,
                 clock: Callable[[], datetime] = _utcnow):
        self.settings = settings
        self.client = client or ResendClient(
            api_key=settings.resend_api_key,
            api_url=settings.resend_api_url,
            timeout=settings.email_timeout_sec,
        )
        self.clock = clock

    def _addresses(self, template_kind: str, data: Mapping[str, Any]):
        """Return (sender, recipient, reply_to) for ``template_kind``."""
        submitter = str(data.get("email") or "")
        if template_kind == templates.CONTACT_ADMIN:
            return self.settings.from_email, self.settings.business_recipient, submitter
        if template_kind == templates.REQUEST_ADMIN:
            return self.settings.requests_email, self.settings.business_recipient, submitter
        return self.settings.noreply_email, submitter, None

    def compose(self, template_kind: str, data: Mapping[str, Any], language: str,
                request_id: Optional[str] = None) -> EmailMessage:
        rendered = templates.render(
            template_kind,
            data,
            resolve_language(language, self.settings.default_language),
            site_url=self.settings.public_site_url,
            request_id=request_id,
            received_at=self.clock(),
        )
        sender, recipient, reply_to = self._addresses(template_kind, data)
        return EmailMessage(
            sender=sender,
            recipient=recipient,
            subject=rendered.subject,
            html=rendered.html,
            text=rendered.text,
            reply_to=reply_to,
        )

    def send(self, template_kind: str, data: Mapping[str, Any], language: str,
             request_id: Optional[str] = None) -> DispatchOutcome:
        """Compose and send one email; provider failures become an undelivered outcome."""
        message = self.compose(template_kind, data, language, request_id)
        try:
            message_id = self.client.send(message)
        except DispatchFailure as e:
            return DispatchOutcome(delivered=False, reason=e.reason)

        record = EmailDispatchRecord(
            provider_message_id=message_id,
            recipient=message.recipient,
            subject=message.subject,
            sent_at=self.clock(),
        )
        logger.log_dispatch(template_kind, "delivered", {
            "provider_message_id": record.provider_message_id,
            "to": record.recipient,
            "subject": record.subject,
            "sent_at": record.sent_at.isoformat(),
            "request_id": request_id,
        })
        return DispatchOutcome(delivered=True, message_id=message_id)

    def notify(self, form_kind: str, data: Mapping[str, Any], language: str,
               request_id: Optional[str] = None) -> NotificationReport:
        """Send the business email, then the acknowledgment if the first one went out."""
        try:
            business_kind, ack_kind = FORM_TEMPLATES[form_kind]
        except KeyError:
            raise ValueError(f"Unknown form kind: {form_kind}")

        business = self.send(business_kind, data, language, request_id)
        if not business.delivered:
            logger.log_dispatch(business_kind, "failed", {"reason": business.reason, "request_id": request_id})
            return NotificationReport(business=business)

        try:
            acknowledgment = self.send(ack_kind, data, language, request_id)
        except Exception as e:
            # Best-effort send: any failure is recorded, never raised
            logger.log_exception(f"dispatch.{ack_kind}", e, {"request_id": request_id})
            acknowledgment = DispatchOutcome(delivered=False, reason=f"{type(e).__name__}: {e}")

        if not acknowledgment.delivered:
            status = "tolerated" if self.settings.tolerate_ack_failure else "failed"
            logger.log_dispatch(ack_kind, status, {"reason": acknowledgment.reason, "request_id": request_id})

        return NotificationReport(business=business, acknowledgment=acknowledgment)
