"""
Minimal client for the Resend transactional email API.
"""

from typing import Any, Dict

import requests

from ..core.config import DEFAULT_RESEND_API_URL
from ..core.errors import DispatchFailure
from ..core.schema import EmailMessage


class ResendClient:
    """Sends one email per call over HTTPS; never retries."""

    def __init__(self, api_key: str, api_url: str = DEFAULT_RESEND_API_URL,
                 timeout: float = 5.0, session: requests.Session = None):
        self.api_key = api_key
        self.api_url = api_url
        self.timeout = timeout
        self.session = session or requests.Session()

    def _payload(self, message: EmailMessage) -> Dict[str, Any]:
        payload = {
            "from": message.sender,
            "to": [message.recipient],
            "subject": message.subject,
            "html": message.html,
            "text": message.text,
        }
        if message.reply_to:
            payload["reply_to"] = message.reply_to
        return payload

    def send(self, message: EmailMessage) -> str:
        """Send ``message`` and return the provider message id.

        Raises:
            DispatchFailure: on transport errors, timeouts, non-2xx responses,
                or a success response without an id.
        """
        if not self.api_key:
            raise DispatchFailure("RESEND_API_KEY is not configured")

        try:
            response = self.session.post(
                self.api_url,
                json=self._payload(message),
                headers={
                    "Authorization": f"Bearer {self.api_key}",
                    "Content-Type": "application/json",
                },
                timeout=self.timeout,
            )
        except requests.exceptions.Timeout:
            raise DispatchFailure(f"Resend API timed out after {self.timeout}s")
        except requests.exceptions.RequestException as e:
            raise DispatchFailure(f"Resend API request failed: {e}")

        if not response.ok:
            raise DispatchFailure(
                f"Resend API error: {response.status_code} - {response.text[:200]}",
                status_code=response.status_code,
            )

        try:
            body = response.json()
        except ValueError:
            raise DispatchFailure("Resend API returned a non-JSON body", status_code=response.status_code)

        message_id = body.get("id") if isinstance(body, dict) else None
        if not message_id:
            raise DispatchFailure("Resend API response did not include a message id", status_code=response.status_code)
        return str(message_id)
