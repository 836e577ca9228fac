"""
Tests for the Resend API client.
"""

import pytest
import requests
from unittest.mock import MagicMock

from deephand.core.errors import DispatchFailure
from deephand.core.schema import EmailMessage
from deephand.notify.resend import ResendClient


@pytest.fixture
def message():
    return EmailMessage(
        sender="contact@deephandai.com",
        recipient="ops@deephandai.com",
        subject="[DeepHand] New Contact Inquiry: Hanako Sato",
        html="<p>hello</p>",
        text="hello",
        reply_to="hanako@acme-robotics.co.jp",
    )


@pytest.fixture
def session():
    session = MagicMock()
    response = MagicMock()
    response.ok = True
    response.status_code = 200
    response.json.return_value = {"id": "4ef9a417-02e9-4d39-ad75-9611e0fcc33c"}
    session.post.return_value = response
    return session


class TestResendClient:

    def test_send_returns_provider_id(self, session, message):
        client = ResendClient("re_test_key", timeout=4.0, session=session)

        assert client.send(message) == "4ef9a417-02e9-4d39-ad75-9611e0fcc33c"

        args, kwargs = session.post.call_args
        assert args[0] == "https://api.resend.com/emails"
        assert kwargs["timeout"] == 4.0
        assert kwargs["headers"]["Authorization"] == "Bearer re_test_key"
        assert kwargs["json"] == {
            "from": "contact@deephandai.com",
            "to": ["ops@deephandai.com"],
            "subject": "[DeepHand] New Contact Inquiry: Hanako Sato",
            "html": "<p>hello</p>",
            "text": "hello",
            "reply_to": "hanako@acme-robotics.co.jp",
        }

    def test_reply_to_omitted_when_unset(self, session, message):
        client = ResendClient("re_test_key", session=session)
        client.send(EmailMessage(message.sender, message.recipient, message.subject, message.html, message.text))

        assert "reply_to" not in session.post.call_args.kwargs["json"]

    def test_missing_api_key(self, session, message):
        client = ResendClient("", session=session)

        with pytest.raises(DispatchFailure):
            client.send(message)
        session.post.assert_not_called()

    def test_error_status(self, session, message):
        session.post.return_value.ok = False
        session.post.return_value.status_code = 422
        session.post.return_value.text = '{"message": "Invalid `to` field"}'
        client = ResendClient("re_test_key", session=session)

        with pytest.raises(DispatchFailure) as exc_info:
            client.send(message)
        assert exc_info.value.status_code == 422

    def test_timeout(self, session, message):
        session.post.side_effect = requests.exceptions.Timeout()
        client = ResendClient("re_test_key", timeout=2.0, session=session)

        with pytest.raises(DispatchFailure, match="timed out"):
            client.send(message)
        assert session.post.call_count == 1

    def test_connection_error(self, session, message):
        session.post.side_effect = requests.exceptions.ConnectionError("DNS failure")
        client = ResendClient("re_test_key", session=session)

        with pytest.raises(DispatchFailure):
            client.send(message)

    def test_response_without_id(self, session, message):
        session.post.return_value.json.return_value = {}
        client = ResendClient("re_test_key", session=session)

        with pytest.raises(DispatchFailure):
            client.send(message)
