import pytest

from deephand.core.config import Settings
from deephand.core.errors import DispatchFailure
from deephand.core.handler import RequestHandler
from deephand.notify.dispatcher import NotificationDispatcher


class FakeResendClient:
    """Records outgoing messages instead of calling the Resend API."""

    def __init__(self, fail_for=(), error=None):
        self.sent = []
        self.attempts = []
        self.fail_for = set(fail_for)
        self.error = error

    def send(self, message):
        self.attempts.append(message)
        if message.recipient in self.fail_for:
            if self.error is not None:
                raise self.error
            raise DispatchFailure("Resend API error: 500 - upstream unavailable", status_code=500)
        self.sent.append(message)
        return f"msg_{len(self.sent):03d}"


@pytest.fixture
def settings():
    return Settings(
        resend_api_key="re_test_key",
        admin_email="ops@deephandai.com",
        from_email="contact@deephandai.com",
        noreply_email="noreply@deephandai.com",
        requests_email="requests@deephandai.com",
    )


@pytest.fixture
def fake_client():
    return FakeResendClient()


@pytest.fixture
def make_handler(settings):
    """Build a RequestHandler over a fake email client."""
    def _make(client=None, settings_override=None):
        active = settings_override or settings
        dispatcher = NotificationDispatcher(active, client=client or FakeResendClient())
        return RequestHandler(active, dispatcher=dispatcher)
    return _make


@pytest.fixture
def contact_body():
    return {
        "name": "Hanako Sato",
        "email": "hanako@acme-robotics.co.jp",
        "company": "Acme Robotics",
        "subject": "Annotation for grasping data",
        "message": "We would like to discuss labeling 20k images.",
        "privacyConsent": True,
        "language": "en",
    }


@pytest.fixture
def data_request_body():
    return {
        "name": "Taro Yamada",
        "email": "taro@acme-robotics.co.jp",
        "backgroundPurpose": "Training a pick-and-place model",
        "language": "ja",
    }


@pytest.fixture
def fake_resend():
    """Factory for FakeResendClient instances."""
    return FakeResendClient
