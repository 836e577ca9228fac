"""
Tests for notification dispatch ordering, addressing and failure handling.
"""

from datetime import datetime, timezone

import pytest

from deephand.core.validation import CONTACT_SCHEMA, DATA_REQUEST_SCHEMA
from deephand.notify import templates
from deephand.notify.dispatcher import NotificationDispatcher

FIXED_TIME = datetime(2026, 4, 1, 9, 30, tzinfo=timezone.utc)


@pytest.fixture
def contact_data(contact_body):
    return CONTACT_SCHEMA.validate(contact_body).data


@pytest.fixture
def request_data(data_request_body):
    return DATA_REQUEST_SCHEMA.validate(dict(data_request_body, dataType=["image", "sensor"])).data


class TestNotificationDispatcher:

    def test_business_email_first_then_acknowledgment(self, settings, fake_resend, contact_data):
        client = fake_resend()
        dispatcher = NotificationDispatcher(settings, client=client, clock=lambda: FIXED_TIME)

        report = dispatcher.notify("contact", contact_data, "en", "CT-000000000001")

        assert report.business.delivered
        assert report.acknowledged
        admin, ack = client.sent
        assert admin.sender == "contact@deephandai.com"
        assert admin.recipient == "ops@deephandai.com"
        assert admin.reply_to == "hanako@acme-robotics.co.jp"
        assert admin.subject == "[DeepHand] New Contact Inquiry: Hanako Sato"
        assert "CT-000000000001" in admin.text
        assert ack.sender == "noreply@deephandai.com"
        assert ack.recipient == "hanako@acme-robotics.co.jp"
        assert ack.reply_to is None

    def test_data_request_uses_requests_sender(self, settings, fake_resend, request_data):
        client = fake_resend()
        dispatcher = NotificationDispatcher(settings, client=client)

        dispatcher.notify("request-data", request_data, "ja", "DR-000000000001")

        admin, ack = client.sent
        assert admin.sender == "requests@deephandai.com"
        assert admin.subject == "【DeepHand】新しいデータアノテーション依頼: Taro Yamada"
        assert "画像データ, センサーデータ" in admin.text
        assert ack.subject == "【DeepHand】データアノテーション依頼を受け付けました"

    def test_business_failure_skips_acknowledgment(self, settings, fake_resend, contact_data):
        client = fake_resend(fail_for={"ops@deephandai.com"})
        dispatcher = NotificationDispatcher(settings, client=client)

        report = dispatcher.notify("contact", contact_data, "en")

        assert not report.business.delivered
        assert "500" in report.business.reason
        assert report.acknowledgment is None
        assert len(client.attempts) == 1

    def test_acknowledgment_failure_is_reported_not_raised(self, settings, fake_resend, contact_data):
        client = fake_resend(fail_for={"hanako@acme-robotics.co.jp"})
        dispatcher = NotificationDispatcher(settings, client=client)

        report = dispatcher.notify("contact", contact_data, "en")

        assert report.business.delivered
        assert report.business.message_id == "msg_001"
        assert not report.acknowledged

    def test_unexpected_acknowledgment_error_is_contained(self, settings, fake_resend, contact_data):
        client = fake_resend(fail_for={"hanako@acme-robotics.co.jp"}, error=RuntimeError("socket closed"))
        dispatcher = NotificationDispatcher(settings, client=client)

        report = dispatcher.notify("contact", contact_data, "en")

        assert report.business.delivered
        assert not report.acknowledged
        assert "RuntimeError" in report.acknowledgment.reason

    def test_compose_falls_back_to_default_language(self, settings, contact_data):
        dispatcher = NotificationDispatcher(settings, client=object(), clock=lambda: FIXED_TIME)

        message = dispatcher.compose(templates.CONTACT_ACK, contact_data, "de")

        assert message.subject == "【DeepHand】お問い合わせを受け付けました"

    def test_unknown_form_kind(self, settings, fake_resend):
        dispatcher = NotificationDispatcher(settings, client=fake_resend())

        with pytest.raises(ValueError):
            dispatcher.notify("newsletter", {}, "en")
