"""
Tests for the HTTP submission client.
"""

import pytest
import requests
from unittest.mock import MagicMock

from deephand.core.submission import SubmissionClient


def make_response(status_code, body=None, invalid_json=False):
    response = MagicMock()
    response.status_code = status_code
    response.ok = 200 <= status_code < 400
    if invalid_json:
        response.json.side_effect = ValueError("No JSON object could be decoded")
    else:
        response.json.return_value = body
    return response


@pytest.fixture
def session():
    return MagicMock()


@pytest.fixture
def client(session):
    return SubmissionClient("https://deephandai.com/", timeout=3.0, session=session)


class TestSubmissionClient:

    def test_posts_once_to_form_endpoint(self, client, session, contact_body):
        session.post.return_value = make_response(200, {
            "success": True, "message": "received", "requestId": "CT-1A2B3C4D5E6F",
        })

        result = client.submit("contact", contact_body)

        assert result.success
        assert result.request_id == "CT-1A2B3C4D5E6F"
        session.post.assert_called_once()
        args, kwargs = session.post.call_args
        assert args[0] == "https://deephandai.com/api/contact"
        assert kwargs["json"] == contact_body
        assert kwargs["timeout"] == 3.0

    def test_data_request_endpoint(self, client):
        assert client.endpoint("request-data") == "https://deephandai.com/api/request-data"

    def test_unknown_form_kind(self, client):
        with pytest.raises(ValueError):
            client.endpoint("newsletter")

    def test_validation_failure_is_passed_through(self, client, session, contact_body):
        session.post.return_value = make_response(400, {
            "success": False,
            "message": "Some fields are invalid.",
            "fieldErrors": {"privacyConsent": ["Please agree to the privacy policy"]},
        })

        result = client.submit("contact", contact_body)

        assert not result.success
        assert result.field_errors == {"privacyConsent": ["Please agree to the privacy policy"]}

    def test_network_error_becomes_failure_result(self, client, session, contact_body):
        session.post.side_effect = requests.exceptions.ConnectionError("connection refused")

        result = client.submit("contact", contact_body)

        assert not result.success
        assert result.message == "A network error occurred. Please check your connection and try again."
        assert session.post.call_count == 1

    def test_timeout_becomes_failure_result(self, client, session, data_request_body):
        session.post.side_effect = requests.exceptions.Timeout()

        result = client.submit("request-data", data_request_body)

        assert not result.success
        assert result.message.startswith("通信エラー")

    def test_unreadable_body_is_server_error(self, client, session, contact_body):
        session.post.return_value = make_response(502, invalid_json=True)

        result = client.submit("contact", contact_body)

        assert not result.success
        assert result.message == "A server error occurred. Please try again later."

    def test_error_status_never_reported_as_success(self, client, session, contact_body):
        session.post.return_value = make_response(500, {"success": True, "message": "ok"})

        result = client.submit("contact", contact_body)

        assert not result.success

    def test_missing_message_is_filled_in(self, client, session, contact_body):
        session.post.return_value = make_response(400, {
            "success": False, "fieldErrors": {"name": ["too short"]},
        })

        result = client.submit("contact", contact_body)

        assert result.message == "Some fields are invalid. Please review the highlighted items."
        assert result.field_errors == {"name": ["too short"]}

    def test_non_object_body_is_server_error(self, client, session, contact_body):
        session.post.return_value = make_response(200, ["unexpected"])

        result = client.submit("contact", contact_body)

        assert not result.success
