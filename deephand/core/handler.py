"""
Server-side handling of form submissions.

The handler never trusts client-side validation: every body is parsed and
re-validated against the shared schema before any email is dispatched. Nothing
is persisted; the request id only correlates log lines and emails.
"""

import json
import uuid
from typing import Any, Callable, Dict, Tuple

from util.logging import logger
from .config import Settings, validate_email_config
from .errors import ConfigurationError, MalformedBody
from .messages import resolve_language, response_message
from .schema import SubmissionResult
from .validation import FORM_SCHEMAS

HTTP_OK = 200
HTTP_BAD_REQUEST = 400
HTTP_SERVER_ERROR = 500

REQUEST_ID_PREFIXES = {
    "contact": "CT",
    "request-data": "DR",
}
SUCCESS_MESSAGES = {
    "contact": "contact_success",
    "request-data": "request_success",
}


def new_request_id(form_kind: str) -> str:
    prefix = REQUEST_ID_PREFIXES.get(form_kind, "RQ")
    return f"{prefix}-{uuid.uuid4().hex[:12].upper()}"


def parse_body(raw_body: Any, content_type: str = None) -> Dict[str, Any]:
    """Parse a raw request body into a JSON object.

    Raises:
        MalformedBody: wrong content type, empty body, invalid UTF-8 or JSON,
            or a JSON value that is not an object.
    """
    if content_type and "application/json" not in content_type.lower():
        raise MalformedBody(f"Unsupported content type: {content_type}")

    if isinstance(raw_body, (bytes, bytearray)):
        try:
            raw_body = bytes(raw_body).decode("utf-8")
        except UnicodeDecodeError:
            raise MalformedBody("Request body is not valid UTF-8")

    if isinstance(raw_body, dict):
        return raw_body
    if not isinstance(raw_body, str) or not raw_body.strip():
        raise MalformedBody("Request body is empty")

    try:
        body = json.loads(raw_body)
    except json.JSONDecodeError as e:
        raise MalformedBody(f"Invalid JSON: {e.msg} at position {e.pos}")

    if not isinstance(body, dict):
        raise MalformedBody("Request body must be a JSON object")
    return body


class RequestHandler:
    """Validate a submission and trigger its notifications."""

    def __init__(self, settings: Settings, dispatcher=None,
                 id_factory: Callable[[str], str] = new_request_id):
        if dispatcher is None:
            from ..notify.dispatcher import NotificationDispatcher
            dispatcher = NotificationDispatcher(settings)
        self.settings = settings
        self.dispatcher = dispatcher
        self.id_factory = id_factory
        self.config_issues = validate_email_config(settings)

    def _failure(self, status: int, key: str, language: str, **extra) -> Tuple[int, SubmissionResult]:
        return status, SubmissionResult(success=False, message=response_message(key, language), **extra)

    def handle(self, form_kind: str, raw_body: Any, content_type: str = None) -> Tuple[int, SubmissionResult]:
        """Process one submission and return (HTTP status, result)."""
        if form_kind not in FORM_SCHEMAS:
            raise ValueError(f"Unknown form kind: {form_kind}")

        language = self.settings.default_language
        try:
            body = parse_body(raw_body, content_type)
            language = resolve_language(body.get("language"), self.settings.default_language)
            return self._process(form_kind, body, language)
        except MalformedBody as e:
            logger.log_malformed_body(form_kind, str(e))
            return self._failure(HTTP_BAD_REQUEST, "malformed_body", language)
        except ConfigurationError as e:
            logger.log_config_issues(e.issues)
            return self._failure(HTTP_SERVER_ERROR, "config_error", language)
        except Exception as e:
            logger.log_exception(f"submission.{form_kind}", e)
            return self._failure(HTTP_SERVER_ERROR, "server_error", language)

    def _process(self, form_kind: str, body: Dict[str, Any], language: str) -> Tuple[int, SubmissionResult]:
        outcome = FORM_SCHEMAS[form_kind].validate(body, language=language)
        if not outcome.valid:
            logger.log_validation_failure(form_kind, outcome.field_errors)
            return self._failure(
                HTTP_BAD_REQUEST, "validation_failed", language, field_errors=outcome.field_errors
            )

        if self.config_issues:
            raise ConfigurationError(self.config_issues)

        request_id = self.id_factory(form_kind)
        data = outcome.data
        report = self.dispatcher.notify(form_kind, data, language, request_id)

        if not report.business.delivered:
            logger.log_submission(form_kind, request_id, "dispatch_failed", {"reason": report.business.reason})
            return self._failure(HTTP_SERVER_ERROR, "dispatch_failed", language)

        if not report.acknowledged and not self.settings.tolerate_ack_failure:
            logger.log_submission(form_kind, request_id, "ack_failed", {
                "reason": report.acknowledgment.reason if report.acknowledgment else None,
            })
            return self._failure(HTTP_SERVER_ERROR, "dispatch_failed", language)

        logger.log_submission(form_kind, request_id, "accepted", {
            "message_id": report.business.message_id,
            "acknowledged": report.acknowledged,
            "language": language,
        })
        return HTTP_OK, SubmissionResult(
            success=True,
            message=response_message(SUCCESS_MESSAGES[form_kind], language),
            request_id=request_id,
        )
