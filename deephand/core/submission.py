"""
Client that posts wizard payloads to the form endpoints.
"""

from typing import Any, Dict, Mapping

import requests
from pydantic import ValidationError

from .messages import resolve_language, response_message
from .schema import SubmissionResult

ENDPOINTS = {
    "contact": "/api/contact",
    "request-data": "/api/request-data",
}


class SubmissionClient:
    """Issues one request per submission and always returns a SubmissionResult.

    Transport failures and unreadable responses are folded into a generic,
    localized failure result; nothing is raised to the caller and nothing is
    retried.
    """

    def __init__(self, base_url: str, timeout: float = 10.0, session: requests.Session = None):
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.session = session or requests.Session()

    def endpoint(self, form_kind: str) -> str:
        try:
            return self.base_url + ENDPOINTS[form_kind]
        except KeyError:
            raise ValueError(f"Unknown form kind: {form_kind}")

    def submit(self, form_kind: str, payload: Mapping[str, Any]) -> SubmissionResult:
        language = resolve_language(payload.get("language"))
        url = self.endpoint(form_kind)

        try:
            response = self.session.post(
                url,
                json=dict(payload),
                headers={"Accept": "application/json"},
                timeout=self.timeout,
            )
        except requests.exceptions.RequestException:
            return SubmissionResult(success=False, message=response_message("network_error", language))

        result = self._parse(response)
        if result is None:
            return SubmissionResult(success=False, message=response_message("server_error", language))

        if response.ok:
            return result
        # A non-success status is never reported as success, whatever the body says
        if result.success:
            return SubmissionResult(success=False, message=response_message("server_error", language))
        if not result.message:
            key = "validation_failed" if result.field_errors else "server_error"
            return result.model_copy(update={"message": response_message(key, language)})
        return result

    @staticmethod
    def _parse(response: requests.Response):
        try:
            body: Dict[str, Any] = response.json()
        except ValueError:
            return None
        if not isinstance(body, dict):
            return None
        try:
            return SubmissionResult.model_validate(body)
        except ValidationError:
            return None
