"""
Structured logging for the form submission service.
Submission, validation and email dispatch events are logged with sanitized details.
"""

import logging
from typing import Any, Dict, List

# Fields that may carry personal data or free text written by the submitter
SENSITIVE_FIELDS = [
    'email', 'name', 'phone', 'message', 'contactPerson', 'organization', 'company',
    'subject', 'backgroundPurpose', 'dataDetails', 'otherRequirements', 'reply_to', 'to',
    'api_key', 'secret', 'password',
]


class StructuredLogger:
    """Structured logger for submission, validation and dispatch operations."""

    def __init__(self, name: str = "deephand"):
        self.logger = logging.getLogger(name)
        self.logger.setLevel(logging.INFO)

        # Create handler if not already set
        if not self.logger.handlers:
            handler = logging.StreamHandler()
            formatter = logging.Formatter(
                '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
            )
            handler.setFormatter(formatter)
            self.logger.addHandler(handler)

    def log_operation(self, operation: str, status: str, details: Dict[str, Any] = None, level: int = logging.INFO):
        """Log a structured operation."""
        message = f"Operation: {operation}, Status: {status}"
        if details:
            message += f", Details: {details}"

        self.logger.log(level, message)

    def log_submission(self, form_kind: str, request_id: str, status: str = "accepted", details: Dict[str, Any] = None):
        """Log the outcome of one form submission."""
        log_details = {"form": form_kind, "request_id": request_id}
        if details:
            log_details.update(sanitize_payload(details))

        level = logging.INFO if status == "accepted" else logging.ERROR
        self.log_operation(f"submission.{form_kind}", status, log_details, level=level)

    def log_validation_failure(self, form_kind: str, field_errors: Dict[str, List[str]], source: str = "api"):
        """Log rejected fields only; submitted values never reach the log."""
        log_details = {
            "form": form_kind,
            "fields": sorted(field_errors),
            "error_count": sum(len(messages) for messages in field_errors.values()),
            "source": source
        }
        self.log_operation("validation.error", "rejected", log_details, level=logging.WARNING)

    def log_malformed_body(self, form_kind: str, reason: str):
        """Log a request body that could not be parsed."""
        log_details = {"form": form_kind, "reason": reason[:100]}
        self.log_operation("request.malformed", "rejected", log_details, level=logging.WARNING)

    def log_dispatch(self, template_kind: str, status: str, details: Dict[str, Any] = None):
        """Log a single outbound email dispatch."""
        log_details = {"template": template_kind}
        if details:
            log_details.update(sanitize_payload(details))

        if status == "delivered":
            level = logging.INFO
        elif status == "tolerated":
            level = logging.WARNING
        else:
            level = logging.ERROR
        self.log_operation(f"dispatch.{template_kind}", status, log_details, level=level)

    def log_config_issues(self, issues: List[str]):
        """Log configuration problems found at startup or before a dispatch."""
        if not issues:
            self.log_operation("config.email", "valid")
            return
        self.log_operation("config.email", "invalid", {"issues": issues}, level=logging.ERROR)

    def log_exception(self, operation: str, exc: BaseException, details: Dict[str, Any] = None):
        """Log an unexpected failure with its traceback."""
        log_details = {"error_type": type(exc).__name__, "error": str(exc)[:200]}
        if details:
            log_details.update(sanitize_payload(details))
        self.logger.error(f"Operation: {operation}, Status: failed, Details: {log_details}", exc_info=exc)


# Global logger instance
logger = StructuredLogger()


def sanitize_payload(payload: Any, reveal_sensitive: bool = False, sensitive_fields: List[str] = None) -> Any:
    """Sanitize payloads for logging."""
    if sensitive_fields is None:
        sensitive_fields = SENSITIVE_FIELDS

    if isinstance(payload, dict):
        sanitized = {}
        for k, v in payload.items():
            if reveal_sensitive or k not in sensitive_fields:
                sanitized[k] = sanitize_payload(v, reveal_sensitive, sensitive_fields)
            else:
                sanitized[k] = "[REDACTED]"
        return sanitized
    elif isinstance(payload, str):
        # Truncate long strings
        return payload[:100] + "..." if len(payload) > 100 else payload
    elif isinstance(payload, (list, tuple)):
        return [sanitize_payload(item, reveal_sensitive, sensitive_fields) for item in payload]
    else:
        return payload
