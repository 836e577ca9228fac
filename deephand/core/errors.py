"""
Error taxonomy for the submission pipeline.
Field validation problems are not exceptions; see validation.ValidationOutcome.
"""


class FormServiceError(Exception):
    """Base class for submission pipeline failures."""


class MalformedBody(FormServiceError):
    """The request body could not be parsed as a JSON object."""


class DispatchFailure(FormServiceError):
    """An outbound email could not be delivered to the provider."""

    def __init__(self, reason: str, status_code: int = None):
        super().__init__(reason)
        self.reason = reason
        self.status_code = status_code


class ConfigurationError(FormServiceError):
    """Email settings are incomplete, so nothing can be dispatched."""

    def __init__(self, issues):
        super().__init__("; ".join(issues))
        self.issues = list(issues)
