"""
Process-wide configuration for the form submission service.
Loaded once from the environment into an immutable Settings object and injected
into the request handler and notification dispatcher.
"""

import os
from dataclasses import dataclass, field
from typing import List, Mapping, Optional, Tuple

from dotenv import load_dotenv

# Version string
VERSION = "1.0.0"

SUPPORTED_LANGUAGES = ("ja", "en")
DEFAULT_LANGUAGE = "ja"

# Asymmetric dispatch: acknowledgment email failure is logged and tolerated,
# or it fails the whole submission like the business email does.
ACK_POLICY_TOLERATE = "tolerate"
ACK_POLICY_FAIL = "fail"
ACK_POLICIES = (ACK_POLICY_TOLERATE, ACK_POLICY_FAIL)

DEFAULT_RESEND_API_URL = "https://api.resend.com/emails"
DEFAULT_SITE_URL = "https://deephandai.com"
DEFAULT_CORS_ORIGINS = ("http://localhost:4321", "http://127.0.0.1:4321", "https://deephandai.com")


@dataclass(frozen=True)
class Settings:
    resend_api_key: str = ""
    resend_api_url: str = DEFAULT_RESEND_API_URL
    public_site_url: str = DEFAULT_SITE_URL
    admin_email: str = "contact@deephandai.com"
    from_email: str = "contact@deephandai.com"
    noreply_email: str = "noreply@deephandai.com"
    requests_email: str = "requests@deephandai.com"
    test_email_recipient: str = ""
    default_language: str = DEFAULT_LANGUAGE
    email_timeout_sec: float = 5.0
    ack_failure_policy: str = ACK_POLICY_TOLERATE
    debug: bool = False
    cors_allow_origins: Tuple[str, ...] = field(default=DEFAULT_CORS_ORIGINS)

    @property
    def business_recipient(self) -> str:
        """Operations inbox, redirected to the test recipient when one is set."""
        return self.test_email_recipient or self.admin_email

    @property
    def tolerate_ack_failure(self) -> bool:
        return self.ack_failure_policy == ACK_POLICY_TOLERATE


def _flag(value: Optional[str], default: bool) -> bool:
    if value is None or value == "":
        return default
    return value.strip().lower() == "true"


def _split_origins(value: Optional[str]) -> Tuple[str, ...]:
    if not value:
        return DEFAULT_CORS_ORIGINS
    return tuple(origin.strip() for origin in value.split(",") if origin.strip())


def load_settings(environ: Mapping[str, str] = None, dotenv: bool = True) -> Settings:
    """Build Settings from the environment.

    A ``.env`` file in the working directory is loaded first unless ``dotenv``
    is False. Variables already present in the environment win over the file.
    Passing ``environ`` bypasses both and reads only from that mapping.
    """
    if environ is None:
        if dotenv:
            load_dotenv(override=False)
        environ = os.environ

    def get(name: str, default: str = "") -> str:
        value = environ.get(name)
        return value.strip() if value and value.strip() else default

    timeout_raw = get("EMAIL_TIMEOUT_SEC", "5")
    try:
        timeout = float(timeout_raw)
    except ValueError:
        raise ValueError(f"EMAIL_TIMEOUT_SEC must be a number, got {timeout_raw!r}")

    return Settings(
        resend_api_key=get("RESEND_API_KEY"),
        resend_api_url=get("RESEND_API_URL", DEFAULT_RESEND_API_URL),
        public_site_url=get("PUBLIC_SITE_URL", DEFAULT_SITE_URL),
        admin_email=get("ADMIN_EMAIL", "contact@deephandai.com"),
        from_email=get("FROM_EMAIL", "contact@deephandai.com"),
        noreply_email=get("NOREPLY_EMAIL", "noreply@deephandai.com"),
        requests_email=get("REQUESTS_EMAIL", "requests@deephandai.com"),
        test_email_recipient=get("TEST_EMAIL_RECIPIENT"),
        default_language=get("DEFAULT_LANGUAGE", DEFAULT_LANGUAGE).lower(),
        email_timeout_sec=timeout,
        ack_failure_policy=get("ACK_FAILURE_POLICY", ACK_POLICY_TOLERATE).lower(),
        debug=_flag(environ.get("DEBUG"), False),
        cors_allow_origins=_split_origins(environ.get("CORS_ALLOW_ORIGINS")),
    )


def validate_email_config(settings: Settings) -> List[str]:
    """Validate email configuration and return any issues."""
    issues = []

    if not settings.resend_api_key:
        issues.append("RESEND_API_KEY is required")
    elif not settings.resend_api_key.startswith("re_"):
        issues.append('RESEND_API_KEY must start with "re_"')

    if not settings.public_site_url:
        issues.append("PUBLIC_SITE_URL is required")
    elif not settings.public_site_url.startswith(("http://", "https://")):
        issues.append("PUBLIC_SITE_URL must start with http:// or https://")

    for name, value in (
        ("ADMIN_EMAIL", settings.admin_email),
        ("FROM_EMAIL", settings.from_email),
        ("NOREPLY_EMAIL", settings.noreply_email),
        ("REQUESTS_EMAIL", settings.requests_email),
    ):
        if not value:
            issues.append(f"{name} is required")
        elif "@" not in value:
            issues.append(f"{name} must be an email address")

    if settings.default_language not in SUPPORTED_LANGUAGES:
        issues.append(f"Invalid DEFAULT_LANGUAGE: {settings.default_language}")

    if settings.ack_failure_policy not in ACK_POLICIES:
        issues.append(f"Invalid ACK_FAILURE_POLICY: {settings.ack_failure_policy}")

    if settings.email_timeout_sec <= 0:
        issues.append("EMAIL_TIMEOUT_SEC must be > 0")

    return issues
