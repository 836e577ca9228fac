"""
Tests for settings loading and email configuration validation.
"""

from dataclasses import replace

import pytest

from deephand.core.config import (
    ACK_POLICY_FAIL,
    DEFAULT_CORS_ORIGINS,
    DEFAULT_LANGUAGE,
    DEFAULT_RESEND_API_URL,
    Settings,
    load_settings,
    validate_email_config,
)
from deephand.core import messages
from deephand.core.messages import resolve_language


class TestLoadSettings:

    def test_defaults_from_empty_environment(self):
        settings = load_settings(environ={})

        assert settings.resend_api_key == ""
        assert settings.resend_api_url == DEFAULT_RESEND_API_URL
        assert settings.default_language == "ja"
        assert settings.email_timeout_sec == 5.0
        assert settings.tolerate_ack_failure
        assert not settings.debug
        assert settings.cors_allow_origins == DEFAULT_CORS_ORIGINS

    def test_values_from_environment(self):
        settings = load_settings(environ={
            "RESEND_API_KEY": " re_live_123 ",
            "ADMIN_EMAIL": "ops@deephandai.com",
            "DEFAULT_LANGUAGE": "EN",
            "EMAIL_TIMEOUT_SEC": "2.5",
            "ACK_FAILURE_POLICY": "Fail",
            "DEBUG": "true",
            "CORS_ALLOW_ORIGINS": "https://deephandai.com, https://staging.deephandai.com",
        })

        assert settings.resend_api_key == "re_live_123"
        assert settings.admin_email == "ops@deephandai.com"
        assert settings.default_language == "en"
        assert settings.email_timeout_sec == 2.5
        assert settings.ack_failure_policy == ACK_POLICY_FAIL
        assert not settings.tolerate_ack_failure
        assert settings.debug
        assert settings.cors_allow_origins == ("https://deephandai.com", "https://staging.deephandai.com")

    def test_bad_timeout(self):
        with pytest.raises(ValueError):
            load_settings(environ={"EMAIL_TIMEOUT_SEC": "soon"})

    def test_test_recipient_redirects_business_email(self):
        settings = load_settings(environ={
            "ADMIN_EMAIL": "ops@deephandai.com",
            "TEST_EMAIL_RECIPIENT": "qa@deephandai.com",
        })

        assert settings.business_recipient == "qa@deephandai.com"

    def test_default_language_shared_with_messages(self):
        assert Settings().default_language == DEFAULT_LANGUAGE
        assert load_settings(environ={}).default_language == DEFAULT_LANGUAGE
        assert resolve_language("ko") == DEFAULT_LANGUAGE
        assert messages.DEFAULT_LANGUAGE is DEFAULT_LANGUAGE

    def test_settings_are_immutable(self):
        settings = Settings()
        with pytest.raises(Exception):
            settings.admin_email = "someone@else.example"


class TestValidateEmailConfig:

    def test_valid(self, settings):
        assert validate_email_config(settings) == []

    def test_missing_api_key(self, settings):
        issues = validate_email_config(replace(settings, resend_api_key=""))
        assert issues == ["RESEND_API_KEY is required"]

    def test_api_key_prefix(self, settings):
        issues = validate_email_config(replace(settings, resend_api_key="sk_live_123"))
        assert issues == ['RESEND_API_KEY must start with "re_"']

    def test_site_url_scheme(self, settings):
        issues = validate_email_config(replace(settings, public_site_url="deephandai.com"))
        assert issues == ["PUBLIC_SITE_URL must start with http:// or https://"]

    def test_addresses_and_policy(self, settings):
        broken = replace(settings, from_email="", noreply_email="noreply", ack_failure_policy="ignore")
        issues = validate_email_config(broken)

        assert "FROM_EMAIL is required" in issues
        assert "NOREPLY_EMAIL must be an email address" in issues
        assert "Invalid ACK_FAILURE_POLICY: ignore" in issues

    def test_issues_never_include_secret_values(self, settings):
        issues = validate_email_config(replace(settings, resend_api_key="sk_secret_value"))
        assert all("sk_secret_value" not in issue for issue in issues)
