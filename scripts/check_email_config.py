#!/usr/bin/env python3
"""
Report problems in the email delivery configuration.
Exits with status 1 when any issue is found, so it can gate a deploy.
"""

import argparse
import json
import sys
from pathlib import Path

# Add project root to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from deephand.core.config import load_settings, validate_email_config


def _mask(value: str) -> str:
    if not value:
        return "(not set)"
    return value[:3] + "*" * max(len(value) - 3, 0)


def main(argv=None):
    parser = argparse.ArgumentParser(description="Check email delivery settings")
    parser.add_argument("--json", action="store_true", help="Output results as JSON")
    args = parser.parse_args(argv)

    try:
        settings = load_settings()
    except ValueError as e:
        print(f"❌ Could not load settings: {e}")
        return 1

    issues = validate_email_config(settings)

    if args.json:
        print(json.dumps({
            "valid": not issues,
            "issues": issues,
            "business_recipient": settings.business_recipient,
            "ack_failure_policy": settings.ack_failure_policy,
        }, indent=2))
        return 1 if issues else 0

    print(f"RESEND_API_KEY:       {_mask(settings.resend_api_key)}")
    print(f"PUBLIC_SITE_URL:      {settings.public_site_url}")
    print(f"Business recipient:   {settings.business_recipient}")
    if settings.test_email_recipient:
        print("ℹ️  TEST_EMAIL_RECIPIENT is set; business emails are redirected")
    print(f"ACK_FAILURE_POLICY:   {settings.ack_failure_policy}")

    if issues:
        print(f"\n❌ {len(issues)} configuration issue(s):")
        for issue in issues:
            print(f"   - {issue}")
        return 1

    print("\n✅ Email configuration is valid")
    return 0


if __name__ == "__main__":
    sys.exit(main())
