#!/usr/bin/env python3
"""
Start the form submission API with uvicorn.
"""

import argparse
import sys
from pathlib import Path

import dotenv
import uvicorn

# Add project root to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))


def main():
    parser = argparse.ArgumentParser(
        description="Run the DeepHand form submission API",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  %(prog)s                          # Serve on 127.0.0.1:8000
  %(prog)s --host 0.0.0.0 --port 80 # Serve on all interfaces
  %(prog)s --reload                 # Restart on code changes (development)

Environment variables:
- RESEND_API_KEY=re_... (required for email delivery)
- ADMIN_EMAIL, FROM_EMAIL, NOREPLY_EMAIL, REQUESTS_EMAIL
- TEST_EMAIL_RECIPIENT (redirects business emails while testing)
- ACK_FAILURE_POLICY=tolerate|fail (default tolerate)
        """
    )
    parser.add_argument("--host", default="127.0.0.1", help="Interface to bind (default: 127.0.0.1)")
    parser.add_argument("--port", "-p", type=int, default=8000, help="Port to listen on (default: 8000)")
    parser.add_argument("--reload", action="store_true", help="Enable auto-reload")
    parser.add_argument("--env-file", help="Load variables from this file instead of ./.env")
    args = parser.parse_args()

    if args.env_file:
        if not Path(args.env_file).exists():
            print(f"❌ Env file not found: {args.env_file}")
            return 1
        dotenv.load_dotenv(args.env_file)
    else:
        dotenv.load_dotenv()

    uvicorn.run(
        "deephand.api.main:create_app",
        factory=True,
        host=args.host,
        port=args.port,
        reload=args.reload,
    )
    return 0


if __name__ == "__main__":
    sys.exit(main())
