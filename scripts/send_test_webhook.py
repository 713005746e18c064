#!/usr/bin/env python3
"""
Dev helper: send a fake Twilio WhatsApp webhook to a local Invoice Relay.

Builds the same form fields Twilio posts for an inbound WhatsApp message and
POST-s them to /webhook, then prints the TwiML reply.

Usage
-----
# Text-only message (expects the welcome reply)
python scripts/send_test_webhook.py --body "hello"

# Image message pointing at a publicly reachable invoice image
python scripts/send_test_webhook.py --media-url https://example.com/invoice.png --media-type image/png

# Target a different server
python scripts/send_test_webhook.py --url http://localhost:9000 --body hi

Environment / .env
------------------
TWILIO_AUTH_TOKEN   When set, the request is signed with X-Twilio-Signature so
                    it passes TWILIO_VALIDATE_SIGNATURE=true servers.
PORT                Default port for --url (default: 8080).
"""

import argparse
import os
import sys
import textwrap
import uuid
from pathlib import Path

import httpx
from dotenv import load_dotenv
from twilio.request_validator import RequestValidator


def _build_form(args: argparse.Namespace) -> dict:
    """Return the Twilio inbound-message form fields."""
    form = {
        "From": args.from_number,
        "To": args.to_number,
        "Body": args.body,
        "MessageSid": args.message_sid or f"SM{uuid.uuid4().hex}",
        "NumMedia": "1" if args.media_url else "0",
    }
    if args.media_url:
        form["MediaUrl0"] = args.media_url
        form["MediaContentType0"] = args.media_type
    return form


def _print_response(response: httpx.Response) -> None:
    status = response.status_code
    symbol = "OK" if status == 200 else "FAIL"
    print(f"\n[{symbol}] HTTP {status}")
    print(response.text)


def main() -> int:
    project_root = Path(__file__).resolve().parent.parent
    load_dotenv(project_root / ".env")

    parser = argparse.ArgumentParser(
        prog="send_test_webhook.py",
        description="Send a fake Twilio WhatsApp webhook to Invoice Relay.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=textwrap.dedent("""\
            Examples:
              python scripts/send_test_webhook.py --body hello
              python scripts/send_test_webhook.py --media-url https://example.com/a.jpg
              python scripts/send_test_webhook.py --dry-run --body hi
        """),
    )
    parser.add_argument(
        "--url",
        default=f"http://localhost:{os.getenv('PORT', '8080')}",
        help="Server base URL (default: http://localhost:$PORT)",
    )
    parser.add_argument("--body", default="", help="Message text")
    parser.add_argument(
        "--media-url",
        default="",
        metavar="URL",
        help="Attachment URL. Sends NumMedia=1 when given.",
    )
    parser.add_argument(
        "--media-type",
        default="image/jpeg",
        help="Attachment content type (default: image/jpeg)",
    )
    parser.add_argument(
        "--from",
        dest="from_number",
        default="whatsapp:+15550001111",
        help="Sender address (default: whatsapp:+15550001111)",
    )
    parser.add_argument(
        "--to",
        dest="to_number",
        default="whatsapp:+14155238886",
        help="Recipient address (default: Twilio sandbox number)",
    )
    parser.add_argument("--message-sid", default=None, help="MessageSid (default: random)")
    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Print the form fields without sending them.",
    )

    args = parser.parse_args()

    form = _build_form(args)
    endpoint = f"{args.url.rstrip('/')}/webhook"

    print(f"Endpoint  : {endpoint}")
    for key, value in form.items():
        print(f"{key:<18}: {value}")

    if args.dry_run:
        print("\n[DRY RUN] Not sent.")
        return 0

    headers = {}
    auth_token = os.getenv("TWILIO_AUTH_TOKEN", "")
    if auth_token:
        headers["X-Twilio-Signature"] = RequestValidator(auth_token).compute_signature(
            endpoint, form
        )

    try:
        response = httpx.post(endpoint, data=form, headers=headers, timeout=120)
    except httpx.ConnectError:
        print(
            f"\nERROR: Could not connect to {endpoint}\n"
            "Is the server running? Start it with:\n"
            "  invoice-relay   (or: uvicorn invoice_relay.main:app --app-dir backend)",
            file=sys.stderr,
        )
        return 1
    except httpx.HTTPError as exc:
        print(f"\nERROR: {exc}", file=sys.stderr)
        return 1

    _print_response(response)
    return 0 if response.status_code == 200 else 1


if __name__ == "__main__":
    sys.exit(main())
