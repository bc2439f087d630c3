"""HMAC request signing for the LicenseSpring API."""

import base64
import hashlib
import hmac
from datetime import datetime, timezone
from email.utils import format_datetime
from typing import Optional


def sign(secret_key: str, date_header: str) -> str:
    """
    Signs a Date header value with the shared secret.

    The signed string is "licenseSpring\\ndate: <date_header>"; the result is
    the base64 encoded raw HMAC-SHA256 digest.
    """
    data = f"licenseSpring\ndate: {date_header}"
    digest = hmac.new(secret_key.encode("utf-8"), data.encode("utf-8"), hashlib.sha256).digest()
    return base64.b64encode(digest).decode("ascii")


def build_authorization_header(api_key: str, signature: str) -> str:
    auth = [
        'algorithm="hmac-sha256"',
        'headers="date"',
        f'signature="{signature}"',
        f'apiKey="{api_key}"',
    ]
    return ",".join(auth)


def format_date_header(now: Optional[datetime] = None) -> str:
    """Formats `now` (default: current time) as e.g. "Mon, 19 Oct 2026 08:00:00 GMT"."""
    if now is None:
        now = datetime.now(timezone.utc)
    return format_datetime(now.astimezone(timezone.utc), usegmt=True)
