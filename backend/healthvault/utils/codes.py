"""
Generators for one-time codes and health identifiers.

Both draw from ``secrets``; neither checks for uniqueness. Health code
uniqueness is enforced by the ``health_ids.health_code`` unique constraint.
"""

import re
import secrets
from datetime import datetime
from typing import Optional

# No 0/O or 1/I, so codes survive being read aloud or copied by hand
HEALTH_CODE_ALPHABET = "ABCDEFGHJKLMNPQRSTUVWXYZ23456789"
HEALTH_CODE_PREFIX = "HV"
HEALTH_CODE_PATTERN = r"^HV-\d{4}-[A-Z0-9]{4}-[A-Z0-9]{4}$"

_HEALTH_CODE_RE = re.compile(HEALTH_CODE_PATTERN)

OTP_LENGTH = 6


def generate_otp_code() -> str:
    """Return a random 6-digit numeric code (no leading zero)."""
    low = 10 ** (OTP_LENGTH - 1)
    return str(low + secrets.randbelow(9 * low))


def _random_block(length: int = 4) -> str:
    return "".join(secrets.choice(HEALTH_CODE_ALPHABET) for _ in range(length))


def generate_health_code(year: Optional[int] = None) -> str:
    """
    Generate a health identifier like ``HV-2024-K7QM-3XWP``.

    Args:
        year: Year to embed; defaults to the current UTC year

    Returns:
        Health code string
    """
    year = year or datetime.utcnow().year
    return f"{HEALTH_CODE_PREFIX}-{year:04d}-{_random_block()}-{_random_block()}"


def is_valid_health_code(value: str) -> bool:
    """Check the public lookup format (shape only, not existence)."""
    return bool(_HEALTH_CODE_RE.match(value or ""))
