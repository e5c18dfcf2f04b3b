"""Referral code generation and share link helpers."""
import string
from typing import Optional

from src.utils.config import DEFAULT_REFERRAL_BASE_URL
from src.utils.date_utils import now_millis

REFERRAL_PREFIX = "SUBX"
REFERRAL_BODY_LENGTH = 6

_BASE36_DIGITS = string.digits + string.ascii_uppercase

SHARE_TITLE = "Join Subx Early Access"
SHARE_TEXT = (
    "I just joined Subx, Nigeria's biggest real estate investment community. "
    "Join me with my referral link:"
)


def to_base36(number: int) -> str:
    """
    Render a non-negative integer in base 36 with uppercase letters.

    Args:
        number: Integer to render

    Returns:
        str: Base-36 digits, "0" for zero

    Raises:
        ValueError: If number is negative
    """
    if number < 0:
        raise ValueError(f"Cannot render negative number in base 36: {number}")
    if number == 0:
        return "0"

    digits = []
    while number:
        number, remainder = divmod(number, 36)
        digits.append(_BASE36_DIGITS[remainder])
    return "".join(reversed(digits))


def generate_referral_code(email: str, timestamp_ms: Optional[int] = None) -> str:
    """
    Derive a short, shareable referral code from an email address.

    Args:
        email: Registrant's email (already validated)
        timestamp_ms: Salt in epoch milliseconds (default: current time)

    Returns:
        str: "SUBX" followed by up to 6 base-36 characters

    Behavior:
        - Salts the email with the millisecond timestamp
        - Sums the code points of the salted string
        - Keeps the first 6 base-36 digits of that sum
        - Two emails with equal sums in the same millisecond collide; the
          code is only meant to be practically distinct, not unique
    """
    if timestamp_ms is None:
        timestamp_ms = now_millis()

    salted = f"{email}{int(timestamp_ms)}"
    checksum = sum(ord(char) for char in salted)
    return REFERRAL_PREFIX + to_base36(checksum)[:REFERRAL_BODY_LENGTH]


def build_referral_url(referral_code: str, base_url: str = DEFAULT_REFERRAL_BASE_URL) -> str:
    """Build the shareable invite link for a referral code."""
    if not base_url.endswith("/"):
        base_url = f"{base_url}/"
    return f"{base_url}{referral_code}"


def build_share_message(referral_url: str) -> str:
    """Build the invite message shared alongside the referral link."""
    return f"{SHARE_TEXT} {referral_url}"
