"""Signup field validation utilities."""
import re
from typing import Any, Dict, Iterable, Mapping, Optional, Tuple, Union

from src.models.registrant import SignupFields

REQUIRED = "required"
INVALID_FORMAT = "invalid format"

PHONE_MIN_DIGITS = 10
PHONE_MAX_DIGITS = 15

EMAIL_PATTERN = re.compile(r"^\S+@\S+\.\S+$")
_NON_DIGITS = re.compile(r"[^0-9]")

# (field, error) -> sentence shown next to the form input
FIELD_ERROR_MESSAGES = {
    ("full_name", REQUIRED): "Full name is required",
    ("email", REQUIRED): "Email is required",
    ("email", INVALID_FORMAT): "Email is invalid",
    ("phone_number", REQUIRED): "Phone number is required",
    ("phone_number", INVALID_FORMAT): "Phone number is invalid",
    ("income_range", REQUIRED): "Income range is required",
}


def digits_only(value: str) -> str:
    """
    Strip every non-digit character.

    Example: "+234 (801) 234-5678" → "2348012345678"
    """
    return _NON_DIGITS.sub("", value or "")


def validate_full_name(full_name: str) -> Tuple[bool, str]:
    """
    Validate registrant full name.

    Returns:
        Tuple of (is_valid: bool, error: str)
        - (True, "") if valid
        - (False, "required") if empty after trimming
    """
    if not full_name or not full_name.strip():
        return False, REQUIRED
    return True, ""


def validate_email(email: str) -> Tuple[bool, str]:
    """
    Validate email address.

    Returns:
        Tuple of (is_valid: bool, error: str)
        - (True, "") if valid
        - (False, "required") if empty after trimming
        - (False, "invalid format") unless it looks like local@domain.tld
          with no embedded whitespace
    """
    if not email or not email.strip():
        return False, REQUIRED
    if not EMAIL_PATTERN.match(email.strip()):
        return False, INVALID_FORMAT
    return True, ""


def validate_phone_number(phone_number: str) -> Tuple[bool, str]:
    """
    Validate phone number.

    Returns:
        Tuple of (is_valid: bool, error: str)
        - (True, "") if 10-15 digits remain after stripping non-digits
        - (False, "required") if empty after trimming
        - (False, "invalid format") otherwise
    """
    if not phone_number or not phone_number.strip():
        return False, REQUIRED
    digit_count = len(digits_only(phone_number))
    if digit_count < PHONE_MIN_DIGITS or digit_count > PHONE_MAX_DIGITS:
        return False, INVALID_FORMAT
    return True, ""


def validate_income_range(income_range: str, allowed: Iterable[str]) -> Tuple[bool, str]:
    """
    Validate income range against the catalog.

    Returns:
        Tuple of (is_valid: bool, error: str)
        - (True, "") if value is a catalog member
        - (False, "required") if empty or not in the catalog
    """
    if not income_range or income_range not in set(allowed):
        return False, REQUIRED
    return True, ""


def validate_signup(
    fields: Union[SignupFields, Mapping[str, Any]],
    income_ranges: Optional[Iterable[str]] = None,
) -> Dict[str, str]:
    """
    Validate all signup fields.

    Args:
        fields: SignupFields or a mapping with the four raw values
        income_ranges: Allowed income range values (default: loaded catalog)

    Returns:
        Dict mapping field name to error for each failing field.
        An empty dict means the submission may proceed.
    """
    if not isinstance(fields, SignupFields):
        fields = SignupFields.from_dict(fields)

    if income_ranges is None:
        from src.services.income_range_service import get_income_range_values
        income_ranges = get_income_range_values()

    checks = {
        "full_name": validate_full_name(fields.full_name),
        "email": validate_email(fields.email),
        "phone_number": validate_phone_number(fields.phone_number),
        "income_range": validate_income_range(fields.income_range, income_ranges),
    }

    return {name: error for name, (is_valid, error) in checks.items() if not is_valid}


def error_message(field: str, error: str) -> str:
    """Return the user-facing sentence for a field error."""
    return FIELD_ERROR_MESSAGES.get((field, error), error)
