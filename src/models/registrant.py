"""Registrant data model for waitlist signups."""
from dataclasses import dataclass
from typing import Any, Dict, Mapping

from src.utils.date_utils import parse_iso_timestamp

# Python attribute name -> JSON document key
FIELD_KEYS = {
    "full_name": "fullName",
    "email": "email",
    "phone_number": "phoneNumber",
    "income_range": "incomeRange",
}

REGISTRANT_KEYS = {
    **FIELD_KEYS,
    "referral_code": "referralCode",
    "date_joined": "dateJoined",
}


def _pick(data: Mapping[str, Any], attribute: str, key: str) -> Any:
    """Read a value by snake_case attribute name, falling back to its JSON key."""
    if attribute in data:
        return data[attribute]
    return data.get(key, "")


@dataclass(frozen=True)
class SignupFields:
    """Raw values a visitor submits on the signup form."""

    full_name: str = ""
    email: str = ""
    phone_number: str = ""
    income_range: str = ""

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "SignupFields":
        """Build from a mapping keyed by attribute names or JSON keys."""
        values = {}
        for attribute, key in FIELD_KEYS.items():
            value = _pick(data, attribute, key)
            values[attribute] = "" if value is None else str(value)
        return cls(**values)

    def to_dict(self) -> Dict[str, str]:
        return {key: getattr(self, attribute) for attribute, key in FIELD_KEYS.items()}


@dataclass(frozen=True)
class Registrant:
    """One completed, validated signup. Every field is write-once."""

    full_name: str
    email: str
    phone_number: str
    income_range: str
    referral_code: str
    date_joined: str  # ISO 8601 format

    def __post_init__(self):
        """Validate registrant data."""
        if not self.full_name or not self.full_name.strip():
            raise ValueError("Full name cannot be empty")

        if not self.referral_code:
            raise ValueError("Referral code cannot be empty")

        try:
            parse_iso_timestamp(self.date_joined)
        except ValueError as e:
            raise ValueError(f"Invalid timestamp format: {self.date_joined}") from e

    @classmethod
    def from_fields(cls, fields: SignupFields, referral_code: str, date_joined: str) -> "Registrant":
        """Create a registrant from submitted fields plus derived values."""
        return cls(
            full_name=fields.full_name,
            email=fields.email,
            phone_number=fields.phone_number,
            income_range=fields.income_range,
            referral_code=referral_code,
            date_joined=date_joined,
        )

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "Registrant":
        """
        Build a registrant from its JSON document form.

        Unknown keys are ignored.

        Raises:
            ValueError: If required values are missing or malformed
        """
        if not isinstance(data, Mapping):
            raise ValueError("Registrant data must be a dictionary")

        values = {}
        for attribute, key in REGISTRANT_KEYS.items():
            value = _pick(data, attribute, key)
            if value is None:
                value = ""
            if not isinstance(value, str):
                raise ValueError(f"Registrant field '{key}' must be a string")
            values[attribute] = value
        return cls(**values)

    def to_dict(self) -> Dict[str, str]:
        """Return the JSON document form with camelCase keys."""
        return {key: getattr(self, attribute) for attribute, key in REGISTRANT_KEYS.items()}
