"""Field validation for the contact form."""

import re

from intake.schemas import PHONE_MAX_DIGITS, PHONE_MIN_DIGITS

# Digits only, 7 to 15 of them
PHONE_REGEX = re.compile(rf"^[0-9]{{{PHONE_MIN_DIGITS},{PHONE_MAX_DIGITS}}}$")

_NON_DIGITS = re.compile(r"[^0-9]")


def validate_phone(phone: str) -> bool:
    """Validate phone number is 7-15 ASCII digits."""
    return bool(PHONE_REGEX.fullmatch(phone))


def validate_name(name: str) -> bool:
    """Validate name is non-empty after trimming surrounding whitespace."""
    return bool(name.strip())


def sanitize_phone(raw: str) -> str:
    """Strip non-digits from a phone keystroke and cap it at the input's max length."""
    return _NON_DIGITS.sub("", raw)[:PHONE_MAX_DIGITS]
