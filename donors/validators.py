import datetime
import re

from django.core.exceptions import ValidationError
from django.core.validators import RegexValidator
from django.utils import timezone

INVALID_PHONE_MESSAGE = (
    "Invalid phone number. Please enter 10 digits (e.g., 9876543210) "
    "or with country code (e.g., +919876543210)."
)
FUTURE_DATE_MESSAGE = "Last Donation Date cannot be a future date."

# ASCII digits only: 10 digits, optionally preceded by a 1-3 digit country code with or without "+"
PHONE_RE = re.compile(r"^(\+?[0-9]{1,3})?[0-9]{10}$")
PHONE_SEPARATORS_RE = re.compile(r"[\s\-()]")
NON_DIGIT_RE = re.compile(r"[^0-9]")

MIN_PHONE_DIGITS = 10
MAX_PHONE_DIGITS = 13

phone_format_validator = RegexValidator(PHONE_RE, INVALID_PHONE_MESSAGE, code="invalid_phone")


def clean_phone_number(value: str | None) -> str:
    return PHONE_SEPARATORS_RE.sub("", value or "")


def validate_phone_digit_count(value: str):
    digits = NON_DIGIT_RE.sub("", value or "")
    if not MIN_PHONE_DIGITS <= len(digits) <= MAX_PHONE_DIGITS:
        raise ValidationError(INVALID_PHONE_MESSAGE, code="invalid_phone")


def validate_phone_number(value):
    """Validate ``9876543210``, ``+919876543210`` or ``919876543210``.

    Whitespace, hyphens and parentheses are ignored.
    """
    cleaned = clean_phone_number(value)
    phone_format_validator(cleaned)
    validate_phone_digit_count(cleaned)


def is_valid_phone_number(value: str | None) -> bool:
    try:
        validate_phone_number(value)
    except ValidationError:
        return False
    return True


def validate_not_future(value: datetime.date):
    if value and value > timezone.localdate():
        raise ValidationError(FUTURE_DATE_MESSAGE, code="future_date")


def eligibility_cutoff(days: int) -> datetime.date:
    return timezone.localdate() - datetime.timedelta(days=days)
