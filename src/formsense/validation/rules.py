"""Format checks for typed field values."""

from __future__ import annotations

import re
from datetime import datetime

EMAIL_PATTERN = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")
PHONE_PATTERN = re.compile(r"^[\d\s\-()]+$")
MIN_PHONE_DIGITS = 10

_DATE_FORMATS = (
    "%m/%d/%Y",
    "%m/%d/%y",
    "%m-%d-%Y",
    "%m-%d-%y",
    "%Y/%m/%d",
    "%B %d, %Y",
    "%b %d, %Y",
    "%d %B %Y",
    "%d %b %Y",
)


def is_valid_email(value: str) -> bool:
    """Return whether the value looks like ``local@domain.tld``."""
    return EMAIL_PATTERN.match(value) is not None


def is_valid_phone(value: str) -> bool:
    """Return whether the value is digits and punctuation with at least 10 digits."""
    if PHONE_PATTERN.match(value) is None:
        return False
    return sum(char.isdigit() for char in value) >= MIN_PHONE_DIGITS


def is_valid_date(value: str) -> bool:
    """Return whether the value parses as a calendar date.

    ISO 8601 dates and datetimes are accepted, as well as common US and
    long-form spellings such as ``01/15/2024`` or ``January 15, 2024``.
    """
    candidate = value.strip()
    try:
        datetime.fromisoformat(candidate)
    except ValueError:
        pass
    else:
        return True

    for date_format in _DATE_FORMATS:
        try:
            datetime.strptime(candidate, date_format)  # noqa: DTZ007
        except ValueError:
            continue
        return True
    return False
