"""
Helper Functions

Contains utility functions used throughout the package.
"""

import re
import unicodedata
from datetime import date, datetime, timezone
from typing import Union


def sanitize_country_name(name: str) -> str:
    """Lowercase a country name and drop accents, spaces and punctuation."""
    decomposed = unicodedata.normalize('NFD', name.strip().lower())
    without_accents = ''.join(ch for ch in decomposed if not unicodedata.combining(ch))
    return re.sub(r"[-\s'’().,]", '', without_accents)


def to_utc_date(value: Union[date, datetime]) -> date:
    """
    Normalize a date or datetime to a UTC calendar date.

    Naive datetimes are taken to already be in UTC.
    """
    if isinstance(value, datetime):
        if value.tzinfo is not None:
            value = value.astimezone(timezone.utc)
        return value.date()
    return value


def utc_now() -> datetime:
    return datetime.now(timezone.utc)
