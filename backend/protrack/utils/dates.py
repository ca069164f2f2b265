import re
from datetime import datetime

from dateutil import parser as date_parser

_SHORT_DATE = re.compile(r"^\d{2}/\d{2}/\d{2}$")


def format_timestamp(value: datetime) -> str:
    """DD/MM/YY HH:MM:SS, the format every stage marker is written in."""
    return value.strftime("%d/%m/%y %H:%M:%S")


def format_date(value: datetime) -> str:
    return value.strftime("%d/%m/%y")


def normalize_date(value: str) -> str:
    """Bring a user-entered date ("2026-10-20", "20/10/2026") to DD/MM/YY."""
    text = value.strip()
    if not text or _SHORT_DATE.match(text):
        return text
    # Slashed dates are day-first; ISO strings parse the same either way.
    try:
        return format_date(date_parser.parse(text, dayfirst="/" in text))
    except (ValueError, OverflowError) as exc:
        raise ValueError(f"Unrecognised date '{value}'.") from exc
