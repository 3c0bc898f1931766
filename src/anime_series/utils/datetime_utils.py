"""Datetime utility functions for release date handling."""

import re
from datetime import UTC, datetime

_YEAR_ONLY = re.compile(r"^\d{4}$")
_YEAR_MONTH = re.compile(r"^\d{4}-\d{2}$")


def parse_release_date(value: str | None) -> datetime | None:
    """Parse a release date into a UTC-aware datetime.

    Handles:
        - ISO 8601: "2024-04-20", "2024-04-20T00:00:00Z", "2024-04-20T00:00:00+09:00"
        - Partial dates: "2024", "2024-04" (first day of the period)
        - AniSearch format: "20.04.2024" (DD.MM.YYYY)

    Args:
        value: Date string as provided by the source record.

    Returns:
        A UTC-aware datetime, or None if the value is missing or unparseable.
    """
    if not value:
        return None

    date_str = value.strip()

    # Normalize AniSearch format: DD.MM.YYYY -> YYYY-MM-DD
    if "." in date_str and len(date_str) == 10:
        parts = date_str.split(".")
        if len(parts) == 3:
            date_str = f"{parts[2]}-{parts[1]}-{parts[0]}"

    if _YEAR_ONLY.match(date_str):
        date_str = f"{date_str}-01-01"
    elif _YEAR_MONTH.match(date_str):
        date_str = f"{date_str}-01"

    try:
        dt = datetime.fromisoformat(date_str.replace("Z", "+00:00"))
    except (ValueError, TypeError):
        return None

    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=UTC)
    return dt.astimezone(UTC)
