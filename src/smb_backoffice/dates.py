# SMB Back-Office - Financial back-office engine for SMBs
# Copyright (c) 2025 Maxence Bernard (maxencebernardhub)
# Licensed under the MIT License. See LICENSE file for details.

"""
Date helpers for SMB Back-Office.

Dates travel through the application as text, in one of two encodings:

    - ``DD/MM/YYYY`` (typed by users, imported from invoices),
    - ``YYYY-MM-DD`` (ISO, stamped by the application itself).

``parse_date`` never raises: anything that is not one of these two shapes,
or that does not denote a real calendar day, yields ``None``. ``None`` is the
invalid-date sentinel understood by every other module ("do not apply
charges", "do not promote").
"""

import re
from datetime import date, datetime
from typing import Optional, Union

_ISO_PATTERN = re.compile(r"\d{4}-\d{2}-\d{2}")


def _build_date(year: str, month: str, day: str) -> Optional[date]:
    try:
        return date(int(year), int(month), int(day))
    except ValueError:
        return None


def parse_date(text: Optional[str]) -> Optional[date]:
    """Parse a textual date into a ``datetime.date``.

    Accepted shapes:
        - three '/'-separated parts with a 4-character year last (DD/MM/YYYY),
        - three '-'-separated parts with a 4-character year first (YYYY-MM-DD).

    Args:
        text: Raw date string, possibly empty or None.

    Returns:
        The parsed date, or None if the text has another shape, contains
        non-numeric parts, or names a day that does not exist (31/02/2024).
    """
    if not text:
        return None

    raw = str(text).strip()

    if "/" in raw:
        parts = raw.split("/")
        if len(parts) == 3 and len(parts[2]) == 4:
            return _build_date(parts[2], parts[1], parts[0])
        return None

    if "-" in raw:
        parts = raw.split("-")
        if len(parts) == 3 and len(parts[0]) == 4:
            return _build_date(parts[0], parts[1], parts[2])

    return None


def format_date(text: Optional[str]) -> str:
    """Reformat a date string for display as DD/MM/YYYY.

    This is a purely textual transformation: a string matching YYYY-MM-DD is
    rearranged, a DD/MM/YYYY string is returned as-is, and anything else is
    passed through unchanged. Calendar correctness is not checked.
    Missing values are displayed as "-".
    """
    if not text:
        return "-"

    if _ISO_PATTERN.fullmatch(text):
        year, month, day = text.split("-")
        return f"{day}/{month}/{year}"

    return text


def as_day(value: Union[date, datetime]) -> date:
    """Drop the time-of-day part of a date/datetime value."""
    if isinstance(value, datetime):
        return value.date()
    return value


def to_iso(value: Union[date, datetime]) -> str:
    """Return the ISO (YYYY-MM-DD) representation of a day."""
    return as_day(value).isoformat()
