"""Row validation for workout entries."""

import datetime
import math
import re
from typing import Optional, Sequence

from csv_codec import FIELD_COUNT, normalize_exercise_name, parse_csv_line

_ISO_DATE = re.compile(r"(\d{4})-(\d{2})-(\d{2})", re.ASCII)
_US_SHORT_DATE = re.compile(r"(\d{1,2})/(\d{1,2})/(\d{2})", re.ASCII)
_US_LONG_DATE = re.compile(r"(\d{1,2})/(\d{1,2})/(\d{4})", re.ASCII)
_INTEGER = re.compile(r"[+-]?\d+", re.ASCII)
_REAL = re.compile(r"[+-]?(\d+\.?\d*|\.\d+)([eE][+-]?\d+)?", re.ASCII)


def _make_date(year: int, month: int, day: int) -> Optional[datetime.date]:
    try:
        return datetime.date(year, month, day)
    except ValueError:
        return None


def parse_date(value: str) -> Optional[datetime.date]:
    """Parse ``YYYY-MM-DD``, ``M/D/YY`` or ``M/D/YYYY``; return None otherwise.

    Two digit years fall in 2000-2099.
    """
    text = value.strip()
    match = _ISO_DATE.fullmatch(text)
    if match:
        year, month, day = (int(g) for g in match.groups())
        return _make_date(year, month, day)
    match = _US_SHORT_DATE.fullmatch(text)
    if match:
        month, day, year = (int(g) for g in match.groups())
        return _make_date(2000 + year, month, day)
    match = _US_LONG_DATE.fullmatch(text)
    if match:
        month, day, year = (int(g) for g in match.groups())
        return _make_date(year, month, day)
    return None


def _parse_real(text: str) -> Optional[float]:
    if not _REAL.fullmatch(text):
        return None
    value = float(text)
    if not math.isfinite(value):
        return None
    return value


def _parse_int(text: str) -> Optional[int]:
    if not _INTEGER.fullmatch(text):
        return None
    return int(text)


def validate_fields(fields: Sequence[str]) -> Optional[str]:
    """Return the reason ``fields`` is rejected, or None when it is valid."""
    if len(fields) < FIELD_COUNT:
        return f"expected {FIELD_COUNT} fields, got {len(fields)}"
    if parse_date(fields[0]) is None:
        return f"invalid date {fields[0].strip()!r}"
    if not normalize_exercise_name(fields[1]):
        return "exercise name is empty"
    weight = _parse_real(fields[2].strip())
    if weight is None:
        return f"weight is not a number: {fields[2].strip()!r}"
    if weight < 0:
        return "weight must be non-negative"
    for name, raw in (("reps", fields[3]), ("sets", fields[4])):
        value = _parse_int(raw.strip())
        if value is None:
            return f"{name} is not an integer: {raw.strip()!r}"
        if value < 0:
            return f"{name} must be non-negative"
    if fields[6].strip().lower() not in ("true", "false"):
        return f"completed must be true or false, got {fields[6].strip()!r}"
    return None


def validate_entry(entry: Optional[str]) -> Optional[str]:
    """Parse ``entry`` as a CSV line and validate it."""
    if entry is None:
        return "entry is empty"
    if not isinstance(entry, str):
        return f"entry is not text: {type(entry).__name__}"
    if not entry.strip():
        return "entry is empty"
    return validate_fields(parse_csv_line(entry))


def is_valid_entry(entry: Optional[str]) -> bool:
    return validate_entry(entry) is None
