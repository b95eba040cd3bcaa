"""Line-level CSV encoding used by the workout data file."""

import re
from typing import Iterable, List, Optional

DELIMITER = ","
QUOTE = '"'
CSV_HEADER = "date,exercise,weight,reps,sets,note,completed"
FIELD_COUNT = 7

_WHITESPACE_RUN = re.compile(r"\s+")


def parse_csv_line(line: str) -> List[str]:
    """Split ``line`` into trimmed fields.

    A quote toggles quoting; inside quotes ``""`` yields a literal quote and a
    delimiter is kept as text. Embedded line breaks are not supported.
    """
    fields: List[str] = []
    current: List[str] = []
    in_quotes = False
    i = 0
    length = len(line)
    while i < length:
        c = line[i]
        if c == QUOTE:
            if in_quotes and i + 1 < length and line[i + 1] == QUOTE:
                current.append(QUOTE)
                i += 1
            else:
                in_quotes = not in_quotes
        elif c == DELIMITER and not in_quotes:
            fields.append("".join(current).strip())
            current = []
        else:
            current.append(c)
        i += 1
    fields.append("".join(current).strip())
    return fields


def escape_csv_field(value: Optional[str]) -> str:
    """Return ``value`` made safe for a single CSV field."""
    safe = "" if value is None else str(value)
    safe = safe.replace("\r", " ").replace("\n", " ").strip()
    requires_quotes = DELIMITER in safe or QUOTE in safe
    safe = safe.replace(QUOTE, QUOTE * 2)
    return f"{QUOTE}{safe}{QUOTE}" if requires_quotes else safe


def to_csv_line(fields: Iterable[Optional[str]]) -> str:
    return DELIMITER.join(escape_csv_field(f) for f in fields)


def normalize_exercise_name(value: Optional[str]) -> str:
    """Trim ``value`` and collapse internal whitespace to single spaces."""
    if value is None:
        return ""
    return _WHITESPACE_RUN.sub(" ", value.strip())
