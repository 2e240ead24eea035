import re
from datetime import date, datetime

# Receipt date shapes, tried in order
DATE_PATTERNS = [
    # MM/DD/YYYY, M/D/YY, MM-DD-YYYY ...
    re.compile(r"\b\d{1,2}[/-]\d{1,2}[/-](?:\d{4}|\d{2})\b"),
    # YYYY/MM/DD or YYYY-MM-DD
    re.compile(r"\b\d{4}[/-]\d{1,2}[/-]\d{1,2}\b"),
]

# strptime accepts one or two digit month/day for %m and %d
DATE_FORMATS = [
    "%m/%d/%Y",
    "%m/%d/%y",
    "%m-%d-%Y",
    "%m-%d-%y",
    "%Y-%m-%d",
    "%Y/%m/%d",
]


def contains_date(text: str) -> bool:
    """Return True if any receipt date pattern occurs in ``text``."""
    return any(pattern.search(text) for pattern in DATE_PATTERNS)


def find_date_candidate(text: str) -> str | None:
    """
    Returns the first substring matched by the first pattern that matches
    anywhere in ``text``.
    """
    for pattern in DATE_PATTERNS:
        match = pattern.search(text)
        if match:
            return match.group(0)
    return None


def parse_date(candidate: str) -> date | None:
    """
    Parses ``candidate`` with the first format in DATE_FORMATS that accepts
    it. Returns None if none does.
    """
    for fmt in DATE_FORMATS:
        try:
            return datetime.strptime(candidate, fmt).date()
        except ValueError:
            continue
    return None
