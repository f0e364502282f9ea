"""
Rules shared by everything that handles sync jobs.
"""

import re
from typing import Optional

DEFAULT_AUTHOR = 1

# Titles the editor assigns before anybody names the job
PLACEHOLDER_TITLES = frozenset(["", "Auto Draft"])

_NUMERIC_RE = re.compile(r"^\s*[+-]?(\d+(\.\d*)?|\.\d+)([eE][+-]?\d+)?\s*$")
_DIGITS_RE = re.compile(r"^\s*\d+\s*$")


def positive_int(value) -> Optional[int]:
    """
    Coerce a tenant, author or document ID.

    Accepts ints and strings of decimal digits. Returns None for
    anything else, including zero and negative numbers.
    """
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        number = value
    elif isinstance(value, str) and _DIGITS_RE.match(value):
        number = int(value)
    else:
        return None
    return number if number > 0 else None


def is_numeric(title: str) -> bool:
    return bool(_NUMERIC_RE.match(title))


def job_title(raw_title: Optional[str], document_id: Optional[int]) -> str:
    """Return the display title for a job document."""
    title = raw_title or ""
    if title.strip() in PLACEHOLDER_TITLES or is_numeric(title):
        return "Job #{}".format(document_id)
    return title
