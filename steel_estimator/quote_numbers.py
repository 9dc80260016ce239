"""
Quote numbers: YYMM-NN, assigned when an estimate is first saved.

NN is the smallest sequence not yet used this month, so a deleted quote
frees its number for the next one (2501-01, 2501-03 -> 2501-02).
Revisions keep the base number and add a suffix: 2501-02R1, 2501-02R2.
"""

import re
from datetime import date
from typing import Iterable, Optional

QUOTE_NUMBER_RE = re.compile(r"^(\d{4})-(\d{2,})(?:R(\d+))?$")
REVISION_RE = re.compile(r"R(\d+)$")


def quote_prefix(today: Optional[date] = None) -> str:
    """'YYMM-' for the given day (defaults to today)."""
    today = today or date.today()
    return today.strftime("%y%m") + "-"


def parse_sequence(quote_number: str, prefix: str) -> Optional[int]:
    """Sequence number of a quote carrying the prefix, or None for other months / malformed input."""
    match = QUOTE_NUMBER_RE.match(str(quote_number or "").strip())
    if not match or match.group(1) + "-" != prefix:
        return None
    return int(match.group(2))


def next_quote_number(existing: Iterable[str], today: Optional[date] = None) -> str:
    """Smallest unused two-digit sequence for the current month (gap-filling, not max + 1)."""
    prefix = quote_prefix(today)
    used = set()
    for number in existing:
        seq = parse_sequence(number, prefix)
        if seq is not None:
            used.add(seq)

    seq = 1
    while seq in used:
        seq += 1
    return f"{prefix}{seq:02d}"


def first_quote_number(today: Optional[date] = None) -> str:
    """Fallback when existing numbers cannot be looked up."""
    return f"{quote_prefix(today)}01"


def next_revision_number(quote_number: str) -> str:
    """2501-03 -> 2501-03R1, 2501-03R1 -> 2501-03R2."""
    quote_number = str(quote_number or "").strip()
    match = REVISION_RE.search(quote_number)
    if match:
        return f"{quote_number[:match.start()]}R{int(match.group(1)) + 1}"
    return f"{quote_number}R1"
