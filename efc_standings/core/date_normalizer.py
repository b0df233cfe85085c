"""
Date normalization for free-text calendar cells.

Sheet cells arrive as '3/30/2024', 'March 30, 2024', '2024-03-30', 'TBD'
or arbitrary text. Everything recognisable is rewritten as 'Month D, YYYY';
anything else passes through untouched.

Numeric slash dates follow a single convention for the whole project
(`cfg.ingest.day_first`, month-first by default). The parts are only swapped
when the configured reading is impossible and the other one is not, e.g.
'30/3/2024' under month-first.

Countdown code must re-parse the *normalized* string with
`parse_display_date`, never the raw cell.
"""
from datetime import date, datetime
from typing import Optional

import pandas as pd

from efc_standings.config import cfg


TBD = "TBD"
DISPLAY_FORMAT = "%B %d, %Y"
MONTH_NAMES = (
    "january", "february", "march", "april", "may", "june",
    "july", "august", "september", "october", "november", "december",
)
MIN_YEAR = 2000


def format_display(value: date) -> str:
    """Render a date as 'Month D, YYYY' (no zero padding on the day)."""
    return f"{value.strftime('%B')} {value.day}, {value.year}"


def _has_month_name(text: str) -> bool:
    lower = text.lower()
    return any(month in lower for month in MONTH_NAMES)


def _generic_parse(text: str, day_first: bool) -> Optional[pd.Timestamp]:
    try:
        parsed = pd.to_datetime(text, errors="coerce", dayfirst=day_first)
    except (ValueError, TypeError, OverflowError):
        return None
    if parsed is None or pd.isna(parsed):
        return None
    return parsed


def _slash_parts(text: str) -> Optional[tuple[int, int, int]]:
    parts = text.split("/")
    if len(parts) != 3:
        return None
    try:
        first, second, year = (int(p.strip()) for p in parts)
    except ValueError:
        return None
    return first, second, year


def _resolve_day_month(first: int, second: int, day_first: bool) -> tuple[int, int]:
    """Return (month, day) for the two leading parts of a slash date."""
    if day_first:
        day, month = first, second
    else:
        month, day = first, second
    if month > 12 and day <= 12:
        month, day = day, month
    return month, day


def normalize_date(text: Optional[str], day_first: Optional[bool] = None) -> str:
    """
    Normalize one date cell.

    Args:
        text: Raw cell text.
        day_first: Override for the numeric convention (default from config).

    Returns:
        'Month D, YYYY' on success, 'TBD' for blank/TBD cells, otherwise the
        stripped original text.
    """
    if day_first is None:
        day_first = cfg.ingest.day_first
    if text is None or text.strip() == "" or text.strip().lower() == "tbd":
        return TBD

    text = text.strip()

    if _has_month_name(text):
        parsed = _generic_parse(text, day_first)
        return format_display(parsed) if parsed is not None else text

    if "/" in text:
        parts = _slash_parts(text)
        if parts is not None:
            first, second, year = parts
            month, day = _resolve_day_month(first, second, day_first)
            if not (1 <= day <= 31 and 1 <= month <= 12 and year >= MIN_YEAR):
                return text
            try:
                return format_display(date(year, month, day))
            except ValueError:
                # e.g. 31/2 passes the range check but is not a real date
                return text

    parsed = _generic_parse(text, day_first)
    return format_display(parsed) if parsed is not None else text


def parse_display_date(display: Optional[str]) -> Optional[datetime]:
    """
    Second stage of the date pipeline: read a normalized 'Month D, YYYY'.

    Returns:
        Naive datetime at midnight, or None for TBD / passthrough text.
    """
    if not display or display == TBD:
        return None
    try:
        return datetime.strptime(display, DISPLAY_FORMAT)
    except ValueError:
        return None


def is_normalized(display: str) -> bool:
    """True when the cell was recognised (TBD counts as recognised)."""
    return display == TBD or parse_display_date(display) is not None
