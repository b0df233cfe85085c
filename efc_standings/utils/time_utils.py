"""
Timezone-aware datetime utilities.
Race dates carry no time of day; countdowns treat them as midnight UTC.
"""
from datetime import datetime, timezone
from typing import Optional

from efc_standings.core.date_normalizer import parse_display_date
from efc_standings.domain.models import RaceEvent


def utc_now() -> datetime:
    """Return current UTC datetime (timezone-aware)."""
    return datetime.now(tz=timezone.utc)


def to_utc(dt: datetime) -> datetime:
    """
    Convert a datetime to UTC. If naive, assume it is already UTC.

    Args:
        dt: Input datetime (aware or naive).

    Returns:
        UTC-aware datetime.
    """
    if dt.tzinfo is None:
        return dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc)


def seconds_until(event: RaceEvent, now: Optional[datetime] = None) -> Optional[float]:
    """
    Seconds from `now` until the event date (negative once it has passed).

    The date is re-parsed from the normalized display string. Returns None
    when that string is TBD or unparseable text.
    """
    target = parse_display_date(event.date)
    if target is None:
        return None
    now = to_utc(now) if now is not None else utc_now()
    return (to_utc(target) - now).total_seconds()
