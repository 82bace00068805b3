"""
Timezone utilities for the calendar engine.

Event instants are stored in UTC. Every decision about which calendar day
an instant falls on goes through project_to_local_date(), using the
effective timezone of the view: the host's local clock or a configured
named zone.
"""

from dataclasses import dataclass
from datetime import datetime, date, timezone as dt_timezone
from typing import Any, Optional
import pytz

from .debug import debug_print


LOCAL = "local"

# Epoch numbers are milliseconds, as produced by JavaScript Date values
_EPOCH_MS_PER_SECOND = 1000.0


def _debug_print(message: str) -> None:
    debug_print("TZ", message)


@dataclass(frozen=True)
class TimezoneMode:
    """
    Effective timezone of a calendar view.

    ``name`` of None or "local" means the host clock; anything else is an
    IANA zone name such as "Europe/Amsterdam" or "UTC".
    """
    name: Optional[str] = None

    @classmethod
    def local(cls) -> 'TimezoneMode':
        return cls(None)

    @classmethod
    def named(cls, name: str) -> 'TimezoneMode':
        return cls(name)

    @property
    def is_local(self) -> bool:
        return self.name is None or self.name.strip().lower() in ("", LOCAL, "system")

    def __str__(self):
        return LOCAL if self.is_local else self.name


def resolve_timezone(mode: TimezoneMode):
    """
    Get the tzinfo for a timezone mode.

    Args:
        mode: The effective timezone of the view.

    Returns:
        pytz timezone object, or None for the local mode (the host clock
        is used directly).

    Raises:
        ValueError: If the zone name is unknown.
    """
    if mode.is_local:
        return None
    try:
        return pytz.timezone(mode.name.strip())
    except pytz.UnknownTimeZoneError:
        raise ValueError(f"Unknown timezone: {mode.name!r}")


def parse_instant(value: Any) -> Optional[datetime]:
    """
    Parse an event timestamp into an aware UTC datetime.

    Args:
        value: An aware or naive datetime (naive is taken as UTC), an
            ISO-8601 string or epoch milliseconds.

    Returns:
        A timezone-aware datetime in UTC, or None if the value cannot be
        parsed.
    """
    if value is None or isinstance(value, bool):
        return None
    try:
        if isinstance(value, datetime):
            dt = value
        elif isinstance(value, (int, float)):
            dt = datetime.fromtimestamp(value / _EPOCH_MS_PER_SECOND, tz=pytz.UTC)
        elif isinstance(value, str):
            text = value.strip()
            if text.endswith(('Z', 'z')):
                text = text[:-1] + '+00:00'
            dt = datetime.fromisoformat(text)
        else:
            return None
    except (ValueError, OverflowError, OSError) as e:
        _debug_print(f"Unparsable timestamp {value!r}: {e}")
        return None

    if dt.tzinfo is None:
        return pytz.UTC.localize(dt)
    return dt.astimezone(pytz.UTC)


def to_effective_datetime(instant: datetime, mode: TimezoneMode) -> datetime:
    """Convert an aware instant to the effective timezone."""
    tz = resolve_timezone(mode)
    if tz is None:
        return instant.astimezone()
    return instant.astimezone(tz)


def project_to_local_date(instant: Any, mode: TimezoneMode) -> Optional[date]:
    """
    Calendar date of an instant in the effective timezone.

    Args:
        instant: Any value parse_instant() accepts.
        mode: The effective timezone of the view.

    Returns:
        The local date with the time of day discarded, or None for
        unparsable instants.
    """
    parsed = parse_instant(instant)
    if parsed is None:
        return None
    return to_effective_datetime(parsed, mode).date()


def same_calendar_day(a: Any, b: Any, mode: TimezoneMode) -> bool:
    """True if both instants fall on the same day in the effective timezone."""
    day_a = project_to_local_date(a, mode)
    return day_a is not None and day_a == project_to_local_date(b, mode)


def project_event_dates(event, mode: TimezoneMode) -> Optional[tuple[date, date]]:
    """
    Local start and end dates of an event.

    Args:
        event: An Event with UTC start and end timestamps.
        mode: The effective timezone of the view.

    Returns:
        (start_date, end_date), or None for events that must be left out
        of the layout: missing or malformed timestamps, or an end that is
        not after the start.
    """
    start = parse_instant(event.start_time_utc)
    end = parse_instant(event.end_time_utc)
    if start is None or end is None:
        _debug_print(f"Skipping event {event.id} ({event.name!r}): bad timestamps")
        return None
    if end <= start:
        _debug_print(f"Skipping event {event.id} ({event.name!r}): end is not after start")
        return None
    return (to_effective_datetime(start, mode).date(),
            to_effective_datetime(end, mode).date())


def now_utc() -> datetime:
    return datetime.now(dt_timezone.utc)


def today(mode: TimezoneMode) -> date:
    """Today's date in the effective timezone."""
    return to_effective_datetime(now_utc(), mode).date()
