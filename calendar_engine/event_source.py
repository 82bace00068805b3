"""
Event sources for the layout engine.

Reads events from the event store's JSON export or from an iCalendar file.
Recurring iCalendar events are expanded with recurring_ical_events for the
displayed month only.
"""

import json
from datetime import datetime, date, timedelta
from pathlib import Path
from typing import Optional

import pytz
from icalendar import Calendar as ICalCalendar
from recurring_ical_events import of as recurring_events_of

from .debug import debug_print
from .event_model import CalendarMonth, Event
from .timezone_utils import TimezoneMode, resolve_timezone


# Extra days fetched around a month so events crossing its edges are kept
EXPANSION_MARGIN_DAYS = 7
DEFAULT_EVENT_DURATION = timedelta(hours=1)


def _debug_print(message: str) -> None:
    debug_print("SOURCE", message)


class EventSourceError(ValueError):
    """An event file could not be read or parsed."""


def load_events_json(path: Path) -> list[Event]:
    """
    Load events from a JSON array of event objects.

    Each object carries ``id, name, startTimeUtc, endTimeUtc, colorIndex``.
    Timestamps are not validated here; bad ones are skipped at layout time.
    """
    try:
        with open(path, 'r', encoding='utf-8') as f:
            data = json.load(f)
    except (OSError, json.JSONDecodeError) as e:
        raise EventSourceError(f"Cannot read events from {path}: {e}") from e

    if isinstance(data, dict):
        data = data.get('events', [])
    if not isinstance(data, list):
        raise EventSourceError(f"Expected a list of events in {path}")

    events = []
    for item in data:
        if not isinstance(item, dict):
            _debug_print(f"Ignoring non-object entry in {path}: {item!r}")
            continue
        try:
            events.append(Event.from_dict(item))
        except (TypeError, ValueError) as e:
            _debug_print(f"Ignoring malformed event in {path}: {e}")
    _debug_print(f"Loaded {len(events)} events from {path}")
    return events


def _localize(value, mode: TimezoneMode) -> datetime:
    """Turn an iCalendar DTSTART/DTEND value into an aware datetime."""
    if isinstance(value, date) and not isinstance(value, datetime):
        value = datetime.combine(value, datetime.min.time())
    if value.tzinfo is not None:
        return value
    # Floating times and all-day dates belong to the viewer's timezone
    tz = resolve_timezone(mode)
    if tz is None:
        return value.astimezone()
    return tz.localize(value)


def _component_to_event(component, event_id: int, color_index: int,
                        mode: TimezoneMode) -> Optional[Event]:
    dtstart = component.get('DTSTART')
    if dtstart is None:
        return None
    start_value = dtstart.dt
    all_day = isinstance(start_value, date) and not isinstance(start_value, datetime)
    start = _localize(start_value, mode)

    dtend = component.get('DTEND')
    if dtend is not None:
        end = _localize(dtend.dt, mode)
        if all_day:
            # DTEND of an all-day event is exclusive
            end -= timedelta(seconds=1)
    elif all_day:
        end = start + timedelta(days=1) - timedelta(seconds=1)
    else:
        end = start + DEFAULT_EVENT_DURATION

    summary = component.get('SUMMARY')
    description = component.get('DESCRIPTION')
    return Event(
        id=event_id,
        name=str(summary) if summary else 'Untitled',
        start_time_utc=start.astimezone(pytz.UTC),
        end_time_utc=end.astimezone(pytz.UTC),
        color_index=color_index,
        description=str(description) if description else '',
    )


def load_events_ics(path: Path, month: Optional[CalendarMonth] = None,
                    mode: Optional[TimezoneMode] = None) -> list[Event]:
    """
    Load events from an iCalendar file.

    With a month given, recurring events are expanded to the occurrences
    around that month; otherwise each VEVENT is read once as written.
    Event ids are assigned in file order, color indexes per UID.
    """
    mode = mode or TimezoneMode()
    try:
        with open(path, 'rb') as f:
            calendar = ICalCalendar.from_ical(f.read())
    except (OSError, ValueError) as e:
        raise EventSourceError(f"Cannot read calendar from {path}: {e}") from e

    if month is not None:
        start = month.first_day - timedelta(days=EXPANSION_MARGIN_DAYS)
        end = month.shifted(1).first_day + timedelta(days=EXPANSION_MARGIN_DAYS)
        components = recurring_events_of(calendar).between(start, end)
    else:
        components = calendar.walk('VEVENT')

    colors: dict[str, int] = {}
    events = []
    for component in components:
        uid = str(component.get('UID', ''))
        color_index = colors.setdefault(uid, len(colors))
        event = _component_to_event(component, len(events) + 1, color_index, mode)
        if event is None:
            _debug_print(f"Skipping VEVENT without DTSTART (uid={uid!r})")
            continue
        events.append(event)
    _debug_print(f"Loaded {len(events)} events from {path}")
    return events


def load_events(path: Path, month: Optional[CalendarMonth] = None,
                mode: Optional[TimezoneMode] = None) -> list[Event]:
    """Load events from a .json or .ics file, chosen by extension."""
    suffix = Path(path).suffix.lower()
    if suffix in ('.ics', '.ical', '.ifb'):
        return load_events_ics(path, month, mode)
    if suffix == '.json':
        return load_events_json(path)
    raise EventSourceError(f"Unsupported event file type: {path}")
