"""
Per-day event membership.

Answers "which events touch day D" for day badges and the expanded day
panel, independently of the spanning-bar layout. The ended-event filter
lives here too and is applied once, before both the allocator and this
index see the events.
"""

from dataclasses import dataclass
from datetime import date, datetime
from typing import Any, Iterable, Optional

from .config import DisplaySettings
from .debug import debug_print
from .event_model import CalendarMonth, Event
from .timezone_utils import TimezoneMode, now_utc, parse_instant, project_event_dates


def _debug_print(message: str) -> None:
    debug_print("DAYS", message)


def _reference_instant(now: Any) -> datetime:
    if now is None:
        return now_utc()
    instant = parse_instant(now)
    if instant is None:
        raise ValueError(f"Invalid reference time: {now!r}")
    return instant


def filter_events(events: Iterable[Event], settings: Optional[DisplaySettings] = None,
                  now: Optional[datetime] = None) -> list[Event]:
    """
    Drop events that must not be laid out.

    Events with unusable timestamps are always dropped. With
    ``hide_ended_events`` set, events that ended strictly before ``now``
    are dropped as well. A ``now`` that cannot be parsed raises ValueError.
    """
    hide_ended = settings is not None and settings.hide_ended_events
    if hide_ended:
        now = _reference_instant(now)

    kept = []
    for event in events:
        start = parse_instant(event.start_time_utc)
        end = parse_instant(event.end_time_utc)
        if start is None or end is None or end <= start:
            _debug_print(f"Excluding invalid event {event.id} ({event.name!r})")
            continue
        if hide_ended and end < now:
            continue
        kept.append(event)
    return kept


def events_on_day(day: int, month: CalendarMonth, mode: TimezoneMode,
                  events: Iterable[Event],
                  settings: Optional[DisplaySettings] = None,
                  now: Optional[datetime] = None) -> list[Event]:
    """
    Events whose local date range includes ``day`` of ``month``.

    When settings are given the ended-event filter is applied first.
    """
    if settings is not None:
        events = filter_events(events, settings, now)
    return DayMembershipIndex(events, mode).events_on(month.date_for(day))


class DayMembershipIndex:
    """
    Event date ranges projected once, queried per day.

    Membership is inclusive on both ends and compares local dates only.
    """

    def __init__(self, events: Iterable[Event], mode: TimezoneMode):
        self._mode = mode
        self._ranges: list[tuple[Event, date, date]] = []
        for event in events:
            dates = project_event_dates(event, mode)
            if dates is not None:
                self._ranges.append((event, dates[0], dates[1]))

    @property
    def mode(self) -> TimezoneMode:
        return self._mode

    def events_on(self, d: date) -> list[Event]:
        return [event for event, start, end in self._ranges if start <= d <= end]

    def events_on_day(self, day: int, month: CalendarMonth) -> list[Event]:
        return self.events_on(month.date_for(day))

    def count_for_day(self, day: int, month: CalendarMonth) -> int:
        d = month.date_for(day)
        return sum(1 for _, start, end in self._ranges if start <= d <= end)

    def counts_for_month(self, month: CalendarMonth, days_in_month: int) -> dict[int, int]:
        return {day: self.count_for_day(day, month) for day in range(1, days_in_month + 1)}


@dataclass(frozen=True)
class EventGroups:
    active: tuple
    upcoming: tuple
    past: tuple


def group_by_status(events: Iterable[Event], now: Optional[datetime] = None) -> EventGroups:
    """
    Split events into active, upcoming and past.

    Upcoming events are sorted soonest first, past events by most recent
    end first. Events with unusable timestamps are left out.
    """
    now = _reference_instant(now)
    active, upcoming, past = [], [], []
    for event in events:
        start = parse_instant(event.start_time_utc)
        end = parse_instant(event.end_time_utc)
        if start is None or end is None:
            continue
        if start <= now <= end:
            active.append((start, end, event))
        elif now < start:
            upcoming.append((start, end, event))
        else:
            past.append((start, end, event))

    upcoming.sort(key=lambda item: item[0])
    past.sort(key=lambda item: item[1], reverse=True)
    return EventGroups(
        active=tuple(e for _, _, e in active),
        upcoming=tuple(e for _, _, e in upcoming),
        past=tuple(e for _, _, e in past),
    )
