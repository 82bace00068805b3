"""
Overflow handling for the month view.

Caps the spanning bars shown per week ("+N more"), counts events per day
for badges, and keeps track of the single expanded day panel.
"""

from dataclasses import dataclass
from typing import Iterable, Optional

from .config import DisplaySettings, LayoutConfig
from .day_index import DayMembershipIndex
from .event_model import CalendarMonth, Event, SpanningEvent
from .timezone_utils import TimezoneMode


@dataclass(frozen=True)
class Truncation:
    visible: tuple
    hidden_count: int


@dataclass(frozen=True)
class DailyCell:
    """Events listed in one cell for the "daily" display style."""
    day: int
    events: tuple
    hidden_count: int
    total: int


def max_visible_for(settings: DisplaySettings, layout: Optional[LayoutConfig] = None) -> int:
    """Bars shown per week; depends on display density only."""
    layout = layout or LayoutConfig()
    if settings.compact_mode:
        return layout.compact_max_visible_bars
    return layout.max_visible_bars


def truncate(spanning_events: Iterable[SpanningEvent], max_visible: int) -> Truncation:
    """Keep the first ``max_visible`` bars of an already sorted list."""
    placements = list(spanning_events)
    return Truncation(visible=tuple(placements[:max_visible]),
                      hidden_count=max(0, len(placements) - max_visible))


def truncate_lanes(spanning_events: Iterable[SpanningEvent], lanes: list[int],
                   max_visible: int) -> tuple[Truncation, tuple]:
    """
    Keep the bars whose lane is below ``max_visible``.

    Returns the truncation and the lanes of the visible bars.
    """
    visible, visible_lanes = [], []
    hidden = 0
    for placement, lane in zip(spanning_events, lanes):
        if lane < max_visible:
            visible.append(placement)
            visible_lanes.append(lane)
        else:
            hidden += 1
    return Truncation(visible=tuple(visible), hidden_count=hidden), tuple(visible_lanes)


def count_for_day(day: int, events: Iterable[Event], month: CalendarMonth,
                  mode: TimezoneMode) -> int:
    """Number of events whose local date range includes the day."""
    return DayMembershipIndex(events, mode).count_for_day(day, month)


def is_expandable(count: int, threshold: int = LayoutConfig.day_expand_threshold) -> bool:
    return count > threshold


def daily_cell(day: int, index: DayMembershipIndex, month: CalendarMonth,
               max_events: int = LayoutConfig.daily_max_events) -> DailyCell:
    """First ``max_events`` events of a day plus the hidden remainder."""
    day_events = index.events_on_day(day, month)
    return DailyCell(day=day, events=tuple(day_events[:max_events]),
                     hidden_count=max(0, len(day_events) - max_events),
                     total=len(day_events))


class DayExpansion:
    """
    Which day's event panel is open, if any.

    At most one day is open at a time. The panel closes when the same day
    is toggled again, on an outside interaction, or when the month changes.
    """

    def __init__(self):
        self._open_day: Optional[int] = None

    @property
    def open_day(self) -> Optional[int]:
        return self._open_day

    def is_open(self, day: int) -> bool:
        return self._open_day == day

    def toggle(self, day: int) -> Optional[int]:
        """Open ``day`` (closing any other) or close it if already open."""
        self._open_day = None if self._open_day == day else day
        return self._open_day

    def close(self):
        self._open_day = None

    def on_month_changed(self):
        self.close()

    def panel_events(self, index: DayMembershipIndex, month: CalendarMonth) -> list[Event]:
        """Full event list of the open day; empty when nothing is open."""
        if self._open_day is None:
            return []
        return index.events_on_day(self._open_day, month)
