"""
Month layout entry point.

Everything a month view needs is computed from one LayoutContext: the
events, the displayed month, display settings, timezone mode and layout
limits. Results are cached per context and are read-only.
"""

from dataclasses import dataclass, field, replace
from datetime import datetime
from functools import lru_cache
from types import MappingProxyType
from typing import Iterable, Optional

from .config import DisplaySettings, LayoutConfig
from .date_grid import MonthGrid, build_grid, week_rows
from .day_index import DayMembershipIndex, filter_events
from .debug import debug_print
from .event_model import CalendarMonth, Event, WeekRow
from .overflow import (
    DailyCell, daily_cell, is_expandable, max_visible_for, truncate, truncate_lanes
)
from .span_allocator import assign_lanes, build_week_rows, sequential_lanes
from .timezone_utils import TimezoneMode
from .week_numbers import week_numbers_for_grid


LAYOUT_CACHE_SIZE = 32


def _debug_print(message: str) -> None:
    debug_print("LAYOUT", message)


@dataclass(frozen=True)
class LayoutContext:
    """All inputs of a month layout computation."""
    events: tuple
    month: CalendarMonth
    settings: DisplaySettings = field(default_factory=DisplaySettings)
    mode: TimezoneMode = field(default_factory=TimezoneMode)
    layout: LayoutConfig = field(default_factory=LayoutConfig)
    # Reference time for hiding ended events; None means "now"
    now: Optional[datetime] = None

    def __post_init__(self):
        if not isinstance(self.events, tuple):
            object.__setattr__(self, 'events', tuple(self.events))


@dataclass(frozen=True)
class WeekLayout:
    row: WeekRow
    visible: tuple
    hidden_count: int
    lanes: tuple  # Stacking row of each visible bar
    week_number: int


@dataclass(frozen=True)
class MonthLayout:
    month: CalendarMonth
    settings: DisplaySettings
    grid: MonthGrid
    weeks: tuple
    day_counts: MappingProxyType
    expandable_days: tuple
    daily_cells: tuple = ()
    index: Optional[DayMembershipIndex] = field(default=None, compare=False, repr=False)

    @property
    def week_rows(self) -> list[WeekRow]:
        return [week.row for week in self.weeks]

    def count_for_day(self, day: int) -> int:
        return self.day_counts.get(day, 0)

    def events_on_day(self, day: int) -> list[Event]:
        return self.index.events_on_day(day, self.month)


def compute_month_layout(ctx: LayoutContext) -> MonthLayout:
    """
    Lay out a month; identical contexts return the cached result.

    Ended events are filtered against the exact reference time before the
    cache lookup, so the cache is keyed on the events that remain visible.
    """
    events = tuple(filter_events(ctx.events, ctx.settings, ctx.now))
    return _compute_month_layout(replace(ctx, events=events, now=None))


def layout_month(events: Iterable[Event], month: CalendarMonth,
                 settings: Optional[DisplaySettings] = None,
                 mode: Optional[TimezoneMode] = None,
                 layout: Optional[LayoutConfig] = None) -> MonthLayout:
    """Convenience wrapper building the LayoutContext from loose arguments."""
    return compute_month_layout(LayoutContext(
        events=tuple(events), month=month,
        settings=settings or DisplaySettings(),
        mode=mode or TimezoneMode(),
        layout=layout or LayoutConfig(),
    ))


def clear_layout_cache():
    _compute_month_layout.cache_clear()


@lru_cache(maxsize=LAYOUT_CACHE_SIZE)
def _compute_month_layout(ctx: LayoutContext) -> MonthLayout:
    settings = ctx.settings
    events = ctx.events
    grid = build_grid(ctx.month, settings.week_start_day)
    index = DayMembershipIndex(events, ctx.mode)

    if settings.event_display_style == "spanning":
        rows = build_week_rows(grid, events, ctx.month, ctx.mode,
                               clamp=ctx.layout.clamp_to_month,
                               show_adjacent_months=settings.show_adjacent_months)
    else:
        rows = week_rows(grid, ctx.month, settings.show_adjacent_months)

    max_visible = max_visible_for(settings, ctx.layout)
    numbers = week_numbers_for_grid(ctx.month, grid)
    weeks = []
    for row, number in zip(rows, numbers):
        placements = list(row.spanning_events)
        if ctx.layout.pack_lanes:
            truncation, lanes = truncate_lanes(placements, assign_lanes(placements), max_visible)
        else:
            truncation = truncate(placements, max_visible)
            lanes = tuple(sequential_lanes(list(truncation.visible)))
        weeks.append(WeekLayout(row=row, visible=truncation.visible,
                                hidden_count=truncation.hidden_count,
                                lanes=lanes, week_number=number))

    counts = index.counts_for_month(ctx.month, grid.days_in_month)
    expandable = tuple(day for day, count in counts.items()
                       if is_expandable(count, ctx.layout.day_expand_threshold))

    cells: tuple[DailyCell, ...] = ()
    if settings.event_display_style == "daily":
        cells = tuple(daily_cell(day, index, ctx.month, ctx.layout.daily_max_events)
                      for day in range(1, grid.days_in_month + 1))

    _debug_print(f"{ctx.month}: {len(events)} events, {grid.weeks_count} weeks, "
                 f"{len(expandable)} expandable days")
    return MonthLayout(month=ctx.month, settings=settings, grid=grid,
                       weeks=tuple(weeks), day_counts=MappingProxyType(counts),
                       expandable_days=expandable, daily_cells=cells, index=index)
