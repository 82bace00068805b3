"""
Span Calendar Engine

Month calendar layout with multi-day events as spanning bars:
- Value types (event_model.py)
- Timezone projection of UTC instants onto calendar days (timezone_utils.py)
- Week/day grid of a month (date_grid.py)
- ISO week numbers (week_numbers.py)
- Spanning-bar placement per week (span_allocator.py)
- "+N more" overflow and the expanded day panel (overflow.py)
- Per-day event membership (day_index.py)
- Cached month layout built from one context object (month_layout.py)
- Configuration (config.py) and event files (event_source.py)
"""

from .event_model import Event, CalendarMonth, WeekRow, SpanningEvent
from .config import Config, DisplaySettings, LayoutConfig
from .timezone_utils import TimezoneMode, project_to_local_date, same_calendar_day
from .date_grid import MonthGrid, build_grid
from .week_numbers import iso_week_number
from .span_allocator import allocate, build_week_rows, assign_lanes
from .overflow import DayExpansion, Truncation, count_for_day, truncate
from .day_index import DayMembershipIndex, events_on_day, filter_events, group_by_status
from .month_layout import LayoutContext, MonthLayout, compute_month_layout, layout_month
from .event_source import EventSourceError, load_events

__all__ = [
    'Event',
    'CalendarMonth',
    'WeekRow',
    'SpanningEvent',
    'Config',
    'DisplaySettings',
    'LayoutConfig',
    'TimezoneMode',
    'project_to_local_date',
    'same_calendar_day',
    'MonthGrid',
    'build_grid',
    'iso_week_number',
    'allocate',
    'build_week_rows',
    'assign_lanes',
    'DayExpansion',
    'Truncation',
    'count_for_day',
    'truncate',
    'DayMembershipIndex',
    'events_on_day',
    'filter_events',
    'group_by_status',
    'LayoutContext',
    'MonthLayout',
    'compute_month_layout',
    'layout_month',
    'EventSourceError',
    'load_events',
]
