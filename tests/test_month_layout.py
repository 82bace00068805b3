from datetime import datetime, timedelta, timezone

import pytest

from calendar_engine.config import DisplaySettings, LayoutConfig
from calendar_engine.event_model import CalendarMonth
from calendar_engine.month_layout import LayoutContext, compute_month_layout, layout_month


def _busy_week(make_event, count=8):
    return [
        make_event(f"2024-02-{11 + i % 3:02d}T08:00:00Z", f"2024-02-{14 + i % 4:02d}T08:00:00Z")
        for i in range(count)
    ]


def test_layout_for_february_2024(feb_2024, utc, make_event):
    event = make_event("2024-01-30T10:00:00Z", "2024-02-02T12:00:00Z", "LAN party")

    layout = compute_month_layout(LayoutContext(events=(event,), month=feb_2024, mode=utc))

    assert layout.grid.weeks_count == 5
    assert len(layout.weeks) == 5
    [bar] = layout.weeks[0].visible
    assert (bar.start_col, bar.span, bar.is_start, bar.is_end) == (1, 6, False, True)
    assert [week.week_number for week in layout.weeks] == [5, 6, 7, 8, 9]
    assert layout.count_for_day(1) == 1
    assert layout.count_for_day(3) == 0
    assert layout.events_on_day(2) == [event]


def test_empty_month_keeps_all_weeks(feb_2024, utc):
    layout = layout_month([], feb_2024, mode=utc)

    assert len(layout.weeks) == 5
    assert all(week.visible == () and week.hidden_count == 0 for week in layout.weeks)
    assert not any(layout.day_counts.values())
    assert layout.expandable_days == ()


def test_overflow_per_week(feb_2024, utc, make_event):
    events = _busy_week(make_event)

    normal = layout_month(events, feb_2024, mode=utc)
    compact = layout_month(events, feb_2024, DisplaySettings(compact_mode=True), mode=utc)

    assert len(normal.weeks[2].visible) == 5
    assert normal.weeks[2].hidden_count == 3
    assert normal.weeks[2].lanes == (0, 1, 2, 3, 4)
    assert len(compact.weeks[2].visible) == 6
    assert compact.weeks[2].hidden_count == 2


def test_busy_days_are_expandable(feb_2024, utc, make_event):
    events = _busy_week(make_event)

    layout = layout_month(events, feb_2024, mode=utc)

    # Feb 13 and 14 are covered by all eight events
    assert 13 in layout.expandable_days
    assert 14 in layout.expandable_days
    assert 11 not in layout.expandable_days
    assert len(layout.events_on_day(13)) == 8


def test_results_are_cached(feb_2024, utc, make_event):
    ctx = LayoutContext(events=[make_event("2024-02-05T08:00:00Z", "2024-02-06T08:00:00Z")],
                        month=feb_2024, mode=utc)

    assert isinstance(ctx.events, tuple)
    assert compute_month_layout(ctx) is compute_month_layout(ctx)


def test_changed_inputs_give_new_layout(feb_2024, utc, make_event):
    events = (make_event("2024-02-05T08:00:00Z", "2024-02-06T08:00:00Z"),)

    sunday = compute_month_layout(LayoutContext(events=events, month=feb_2024, mode=utc))
    monday = compute_month_layout(LayoutContext(
        events=events, month=feb_2024, mode=utc,
        settings=DisplaySettings(week_start_day="monday")))

    assert sunday is not monday
    assert sunday.weeks[1].visible[0].start_col == 2
    assert monday.weeks[1].visible[0].start_col == 1


def test_hidden_ended_events_vanish_everywhere(feb_2024, utc, make_event, fixed_now):
    ended = make_event("2024-02-05T08:00:00Z", "2024-02-06T08:00:00Z")
    running = make_event("2024-02-14T08:00:00Z", "2024-02-16T08:00:00Z")

    layout = compute_month_layout(LayoutContext(
        events=(ended, running), month=feb_2024, mode=utc,
        settings=DisplaySettings(hide_ended_events=True), now=fixed_now))

    bars = [bar.event for week in layout.weeks for bar in week.visible]
    assert bars == [running]
    assert layout.count_for_day(5) == 0
    assert layout.count_for_day(15) == 1


def test_daily_style_lists_events_per_day(feb_2024, utc, make_event):
    events = [make_event("2024-02-20T08:00:00Z", "2024-02-20T09:00:00Z") for _ in range(4)]

    layout = layout_month(events, feb_2024, DisplaySettings(event_display_style="daily"), mode=utc)

    assert all(week.visible == () for week in layout.weeks)
    assert len(layout.daily_cells) == 29
    cell = layout.daily_cells[19]
    assert cell.day == 20
    assert len(cell.events) == 3
    assert cell.hidden_count == 1


def test_lane_packing_when_enabled(feb_2024, utc, make_event):
    events = [
        make_event("2024-02-11T08:00:00Z", "2024-02-12T08:00:00Z"),
        make_event("2024-02-12T09:00:00Z", "2024-02-15T08:00:00Z"),
        make_event("2024-02-13T08:00:00Z", "2024-02-14T08:00:00Z"),
        make_event("2024-02-16T08:00:00Z", "2024-02-17T08:00:00Z"),
    ]

    packed = layout_month(events, feb_2024, mode=utc, layout=LayoutConfig(pack_lanes=True))
    plain = layout_month(events, feb_2024, mode=utc)

    assert packed.weeks[2].lanes == (0, 1, 0, 0)
    assert plain.weeks[2].lanes == (0, 1, 2, 3)


def test_clamp_option_reaches_allocator(feb_2024, utc, make_event):
    event = make_event("2024-01-30T10:00:00Z", "2024-02-02T12:00:00Z")

    layout = layout_month([event], feb_2024, mode=utc, layout=LayoutConfig(clamp_to_month=True))

    [bar] = layout.weeks[0].visible
    assert (bar.start_col, bar.span) == (5, 2)


def test_event_ended_seconds_ago_is_hidden(utc, make_event):
    now = datetime.now(timezone.utc)
    event = make_event((now - timedelta(hours=2)).isoformat(),
                       (now - timedelta(seconds=5)).isoformat())

    layout = layout_month([event], CalendarMonth.from_date(now.date()),
                          DisplaySettings(hide_ended_events=True), mode=utc)

    assert not any(layout.day_counts.values())
    assert all(not week.visible for week in layout.weeks)


def test_cache_is_shared_while_visible_events_are_unchanged(feb_2024, utc, make_event, fixed_now):
    ended = make_event("2024-02-05T08:00:00Z", "2024-02-06T08:00:00Z")
    running = make_event("2024-02-14T08:00:00Z", "2024-02-16T08:00:00Z")
    settings = DisplaySettings(hide_ended_events=True)

    first = compute_month_layout(LayoutContext(
        events=(ended, running), month=feb_2024, mode=utc, settings=settings, now=fixed_now))
    later = compute_month_layout(LayoutContext(
        events=(ended, running), month=feb_2024, mode=utc, settings=settings,
        now=fixed_now + timedelta(minutes=30)))

    assert first is later


def test_day_counts_are_read_only(feb_2024, utc, make_event):
    layout = layout_month([make_event("2024-02-05T08:00:00Z", "2024-02-06T08:00:00Z")],
                          feb_2024, mode=utc)

    with pytest.raises(TypeError):
        layout.day_counts[5] = 99
    assert layout.count_for_day(5) == 1
