import pytest

from calendar_engine.date_grid import (
    adjacent_day_numbers, build_grid, days_in_month, week_rows, weekday_column
)
from calendar_engine.event_model import CalendarMonth

ALL_MONTHS = [CalendarMonth(year, month) for year in (2015, 2020, 2023, 2024, 2025) for month in range(12)]


def test_february_2024_sunday_start(feb_2024):
    grid = build_grid(feb_2024, "sunday")

    assert grid.first_day_offset == 4
    assert grid.days_in_month == 29
    assert grid.weeks_count == 5
    assert grid.days[:5] == (None, None, None, None, 1)
    assert grid.row(4) == (25, 26, 27, 28, 29, None, None)


def test_february_2024_monday_start(feb_2024):
    grid = build_grid(feb_2024, "monday")

    assert grid.first_day_offset == 3
    assert grid.row(0) == (None, None, None, 1, 2, 3, 4)
    assert grid.weeks_count == 5


@pytest.mark.parametrize("week_start_day", ["sunday", "monday"])
def test_every_day_appears_exactly_once(week_start_day):
    for month in ALL_MONTHS:
        grid = build_grid(month, week_start_day)
        numbers = [d for d in grid.days if d is not None]

        assert numbers == list(range(1, grid.days_in_month + 1))
        assert len(grid.days) == grid.weeks_count * 7


@pytest.mark.parametrize("week_start_day", ["sunday", "monday"])
def test_week_count_bounds(week_start_day):
    for month in ALL_MONTHS:
        grid = build_grid(month, week_start_day)
        expected = -(-(grid.first_day_offset + grid.days_in_month) // 7)

        assert grid.weeks_count in (4, 5, 6)
        assert grid.weeks_count == expected


def test_four_and_six_week_months():
    # February 2015 starts on a Sunday and has 28 days
    assert build_grid(CalendarMonth(2015, 1), "sunday").weeks_count == 4
    # August 2020 starts on a Saturday and has 31 days
    assert build_grid(CalendarMonth(2020, 7), "sunday").weeks_count == 6


def test_week_start_rotates_columns_by_one():
    for month in ALL_MONTHS:
        sunday = build_grid(month, "sunday")
        monday = build_grid(month, "monday")
        for day in range(1, sunday.days_in_month + 1):
            sunday_col = sunday.days.index(day) % 7
            monday_col = monday.days.index(day) % 7
            assert monday_col == (sunday_col + 6) % 7


def test_weekday_column():
    assert weekday_column(0, "sunday") == 0
    assert weekday_column(0, "monday") == 6
    assert weekday_column(1, "monday") == 0


def test_days_in_month_handles_leap_years():
    assert days_in_month(2024, 1) == 29
    assert days_in_month(2023, 1) == 28
    assert days_in_month(1900, 1) == 28
    assert days_in_month(2000, 1) == 29
    assert days_in_month(2024, 11) == 31


@pytest.mark.parametrize("year", [1, 1583, 9999])
def test_far_years_still_build(year):
    grid = build_grid(CalendarMonth(year, 0), "sunday")

    assert grid.weeks_count in (4, 5, 6)
    assert max(d for d in grid.days if d is not None) == 31


def test_adjacent_month_days(feb_2024):
    grid = build_grid(feb_2024, "sunday")
    adjacent = adjacent_day_numbers(feb_2024, grid)

    assert adjacent[:4] == (28, 29, 30, 31)
    assert adjacent[4] is None
    assert adjacent[-2:] == (1, 2)


def test_week_rows_carry_adjacent_days_only_when_asked(feb_2024):
    grid = build_grid(feb_2024, "sunday")

    plain = week_rows(grid, feb_2024, show_adjacent_months=False)
    shown = week_rows(grid, feb_2024, show_adjacent_months=True)

    assert len(plain) == 5
    assert plain[0].adjacent_days is None
    assert shown[0].adjacent_days[:4] == (28, 29, 30, 31)
    assert shown[0].days == plain[0].days
    assert all(row.spanning_events == () for row in shown)


def test_month_navigation_wraps_years():
    assert CalendarMonth(2024, 0).shifted(-1) == CalendarMonth(2023, 11)
    assert CalendarMonth(2023, 11).shifted(1) == CalendarMonth(2024, 0)
    assert CalendarMonth(2024, 5).shifted(-18) == CalendarMonth(2022, 11)


def test_invalid_month_rejected():
    with pytest.raises(ValueError):
        CalendarMonth(2024, 12)
