# tests/conftest.py
from datetime import datetime, timezone

import pytest

from calendar_engine.debug import set_debug
from calendar_engine.event_model import CalendarMonth, Event
from calendar_engine.month_layout import clear_layout_cache
from calendar_engine.timezone_utils import TimezoneMode


@pytest.fixture(autouse=True)
def fresh_engine_state():
    set_debug(False)
    clear_layout_cache()
    yield
    clear_layout_cache()


@pytest.fixture
def utc() -> TimezoneMode:
    return TimezoneMode("UTC")


@pytest.fixture
def feb_2024() -> CalendarMonth:
    return CalendarMonth(2024, 1)


@pytest.fixture
def make_event():
    counter = {"next": 1}

    def _make(start: str, end: str, name: str = "", color_index: int = 0) -> Event:
        event_id = counter["next"]
        counter["next"] += 1
        return Event(
            id=event_id,
            name=name or f"event-{event_id}",
            start_time_utc=start,
            end_time_utc=end,
            color_index=color_index,
        )

    return _make


@pytest.fixture
def fixed_now() -> datetime:
    return datetime(2024, 2, 15, 12, 0, tzinfo=timezone.utc)
