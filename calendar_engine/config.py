"""
Configuration for the calendar engine.

Display settings and layout limits are plain dataclasses that are passed
into each layout computation. Config.load() reads them from a TOML file.
"""

import tomllib
import os
from pathlib import Path
from dataclasses import dataclass, field
from typing import Optional

from .debug import debug_print
from .timezone_utils import TimezoneMode, resolve_timezone


WEEK_START_DAYS = ("sunday", "monday")
EVENT_DISPLAY_STYLES = ("spanning", "daily")
EVENT_OPACITIES = ("transparent", "solid")


def _debug_print(message: str) -> None:
    debug_print("CONFIG", message)


def _check_choice(name: str, value: str, choices: tuple):
    if value not in choices:
        raise ValueError(f"{name} must be one of {', '.join(choices)}; got {value!r}")


@dataclass(frozen=True)
class DisplaySettings:
    """User display preferences for the month view."""
    week_start_day: str = "sunday"
    show_adjacent_months: bool = True
    show_week_numbers: bool = False
    hide_ended_events: bool = False
    event_display_style: str = "spanning"
    compact_mode: bool = False
    event_opacity: str = "transparent"  # Renderer hint only

    def __post_init__(self):
        _check_choice("week_start_day", self.week_start_day, WEEK_START_DAYS)
        _check_choice("event_display_style", self.event_display_style, EVENT_DISPLAY_STYLES)
        _check_choice("event_opacity", self.event_opacity, EVENT_OPACITIES)


@dataclass(frozen=True)
class LayoutConfig:
    """Limits for visible bars and per-day event lists."""
    max_visible_bars: int = 5
    compact_max_visible_bars: int = 6
    day_expand_threshold: int = 5  # Days with more events become expandable
    daily_max_events: int = 3      # Events listed per cell in "daily" style
    pack_lanes: bool = False       # Greedy lane packing instead of sorted order
    clamp_to_month: bool = False   # Keep continuation bars off empty edge cells

    def __post_init__(self):
        for name in ("max_visible_bars", "compact_max_visible_bars",
                     "day_expand_threshold", "daily_max_events"):
            if getattr(self, name) < 0:
                raise ValueError(f"{name} must not be negative")


@dataclass
class Config:
    """Main configuration container."""

    timezone: str = "local"
    debug: bool = False
    display: DisplaySettings = field(default_factory=DisplaySettings)
    layout: LayoutConfig = field(default_factory=LayoutConfig)

    @property
    def timezone_mode(self) -> TimezoneMode:
        return TimezoneMode(self.timezone)

    @classmethod
    def get_default_config_path(cls) -> Path:
        """Get the default configuration file path."""
        xdg_config = os.environ.get('XDG_CONFIG_HOME', os.path.expanduser('~/.config'))
        return Path(xdg_config) / 'span-calendar' / 'span-calendar.toml'

    @classmethod
    def load(cls, config_path: Optional[Path] = None) -> 'Config':
        """
        Load configuration from a TOML file.

        Without an explicit path the default location is tried and
        defaults are used if no file exists there. An explicit path that
        does not exist raises FileNotFoundError.
        """
        if config_path is None:
            config_path = cls.get_default_config_path()
            if not config_path.exists():
                _debug_print(f"No config at {config_path}, using defaults")
                return cls()
        elif not config_path.exists():
            raise FileNotFoundError(f"Configuration file not found: {config_path}")

        with open(config_path, 'rb') as f:
            data = tomllib.load(f)
        _debug_print(f"Loaded {config_path}: sections {list(data.keys())}")
        return cls.from_dict(data)

    @classmethod
    def from_dict(cls, data: dict) -> 'Config':
        """Build a Config from parsed TOML data."""
        general = data.get('General', {})
        timezone = str(general.get('timezone', 'local'))
        # Fail early on unknown zone names
        resolve_timezone(TimezoneMode(timezone))

        display_data = data.get('Display', {})
        display = DisplaySettings(
            week_start_day=str(display_data.get('week_start_day', DisplaySettings.week_start_day)).lower(),
            show_adjacent_months=bool(display_data.get('show_adjacent_months', DisplaySettings.show_adjacent_months)),
            show_week_numbers=bool(display_data.get('show_week_numbers', DisplaySettings.show_week_numbers)),
            hide_ended_events=bool(display_data.get('hide_ended_events', DisplaySettings.hide_ended_events)),
            event_display_style=str(display_data.get('event_display_style', DisplaySettings.event_display_style)).lower(),
            compact_mode=bool(display_data.get('compact_mode', DisplaySettings.compact_mode)),
            event_opacity=str(display_data.get('event_opacity', DisplaySettings.event_opacity)).lower(),
        )

        overflow_data = data.get('Overflow', {})
        layout = LayoutConfig(
            max_visible_bars=int(overflow_data.get('max_visible_bars', LayoutConfig.max_visible_bars)),
            compact_max_visible_bars=int(overflow_data.get('compact_max_visible_bars', LayoutConfig.compact_max_visible_bars)),
            day_expand_threshold=int(overflow_data.get('day_expand_threshold', LayoutConfig.day_expand_threshold)),
            daily_max_events=int(overflow_data.get('daily_max_events', LayoutConfig.daily_max_events)),
            pack_lanes=bool(overflow_data.get('pack_lanes', LayoutConfig.pack_lanes)),
            clamp_to_month=bool(overflow_data.get('clamp_to_month', LayoutConfig.clamp_to_month)),
        )

        return cls(
            timezone=timezone,
            debug=bool(general.get('debug', False)),
            display=display,
            layout=layout,
        )
