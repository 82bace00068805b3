"""
Debug output for the calendar engine.

Messages go to stderr with a timestamp and a component prefix, and are
only written once debugging has been switched on (``--debug`` on the
command line or ``debug = true`` in the configuration file).
"""

import sys
from datetime import datetime


_debug_enabled: bool = False


def set_debug(enabled: bool):
    """Switch debug output on or off for the whole engine."""
    global _debug_enabled
    _debug_enabled = bool(enabled)


def is_debug_enabled() -> bool:
    return _debug_enabled


def debug_print(prefix: str, message: str) -> None:
    if not _debug_enabled:
        return
    timestamp = datetime.now().strftime("%H:%M:%S")
    print(f"[{timestamp}] {prefix}: {message}", file=sys.stderr)
