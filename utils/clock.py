"""
utils/clock.py
--------------
Operating timezone and the injectable "now" used by stats and reminders.
"""

from datetime import datetime
from typing import Callable

import pytz

import config


def get_timezone(name: str = config.TIMEZONE) -> pytz.BaseTzInfo:
    """
    Resolve a timezone name, e.g. 'America/Denver'.

    Raises:
        pytz.UnknownTimeZoneError: If the name is not in the tz database.
    """
    return pytz.timezone(name)


def system_clock(tz: pytz.BaseTzInfo) -> Callable[[], datetime]:
    """A clock returning the current aware time in ``tz``."""
    def now() -> datetime:
        return datetime.now(tz)
    return now
