"""
Timezone utilities for the BookAPro platform.

Lesson dates and start times are stored as the coach's wall-clock values;
these helpers give "now" and "today" in a user's timezone so they can be
compared against them.
"""

from datetime import date, datetime
from typing import TYPE_CHECKING, Optional

import pytz

if TYPE_CHECKING:
    from app.models.user import User

DEFAULT_TIMEZONE = "America/New_York"


def get_user_timezone(user: Optional["User"]) -> pytz.BaseTzInfo:
    """User's timezone preference, falling back to the platform default."""
    name = getattr(user, "timezone", None) or DEFAULT_TIMEZONE
    try:
        return pytz.timezone(name)
    except pytz.UnknownTimeZoneError:
        return pytz.timezone(DEFAULT_TIMEZONE)


def get_user_now(user: Optional["User"]) -> datetime:
    """Current naive wall-clock datetime in the user's timezone."""
    return datetime.now(get_user_timezone(user)).replace(tzinfo=None)


def get_user_today(user: Optional["User"]) -> date:
    return get_user_now(user).date()
