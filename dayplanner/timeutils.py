# dayplanner/timeutils.py
import re

from loguru import logger

from .models import TimeBlock

_CLOCK_12H = re.compile(r"(\d{1,2}):(\d{2})\s*(AM|PM)", re.IGNORECASE)
_HOUR_12H = re.compile(r"(\d{1,2})\s*(AM|PM)", re.IGNORECASE)
_CLOCK_24H = re.compile(r"(\d{1,2}):(\d{2})(?!\s*[AP])", re.IGNORECASE)
_BARE_HOUR = re.compile(r"(?:at\s+)?(\d{1,2})(?:\s|$|,)", re.IGNORECASE)

NOON = 720
TWO_PM = 840
FIVE_PM = 1020


def _to_24h(hours: int, meridiem: str) -> int:
    is_pm = meridiem.upper() == "PM"
    if is_pm and hours != 12:
        return hours + 12
    if not is_pm and hours == 12:
        return 0
    return hours


def to_minutes(text: str) -> int:
    """
    Convert a human time string to minutes since midnight.

    Accepts "8:00 AM", "1pm" / "1 PM", 24-hour "14:00" and a bare hour ("at 2").
    Bare hours 1-6 are read as afternoon. Anything unparseable gives 0, so
    callers must treat 0 from non-empty text as untrusted.
    """
    if not text:
        return 0

    m = _CLOCK_12H.search(text)
    if m:
        return _to_24h(int(m.group(1)), m.group(3)) * 60 + int(m.group(2))

    m = _HOUR_12H.search(text)
    if m:
        return _to_24h(int(m.group(1)), m.group(2)) * 60

    m = _CLOCK_24H.search(text)
    if m:
        return int(m.group(1)) * 60 + int(m.group(2))

    m = _BARE_HOUR.search(text)
    if m:
        hours = int(m.group(1))
        if 1 <= hours <= 6:
            hours += 12
        return hours * 60

    logger.warning("Could not parse time from {!r}, using midnight", text)
    return 0


def to_time_string(minutes: int) -> str:
    """Render minutes since midnight as 12-hour "H:MM AM/PM"."""
    hours, mins = divmod(int(minutes), 60)
    is_pm = hours >= 12
    if hours > 12:
        display = hours - 12
    elif hours == 0:
        display = 12
    else:
        display = hours
    return f"{display}:{mins:02d} {'PM' if is_pm else 'AM'}"


def to_time_block(minutes: int) -> TimeBlock:
    if minutes < NOON:
        return TimeBlock.MORNING
    if minutes < TWO_PM:
        return TimeBlock.MIDDAY
    if minutes < FIVE_PM:
        return TimeBlock.AFTERNOON
    return TimeBlock.EVENING
