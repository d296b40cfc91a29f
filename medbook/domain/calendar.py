import datetime as dt
import re
from enum import Enum

from medbook.domain.exceptions import MalformedTimeError

_TIME_RE = re.compile(r"^\s*(\d{1,2}):(\d{2})(?::(\d{2}))?\s*$")

END_OF_DAY = dt.time.max


class Weekday(str, Enum):
    """Fixed weekday labels, Monday first."""

    MONDAY = "Monday"
    TUESDAY = "Tuesday"
    WEDNESDAY = "Wednesday"
    THURSDAY = "Thursday"
    FRIDAY = "Friday"
    SATURDAY = "Saturday"
    SUNDAY = "Sunday"

    @classmethod
    def parse(cls, label: str) -> "Weekday":
        """Match ``label`` case-insensitively, ignoring surrounding whitespace."""
        normalized = label.strip().lower()
        for day in cls:
            if day.value.lower() == normalized:
                return day
        raise ValueError(f"Invalid weekday: '{label}'")


# 0001-01-01 (ordinal 1) is a Monday in the proleptic Gregorian calendar.
_EPOCH_ORDINAL = 1
_WEEK: tuple[Weekday, ...] = tuple(Weekday)


def weekday_of(date: dt.date) -> Weekday:
    """Return the weekday label of ``date``, independent of any locale."""
    return _WEEK[(date.toordinal() - _EPOCH_ORDINAL) % 7]


def minutes_of_day(time: dt.time | str) -> int:
    """Convert ``time(9, 30)`` → ``570``.

    The end-of-day value (``24:00``) maps to 1439, the last valid minute.
    """
    if isinstance(time, str):
        time = parse_time(time, allow_end_of_day=True)
    return time.hour * 60 + time.minute


def parse_date(value: object, *, allow_timestamp: bool = False) -> dt.date:
    """Parse an ISO 8601 ``YYYY-MM-DD`` date.

    With ``allow_timestamp``, a full ISO timestamp is also accepted and reduced
    to its calendar date. Stored records may carry one; requests may not.
    """
    if isinstance(value, dt.datetime):
        if allow_timestamp:
            return value.date()
        raise MalformedTimeError(value, "a date in YYYY-MM-DD format")
    if isinstance(value, dt.date):
        return value
    if not isinstance(value, str):
        raise MalformedTimeError(value, "a date in YYYY-MM-DD format")
    try:
        return dt.date.fromisoformat(value.strip())
    except ValueError as exc:
        if not allow_timestamp:
            raise MalformedTimeError(value, "a date in YYYY-MM-DD format") from exc
    try:
        return dt.datetime.fromisoformat(value.strip()).date()
    except ValueError as exc:
        raise MalformedTimeError(value, "a date in YYYY-MM-DD format") from exc


def parse_time(value: object, *, allow_end_of_day: bool = False) -> dt.time:
    """Parse a 24-hour ``HH:MM`` time of day.

    Slots are whole minutes: a seconds field is accepted and dropped, so
    ``10:15:30`` and ``10:15`` name the same slot. With ``allow_end_of_day``,
    ``24:00`` is accepted and returned as ``dt.time.max``.
    """
    if isinstance(value, dt.time):
        if value == END_OF_DAY:
            return value
        return value.replace(second=0, microsecond=0)
    match = _TIME_RE.match(value) if isinstance(value, str) else None
    if not match:
        raise MalformedTimeError(value, "a time in HH:MM format")

    hour, minute = int(match.group(1)), int(match.group(2))
    second = int(match.group(3) or 0)
    if allow_end_of_day and (hour, minute, second) == (24, 0, 0):
        return END_OF_DAY
    if hour >= 24 or minute >= 60 or second >= 60:
        raise MalformedTimeError(value, "a time in HH:MM format")
    return dt.time(hour, minute)


def format_time(time: dt.time) -> str:
    """Render ``time(9, 5)`` → ``09:05``; the end-of-day value renders as ``24:00``."""
    if time == END_OF_DAY:
        return "24:00"
    return time.strftime("%H:%M")
