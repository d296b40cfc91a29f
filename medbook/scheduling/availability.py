import datetime as dt

from medbook.domain.calendar import format_time, minutes_of_day, weekday_of
from medbook.domain.exceptions import UnavailabilityReason
from medbook.domain.models import Doctor


def check_availability(
    doctor: Doctor, date: dt.date, time: dt.time
) -> UnavailabilityReason | None:
    """Return why ``doctor`` cannot take the slot, or ``None`` if they can.

    The window is half-open: ``window_start`` is bookable, ``window_end`` is not.
    """
    if weekday_of(date) not in doctor.available_days:
        return UnavailabilityReason.WRONG_WEEKDAY

    minute = minutes_of_day(time)
    if not minutes_of_day(doctor.window_start) <= minute < minutes_of_day(doctor.window_end):
        return UnavailabilityReason.OUTSIDE_WINDOW

    return None


def is_available(doctor: Doctor, date: dt.date, time: dt.time) -> bool:
    return check_availability(doctor, date, time) is None


def describe_unavailability(
    doctor: Doctor, date: dt.date, reason: UnavailabilityReason
) -> str:
    """Human-readable message for a failed availability check."""
    if reason is UnavailabilityReason.WRONG_WEEKDAY:
        return f"The doctor is not available on {weekday_of(date).value}"
    return (
        f"The time must be between {format_time(doctor.window_start)} "
        f"and {format_time(doctor.window_end)}"
    )
