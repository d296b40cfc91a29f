import datetime as dt
from collections.abc import Iterable

from medbook.domain.models import Appointment


def booked_slot(
    doctor_id: str,
    date: dt.date,
    time: dt.time,
    appointments: Iterable[Appointment],
) -> Appointment | None:
    """Return the scheduled appointment occupying the doctor's slot, if any.

    Cancelled appointments never occupy a slot.
    """
    for appointment in appointments:
        if (
            appointment.is_scheduled
            and appointment.doctor_id == doctor_id
            and appointment.date == date
            and appointment.time == time
        ):
            return appointment
    return None


def has_conflict(
    doctor_id: str,
    date: dt.date,
    time: dt.time,
    appointments: Iterable[Appointment],
) -> bool:
    return booked_slot(doctor_id, date, time, appointments) is not None
