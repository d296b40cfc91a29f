import asyncio
import datetime as dt
from collections.abc import Callable

from loguru import logger

from medbook.domain.exceptions import (
    AppointmentNotFoundError,
    DoctorNotFoundError,
    DoctorUnavailableError,
    DuplicateRecordError,
    InvalidStateTransitionError,
    MissingFieldError,
    PastDateTimeError,
    PatientNotFoundError,
    SlotTakenError,
)
from medbook.domain.models import (
    Appointment,
    AppointmentRequest,
    AppointmentStatus,
    Doctor,
    DoctorUtilization,
    SpecialtyStats,
)
from medbook.records.guard import store_call
from medbook.records.ports import RecordStoreProtocol
from medbook.scheduling.availability import (
    check_availability,
    describe_unavailability,
    is_available,
)
from medbook.scheduling.conflicts import booked_slot, has_conflict
from medbook.scheduling.ports import AbstractSchedulingEngine

DEFAULT_HORIZON = dt.timedelta(hours=24)


class SchedulingEngine(AbstractSchedulingEngine):
    """Scheduling engine backed by a whole-collection record store.

    Bookings and cancellations run load → check → save under a single lock, so
    two concurrent requests never validate against the same stale snapshot.
    The lock is global because each save replaces the whole collection.
    """

    def __init__(
        self,
        store: RecordStoreProtocol,
        *,
        clock: Callable[[], dt.datetime] = dt.datetime.now,
        upcoming_horizon: dt.timedelta = DEFAULT_HORIZON,
    ) -> None:
        self._store = store
        self._clock = clock
        self._upcoming_horizon = upcoming_horizon
        self._write_lock = asyncio.Lock()

    async def create_appointment(self, request: AppointmentRequest) -> Appointment:
        logger.info(
            "Creating appointment: doctor={}, date={}, time={}",
            request.doctor_id,
            request.date,
            request.time,
        )

        async with self._write_lock:
            appointments = await store_call("load appointments", self._store.load_appointments())
            patients = await store_call("load patients", self._store.load_patients())
            doctors = await store_call("load doctors", self._store.load_doctors())

            # Checks run in a fixed order so the reported error is deterministic.
            if any(a.id == request.id for a in appointments):
                logger.warning("Rejected appointment {}: id already exists", request.id)
                raise DuplicateRecordError(f"Appointment '{request.id}' already exists")

            if not any(p.id == request.patient_id for p in patients):
                logger.warning("Rejected appointment {}: unknown patient", request.id)
                raise PatientNotFoundError(request.patient_id)

            doctor = next((d for d in doctors if d.id == request.doctor_id), None)
            if doctor is None:
                logger.warning("Rejected appointment {}: unknown doctor", request.id)
                raise DoctorNotFoundError(request.doctor_id)

            if request.starts_at <= self._clock():
                logger.warning("Rejected appointment {}: slot is in the past", request.id)
                raise PastDateTimeError()

            reason = check_availability(doctor, request.date, request.time)
            if reason is not None:
                logger.warning(
                    "Rejected appointment {}: doctor unavailable ({})", request.id, reason.value
                )
                raise DoctorUnavailableError(
                    reason, describe_unavailability(doctor, request.date, reason)
                )

            taken_by = booked_slot(doctor.id, request.date, request.time, appointments)
            if taken_by is not None:
                logger.warning(
                    "Rejected appointment {}: slot held by appointment {}", request.id, taken_by.id
                )
                raise SlotTakenError(doctor.id)

            appointment = Appointment(
                id=request.id,
                patient_id=request.patient_id,
                doctor_id=request.doctor_id,
                date=request.date,
                time=request.time,
                status=AppointmentStatus.SCHEDULED,
            )
            appointments.append(appointment)
            await store_call("save appointments", self._store.save_appointments(appointments))

        logger.info("Appointment created: id={}", appointment.id)
        return appointment

    async def cancel_appointment(self, appointment_id: str) -> Appointment:
        logger.info("Cancelling appointment {}", appointment_id)

        async with self._write_lock:
            appointments = await store_call("load appointments", self._store.load_appointments())
            idx = next((i for i, a in enumerate(appointments) if a.id == appointment_id), None)
            if idx is None:
                logger.warning("Rejected cancellation of {}: no such appointment", appointment_id)
                raise AppointmentNotFoundError(appointment_id)

            current = appointments[idx]
            if not current.is_scheduled:
                logger.warning(
                    "Rejected cancellation of {}: status is {}",
                    appointment_id,
                    current.status.value,
                )
                raise InvalidStateTransitionError(appointment_id, current.status.value)

            cancelled = current.model_copy(update={"status": AppointmentStatus.CANCELLED})
            appointments[idx] = cancelled
            await store_call("save appointments", self._store.save_appointments(appointments))

        logger.info("Appointment cancelled: id={}", appointment_id)
        return cancelled

    async def get_appointment(self, appointment_id: str) -> Appointment:
        appointments = await store_call("load appointments", self._store.load_appointments())
        for appointment in appointments:
            if appointment.id == appointment_id:
                return appointment
        raise AppointmentNotFoundError(appointment_id)

    async def list_appointments(self) -> list[Appointment]:
        return await store_call("load appointments", self._store.load_appointments())

    async def find_available_doctors(
        self, date: dt.date | None, time: dt.time | None
    ) -> list[Doctor]:
        missing = [name for name, value in (("date", date), ("time", time)) if value is None]
        if date is None or time is None:
            raise MissingFieldError(missing)

        doctors = await store_call("load doctors", self._store.load_doctors())
        appointments = await store_call("load appointments", self._store.load_appointments())

        available = [
            d
            for d in doctors
            if is_available(d, date, time) and not has_conflict(d.id, date, time, appointments)
        ]
        logger.info("Found {} available doctor(s) on {} at {}", len(available), date, time)
        return available

    async def upcoming_appointments(
        self,
        now: dt.datetime | None = None,
        horizon: dt.timedelta | None = None,
    ) -> list[Appointment]:
        start = now if now is not None else self._clock()
        end = start + (horizon if horizon is not None else self._upcoming_horizon)

        appointments = await store_call("load appointments", self._store.load_appointments())
        upcoming = [a for a in appointments if a.is_scheduled and start <= a.starts_at < end]
        return sorted(upcoming, key=lambda a: a.starts_at)

    async def doctor_utilization_stats(self) -> list[DoctorUtilization]:
        doctors = await store_call("load doctors", self._store.load_doctors())
        appointments = await store_call("load appointments", self._store.load_appointments())

        counts = {d.id: 0 for d in doctors}
        for appointment in appointments:
            if appointment.is_scheduled and appointment.doctor_id in counts:
                counts[appointment.doctor_id] += 1

        return [DoctorUtilization(doctor=d, appointments=counts[d.id]) for d in doctors]

    async def top_specialty(self) -> SpecialtyStats:
        """Return the specialty with the most scheduled appointments.

        Specialties are ranked in the order they are first seen while scanning
        appointments; a later specialty only takes the lead with a strictly
        greater count, so on a tie the first one seen wins.
        """
        doctors = await store_call("load doctors", self._store.load_doctors())
        appointments = await store_call("load appointments", self._store.load_appointments())
        specialty_of = {d.id: d.specialty for d in doctors}

        tally: dict[str, int] = {}
        for appointment in appointments:
            specialty = specialty_of.get(appointment.doctor_id)
            if appointment.is_scheduled and specialty is not None:
                tally[specialty] = tally.get(specialty, 0) + 1

        top = SpecialtyStats()
        for specialty, count in tally.items():
            if count > top.appointments:
                top = SpecialtyStats(specialty=specialty, appointments=count)
        return top
