import datetime as dt
from abc import ABC, abstractmethod

from medbook.domain.models import (
    Appointment,
    AppointmentRequest,
    Doctor,
    DoctorUtilization,
    SpecialtyStats,
)


class AbstractSchedulingEngine(ABC):
    """Booking, cancellation and availability queries over the record store."""

    @abstractmethod
    async def create_appointment(self, request: AppointmentRequest) -> Appointment:
        """Book a slot after validating it end-to-end.

        Args:
            request: The appointment details.

        Returns:
            The created appointment, always ``scheduled``.

        Raises:
            DuplicateRecordError: If an appointment with the same id exists.
            PatientNotFoundError: If the patient does not exist.
            DoctorNotFoundError: If the doctor does not exist.
            PastDateTimeError: If the slot is not strictly in the future.
            DoctorUnavailableError: If the slot is outside the doctor's days or hours.
            SlotTakenError: If the doctor is already booked in that slot.
            StoreIOError: If the record store fails.
        """

    @abstractmethod
    async def cancel_appointment(self, appointment_id: str) -> Appointment:
        """Cancel a scheduled appointment.

        Args:
            appointment_id: The appointment's unique ID.

        Returns:
            The cancelled appointment.

        Raises:
            AppointmentNotFoundError: If no appointment has that ID.
            InvalidStateTransitionError: If the appointment is not scheduled.
            StoreIOError: If the record store fails.
        """

    @abstractmethod
    async def find_available_doctors(
        self, date: dt.date | None, time: dt.time | None
    ) -> list[Doctor]:
        """List doctors who can take the slot and have not booked it yet.

        Raises:
            MissingFieldError: If ``date`` or ``time`` is missing.
        """

    @abstractmethod
    async def upcoming_appointments(
        self,
        now: dt.datetime | None = None,
        horizon: dt.timedelta | None = None,
    ) -> list[Appointment]:
        """Scheduled appointments starting in ``[now, now + horizon)``."""

    @abstractmethod
    async def doctor_utilization_stats(self) -> list[DoctorUtilization]:
        """Scheduled appointment count for every doctor, zero counts included."""

    @abstractmethod
    async def top_specialty(self) -> SpecialtyStats:
        """The specialty with the most scheduled appointments."""
