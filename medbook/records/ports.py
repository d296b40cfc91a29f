from typing import Protocol

from medbook.domain.models import Appointment, Doctor, Patient


class RecordStoreProtocol(Protocol):
    """Whole-collection persistence for patients, doctors and appointments.

    Every save replaces the entire collection. Implementations raise
    ``StoreIOError`` when a collection cannot be read, parsed or written.
    """

    async def load_patients(self) -> list[Patient]:
        """Return every stored patient."""
        ...

    async def load_doctors(self) -> list[Doctor]:
        """Return every stored doctor."""
        ...

    async def load_appointments(self) -> list[Appointment]:
        """Return every stored appointment, cancelled ones included."""
        ...

    async def save_patients(self, patients: list[Patient]) -> None:
        """Replace the patient collection."""
        ...

    async def save_doctors(self, doctors: list[Doctor]) -> None:
        """Replace the doctor collection."""
        ...

    async def save_appointments(self, appointments: list[Appointment]) -> None:
        """Replace the appointment collection."""
        ...
