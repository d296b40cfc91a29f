from medbook.domain.models import Appointment, Doctor, Patient


class InMemoryRecordStore:
    """In-memory implementation of the RecordStoreProtocol protocol.

    Pre-load ``patients``, ``doctors`` and ``appointments`` to control what the
    store returns. Set ``load_error`` or ``save_error`` to make every load or
    save raise.

    Loads return copies of the lists, so callers mutating a loaded collection
    only affect the store once they save it. ``saves`` counts save calls.
    """

    def __init__(
        self,
        *,
        patients: list[Patient] | None = None,
        doctors: list[Doctor] | None = None,
        appointments: list[Appointment] | None = None,
    ) -> None:
        self.patients: list[Patient] = list(patients or [])
        self.doctors: list[Doctor] = list(doctors or [])
        self.appointments: list[Appointment] = list(appointments or [])
        self.saves: int = 0

        self.load_error: Exception | None = None
        self.save_error: Exception | None = None

    async def load_patients(self) -> list[Patient]:
        self._raise_on_load()
        return list(self.patients)

    async def load_doctors(self) -> list[Doctor]:
        self._raise_on_load()
        return list(self.doctors)

    async def load_appointments(self) -> list[Appointment]:
        self._raise_on_load()
        return list(self.appointments)

    async def save_patients(self, patients: list[Patient]) -> None:
        self._raise_on_save()
        self.patients = list(patients)
        self.saves += 1

    async def save_doctors(self, doctors: list[Doctor]) -> None:
        self._raise_on_save()
        self.doctors = list(doctors)
        self.saves += 1

    async def save_appointments(self, appointments: list[Appointment]) -> None:
        self._raise_on_save()
        self.appointments = list(appointments)
        self.saves += 1

    def _raise_on_load(self) -> None:
        if self.load_error:
            raise self.load_error

    def _raise_on_save(self) -> None:
        if self.save_error:
            raise self.save_error
