import asyncio
import datetime as dt
from collections.abc import Callable

from loguru import logger

from medbook.domain.exceptions import (
    DoctorNotFoundError,
    DuplicateRecordError,
    PatientNotFoundError,
)
from medbook.domain.models import (
    Appointment,
    Doctor,
    Patient,
    PatientRegistration,
    PatientUpdate,
)
from medbook.records.guard import store_call
from medbook.records.ports import RecordStoreProtocol


class PatientRegistry:
    """Patient registration, updates and lookups."""

    def __init__(
        self,
        store: RecordStoreProtocol,
        *,
        clock: Callable[[], dt.datetime] = dt.datetime.now,
    ) -> None:
        self._store = store
        self._clock = clock
        self._write_lock = asyncio.Lock()

    async def register(self, registration: PatientRegistration) -> Patient:
        """Register a patient; id and email must be unused."""
        logger.info("Registering patient {}", registration.id)

        async with self._write_lock:
            patients = await store_call("load patients", self._store.load_patients())
            if any(p.id == registration.id for p in patients):
                logger.warning("Rejected patient {}: id already exists", registration.id)
                raise DuplicateRecordError(f"Patient id '{registration.id}' already exists")
            if any(p.email == registration.email for p in patients):
                logger.warning("Rejected patient {}: email already registered", registration.id)
                raise DuplicateRecordError("Email is already registered")

            patient = Patient(
                **registration.model_dump(), registration_date=self._clock().date()
            )
            patients.append(patient)
            await store_call("save patients", self._store.save_patients(patients))

        logger.info("Patient registered: id={}", patient.id)
        return patient

    async def list_patients(self) -> list[Patient]:
        return await store_call("load patients", self._store.load_patients())

    async def get(self, patient_id: str) -> Patient:
        patients = await store_call("load patients", self._store.load_patients())
        for patient in patients:
            if patient.id == patient_id:
                return patient
        raise PatientNotFoundError(patient_id)

    async def update(self, patient_id: str, changes: PatientUpdate) -> Patient:
        """Apply the fields set in ``changes``. The id and registration date never change."""
        async with self._write_lock:
            patients = await store_call("load patients", self._store.load_patients())
            idx = next((i for i, p in enumerate(patients) if p.id == patient_id), None)
            if idx is None:
                raise PatientNotFoundError(patient_id)

            updates = changes.model_dump(exclude_none=True)
            email = updates.get("email")
            if email is not None and any(
                p.email == email and p.id != patient_id for p in patients
            ):
                logger.warning(
                    "Rejected update of patient {}: email already registered", patient_id
                )
                raise DuplicateRecordError("Email is already registered")

            patients[idx] = patients[idx].model_copy(update=updates)
            await store_call("save patients", self._store.save_patients(patients))

        logger.info("Patient updated: id={}, fields={}", patient_id, sorted(updates))
        return patients[idx]

    async def history(self, patient_id: str) -> list[Appointment]:
        """All appointments of the patient, cancelled ones included."""
        await self.get(patient_id)
        appointments = await store_call("load appointments", self._store.load_appointments())
        return [a for a in appointments if a.patient_id == patient_id]


class DoctorRegistry:
    """Doctor registration and lookups."""

    def __init__(self, store: RecordStoreProtocol) -> None:
        self._store = store
        self._write_lock = asyncio.Lock()

    async def register(self, doctor: Doctor) -> Doctor:
        """Register a doctor; the id and the (name, specialty) pair must be unused."""
        logger.info("Registering doctor {}", doctor.id)

        async with self._write_lock:
            doctors = await store_call("load doctors", self._store.load_doctors())
            if any(d.id == doctor.id for d in doctors):
                logger.warning("Rejected doctor {}: id already exists", doctor.id)
                raise DuplicateRecordError(f"Doctor id '{doctor.id}' already exists")
            if any(d.name == doctor.name and d.specialty == doctor.specialty for d in doctors):
                logger.warning(
                    "Rejected doctor {}: name and specialty already registered", doctor.id
                )
                raise DuplicateRecordError(
                    "A doctor with that name and specialty already exists"
                )

            doctors.append(doctor)
            await store_call("save doctors", self._store.save_doctors(doctors))

        logger.info("Doctor registered: id={}", doctor.id)
        return doctor

    async def list_doctors(self) -> list[Doctor]:
        return await store_call("load doctors", self._store.load_doctors())

    async def get(self, doctor_id: str) -> Doctor:
        doctors = await store_call("load doctors", self._store.load_doctors())
        for doctor in doctors:
            if doctor.id == doctor_id:
                return doctor
        raise DoctorNotFoundError(doctor_id)

    async def by_specialty(self, specialty: str) -> list[Doctor]:
        wanted = specialty.strip().lower()
        doctors = await store_call("load doctors", self._store.load_doctors())
        return [d for d in doctors if d.specialty.lower() == wanted]
