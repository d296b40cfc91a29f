import datetime as dt

import pytest

from medbook.domain.exceptions import (
    DoctorNotFoundError,
    DuplicateRecordError,
    PatientNotFoundError,
    StoreIOError,
)
from medbook.domain.models import (
    Appointment,
    AppointmentStatus,
    PatientRegistration,
    PatientUpdate,
)
from medbook.records.adapters.memory import InMemoryRecordStore
from medbook.records.registry import DoctorRegistry, PatientRegistry
from tests.factories import MONDAY, NOW, fixed_clock, make_doctor

# Fixtures (store, logged_warnings) provided by tests/conftest.py


@pytest.fixture
def patients(store: InMemoryRecordStore) -> PatientRegistry:
    return PatientRegistry(store, clock=fixed_clock)


@pytest.fixture
def doctors(store: InMemoryRecordStore) -> DoctorRegistry:
    return DoctorRegistry(store)


def _registration(patient_id: str = "p2", email: str = "luis@example.com") -> PatientRegistration:
    return PatientRegistration(id=patient_id, name="Luis", age=41, phone="555-0102", email=email)


class TestRegisterPatient:
    @pytest.mark.asyncio
    async def test_sets_registration_date_and_persists(
        self, patients: PatientRegistry, store: InMemoryRecordStore
    ) -> None:
        patient = await patients.register(_registration())

        assert patient.registration_date == NOW.date()
        assert [p.id for p in store.patients] == ["p1", "p2"]

    @pytest.mark.asyncio
    async def test_rejects_duplicate_id(self, patients: PatientRegistry) -> None:
        with pytest.raises(DuplicateRecordError, match="id 'p1'"):
            await patients.register(_registration(patient_id="p1"))

    @pytest.mark.asyncio
    async def test_rejects_duplicate_email(
        self, patients: PatientRegistry, logged_warnings: list[str]
    ) -> None:
        with pytest.raises(DuplicateRecordError, match="Email"):
            await patients.register(_registration(email="ana@example.com"))

        assert logged_warnings == ["Rejected patient p2: email already registered"]


class TestPatientLookups:
    @pytest.mark.asyncio
    async def test_get(self, patients: PatientRegistry) -> None:
        assert (await patients.get("p1")).name == "Ana Torres"

    @pytest.mark.asyncio
    async def test_get_unknown(self, patients: PatientRegistry) -> None:
        with pytest.raises(PatientNotFoundError):
            await patients.get("ghost")

    @pytest.mark.asyncio
    async def test_list(self, patients: PatientRegistry) -> None:
        assert [p.id for p in await patients.list_patients()] == ["p1"]

    @pytest.mark.asyncio
    async def test_history_includes_every_status(
        self, patients: PatientRegistry, store: InMemoryRecordStore
    ) -> None:
        store.appointments = [
            Appointment(
                id="a1", patient_id="p1", doctor_id="d1", date=MONDAY, time=dt.time(9, 0)
            ),
            Appointment(
                id="a2",
                patient_id="p1",
                doctor_id="d1",
                date=MONDAY,
                time=dt.time(10, 0),
                status=AppointmentStatus.CANCELLED,
            ),
            Appointment(
                id="a3", patient_id="p9", doctor_id="d1", date=MONDAY, time=dt.time(11, 0)
            ),
        ]

        history = await patients.history("p1")

        assert [a.id for a in history] == ["a1", "a2"]

    @pytest.mark.asyncio
    async def test_history_of_unknown_patient(self, patients: PatientRegistry) -> None:
        with pytest.raises(PatientNotFoundError):
            await patients.history("ghost")


class TestUpdatePatient:
    @pytest.mark.asyncio
    async def test_applies_only_given_fields(
        self, patients: PatientRegistry, store: InMemoryRecordStore
    ) -> None:
        updated = await patients.update("p1", PatientUpdate(phone="555-9999"))

        assert updated.phone == "555-9999"
        assert updated.name == "Ana Torres"
        assert store.patients[0] == updated

    @pytest.mark.asyncio
    async def test_ignores_id_changes(self, patients: PatientRegistry) -> None:
        changes = PatientUpdate.model_validate({"id": "other", "age": 35})

        updated = await patients.update("p1", changes)

        assert updated.id == "p1"
        assert updated.age == 35

    @pytest.mark.asyncio
    async def test_rejects_email_used_by_another_patient(
        self, patients: PatientRegistry, logged_warnings: list[str]
    ) -> None:
        await patients.register(_registration())

        with pytest.raises(DuplicateRecordError):
            await patients.update("p1", PatientUpdate(email="luis@example.com"))

        assert logged_warnings == ["Rejected update of patient p1: email already registered"]

    @pytest.mark.asyncio
    async def test_keeping_own_email_is_allowed(self, patients: PatientRegistry) -> None:
        updated = await patients.update("p1", PatientUpdate(email="ana@example.com"))

        assert updated.email == "ana@example.com"

    @pytest.mark.asyncio
    async def test_unknown_patient(self, patients: PatientRegistry) -> None:
        with pytest.raises(PatientNotFoundError):
            await patients.update("ghost", PatientUpdate(age=20))


class TestDoctorRegistry:
    @pytest.mark.asyncio
    async def test_register(self, doctors: DoctorRegistry, store: InMemoryRecordStore) -> None:
        doctor = make_doctor("d2", name="Lisa Cuddy", specialty="Endocrinology")

        await doctors.register(doctor)

        assert store.doctors[-1] == doctor

    @pytest.mark.asyncio
    async def test_rejects_duplicate_id(self, doctors: DoctorRegistry) -> None:
        with pytest.raises(DuplicateRecordError, match="id 'd1'"):
            await doctors.register(make_doctor("d1", name="Someone Else"))

    @pytest.mark.asyncio
    async def test_rejects_duplicate_name_and_specialty(
        self, doctors: DoctorRegistry, logged_warnings: list[str]
    ) -> None:
        with pytest.raises(DuplicateRecordError, match="name and specialty"):
            await doctors.register(make_doctor("d2"))

        assert logged_warnings == ["Rejected doctor d2: name and specialty already registered"]

    @pytest.mark.asyncio
    async def test_get_unknown(self, doctors: DoctorRegistry) -> None:
        with pytest.raises(DoctorNotFoundError):
            await doctors.get("ghost")

    @pytest.mark.asyncio
    async def test_by_specialty_is_case_insensitive(
        self, doctors: DoctorRegistry, store: InMemoryRecordStore
    ) -> None:
        store.doctors.append(make_doctor("d2", name="Lisa Cuddy", specialty="Endocrinology"))

        found = await doctors.by_specialty("diagnostics")

        assert [d.id for d in found] == ["d1"]

    @pytest.mark.asyncio
    async def test_wraps_store_failure(
        self, doctors: DoctorRegistry, store: InMemoryRecordStore
    ) -> None:
        store.load_error = RuntimeError("boom")

        with pytest.raises(StoreIOError, match="load doctors"):
            await doctors.list_doctors()
