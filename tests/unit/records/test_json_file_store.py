import datetime as dt
import json
from pathlib import Path

import pytest

from medbook.domain.exceptions import StoreIOError
from medbook.domain.models import Appointment, AppointmentStatus
from medbook.records.adapters.json_file import JsonFileRecordStore
from tests.factories import MONDAY, make_doctor, make_patient


@pytest.fixture
def json_store(tmp_path: Path) -> JsonFileRecordStore:
    return JsonFileRecordStore(tmp_path / "data")


class TestLoad:
    @pytest.mark.asyncio
    async def test_missing_files_read_as_empty(self, json_store: JsonFileRecordStore) -> None:
        assert await json_store.load_patients() == []
        assert await json_store.load_doctors() == []
        assert await json_store.load_appointments() == []

    @pytest.mark.asyncio
    async def test_reads_hand_written_records(self, json_store: JsonFileRecordStore) -> None:
        json_store.data_dir.mkdir(parents=True)
        (json_store.data_dir / "doctors.json").write_text(
            json.dumps(
                [
                    {
                        "id": "d1",
                        "name": "Gregory House",
                        "specialty": "Diagnostics",
                        "available_days": ["monday ", "Friday"],
                        "window_start": "09:00",
                        "window_end": "24:00",
                    }
                ]
            ),
            encoding="utf-8",
        )

        doctors = await json_store.load_doctors()

        assert len(doctors) == 1
        assert doctors[0].window_end == dt.time.max

    @pytest.mark.asyncio
    async def test_invalid_json_raises_store_io_error(
        self, json_store: JsonFileRecordStore
    ) -> None:
        json_store.data_dir.mkdir(parents=True)
        (json_store.data_dir / "appointments.json").write_text("[{", encoding="utf-8")

        with pytest.raises(StoreIOError, match="appointments.json"):
            await json_store.load_appointments()

    @pytest.mark.asyncio
    async def test_invalid_record_raises_store_io_error(
        self, json_store: JsonFileRecordStore
    ) -> None:
        json_store.data_dir.mkdir(parents=True)
        (json_store.data_dir / "patients.json").write_text(
            json.dumps([{"id": "p1", "name": "Ana"}]), encoding="utf-8"
        )

        with pytest.raises(StoreIOError, match="Malformed records in patients.json"):
            await json_store.load_patients()

    @pytest.mark.asyncio
    async def test_unreadable_path_raises_store_io_error(self, tmp_path: Path) -> None:
        (tmp_path / "appointments.json").mkdir()
        store = JsonFileRecordStore(tmp_path)

        with pytest.raises(StoreIOError, match="Could not read appointments.json"):
            await store.load_appointments()


class TestSave:
    @pytest.mark.asyncio
    async def test_creates_directory_and_writes_pretty_json(
        self, json_store: JsonFileRecordStore
    ) -> None:
        appt = Appointment(
            id="a1", patient_id="p1", doctor_id="d1", date=MONDAY, time=dt.time(11, 30)
        )

        await json_store.save_appointments([appt])

        text = (json_store.data_dir / "appointments.json").read_text(encoding="utf-8")
        assert json.loads(text) == [
            {
                "id": "a1",
                "patient_id": "p1",
                "doctor_id": "d1",
                "date": "2026-03-02",
                "time": "11:30",
                "status": "scheduled",
            }
        ]
        assert text.startswith("[\n  {")

    @pytest.mark.asyncio
    async def test_save_replaces_whole_collection(self, json_store: JsonFileRecordStore) -> None:
        await json_store.save_patients([make_patient("p1"), make_patient("p2", "b@x.org")])
        await json_store.save_patients([make_patient("p3", "c@x.org")])

        assert [p.id for p in await json_store.load_patients()] == ["p3"]

    @pytest.mark.asyncio
    async def test_reload_preserves_records(self, json_store: JsonFileRecordStore) -> None:
        doctor = make_doctor(end="24:00")
        cancelled = Appointment(
            id="a1",
            patient_id="p1",
            doctor_id="d1",
            date=MONDAY,
            time=dt.time(9, 0),
            status=AppointmentStatus.CANCELLED,
        )

        await json_store.save_doctors([doctor])
        await json_store.save_appointments([cancelled])

        assert await json_store.load_doctors() == [doctor]
        assert await json_store.load_appointments() == [cancelled]

    @pytest.mark.asyncio
    async def test_unwritable_path_raises_store_io_error(self, tmp_path: Path) -> None:
        blocker = tmp_path / "blocker"
        blocker.write_text("not a directory", encoding="utf-8")
        store = JsonFileRecordStore(blocker / "data")

        with pytest.raises(StoreIOError, match="Could not write doctors.json"):
            await store.save_doctors([make_doctor()])
