import asyncio
import json
from pathlib import Path
from typing import Any, TypeVar

from loguru import logger
from pydantic import BaseModel, TypeAdapter, ValidationError

from medbook.domain.exceptions import StoreIOError
from medbook.domain.models import Appointment, Doctor, Patient

M = TypeVar("M", bound=BaseModel)

PATIENTS_FILE = "patients.json"
DOCTORS_FILE = "doctors.json"
APPOINTMENTS_FILE = "appointments.json"


class JsonFileRecordStore:
    """Record store keeping each collection in its own JSON array file.

    A missing file reads as an empty collection. Saves overwrite the file
    in place; atomic replacement is not attempted.
    """

    def __init__(self, data_dir: Path | str) -> None:
        self._data_dir = Path(data_dir)

    @property
    def data_dir(self) -> Path:
        return self._data_dir

    async def load_patients(self) -> list[Patient]:
        return await self._load(PATIENTS_FILE, Patient)

    async def load_doctors(self) -> list[Doctor]:
        return await self._load(DOCTORS_FILE, Doctor)

    async def load_appointments(self) -> list[Appointment]:
        return await self._load(APPOINTMENTS_FILE, Appointment)

    async def save_patients(self, patients: list[Patient]) -> None:
        await self._save(PATIENTS_FILE, patients)

    async def save_doctors(self, doctors: list[Doctor]) -> None:
        await self._save(DOCTORS_FILE, doctors)

    async def save_appointments(self, appointments: list[Appointment]) -> None:
        await self._save(APPOINTMENTS_FILE, appointments)

    async def _load(self, filename: str, model: type[M]) -> list[M]:
        path = self._data_dir / filename
        try:
            raw = await asyncio.to_thread(self._read_text, path)
        except OSError as exc:
            raise StoreIOError(f"Could not read {filename}: {exc}") from exc

        if raw is None:
            logger.debug("{} does not exist yet; treating as empty", path)
            return []

        try:
            return TypeAdapter(list[model]).validate_json(raw)  # type: ignore[valid-type]
        except ValidationError as exc:
            raise StoreIOError(f"Malformed records in {filename}: {exc}") from exc

    async def _save(self, filename: str, records: list[M]) -> None:
        path = self._data_dir / filename
        payload: list[dict[str, Any]] = [r.model_dump(mode="json") for r in records]
        text = json.dumps(payload, indent=2, ensure_ascii=False)
        try:
            await asyncio.to_thread(self._write_text, path, text)
        except OSError as exc:
            raise StoreIOError(f"Could not write {filename}: {exc}") from exc
        logger.debug("Saved {} record(s) to {}", len(records), path)

    @staticmethod
    def _read_text(path: Path) -> str | None:
        if not path.exists():
            return None
        return path.read_text(encoding="utf-8")

    @staticmethod
    def _write_text(path: Path, text: str) -> None:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(text, encoding="utf-8")
