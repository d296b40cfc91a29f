import datetime as dt
from enum import Enum
from typing import Any

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    field_serializer,
    field_validator,
    model_validator,
)

from medbook.domain.calendar import Weekday, format_time, parse_date, parse_time
from medbook.domain.exceptions import MalformedTimeError


class AppointmentStatus(str, Enum):
    """Possible states of an appointment."""

    SCHEDULED = "scheduled"
    CANCELLED = "cancelled"


def _as_date(value: Any, *, allow_timestamp: bool = False) -> dt.date:
    try:
        return parse_date(value, allow_timestamp=allow_timestamp)
    except MalformedTimeError as exc:
        raise ValueError(exc.reason) from exc


def _as_time(value: Any, *, allow_end_of_day: bool = False) -> dt.time:
    try:
        return parse_time(value, allow_end_of_day=allow_end_of_day)
    except MalformedTimeError as exc:
        raise ValueError(exc.reason) from exc


class Doctor(BaseModel):
    """A doctor and the weekly window in which they can be booked."""

    model_config = ConfigDict(frozen=True)

    id: str = Field(min_length=1)
    name: str = Field(min_length=1)
    specialty: str = Field(min_length=1)
    available_days: list[Weekday] = Field(min_length=1)
    window_start: dt.time
    window_end: dt.time

    @field_validator("available_days", mode="before")
    @classmethod
    def normalize_days(cls, value: Any) -> Any:
        if not isinstance(value, list):
            return value
        days: list[Weekday] = []
        for label in value:
            day = Weekday.parse(label) if isinstance(label, str) else label
            if day not in days:
                days.append(day)
        return days

    @field_validator("window_start", mode="before")
    @classmethod
    def coerce_window_start(cls, value: Any) -> dt.time:
        return _as_time(value)

    @field_validator("window_end", mode="before")
    @classmethod
    def coerce_window_end(cls, value: Any) -> dt.time:
        return _as_time(value, allow_end_of_day=True)

    @model_validator(mode="after")
    def check_window(self) -> "Doctor":
        if self.window_start >= self.window_end:
            raise ValueError("window_start must be earlier than window_end")
        return self

    @field_serializer("window_start", "window_end")
    def serialize_window(self, value: dt.time) -> str:
        return format_time(value)


class PatientRegistration(BaseModel):
    """The fields a caller supplies to register a patient."""

    model_config = ConfigDict(frozen=True)

    id: str = Field(min_length=1)
    name: str = Field(min_length=1)
    age: int = Field(gt=0)
    phone: str = Field(min_length=1)
    email: str = Field(min_length=1)


class Patient(PatientRegistration):
    """A registered patient."""

    registration_date: dt.date


class PatientUpdate(BaseModel):
    """Partial patient update. Unknown keys, including ``id``, are ignored."""

    model_config = ConfigDict(frozen=True, extra="ignore")

    name: str | None = Field(default=None, min_length=1)
    age: int | None = Field(default=None, gt=0)
    phone: str | None = Field(default=None, min_length=1)
    email: str | None = Field(default=None, min_length=1)


class AppointmentRequest(BaseModel):
    """A fully-typed request to book a slot."""

    model_config = ConfigDict(frozen=True)

    id: str
    patient_id: str
    doctor_id: str
    date: dt.date
    time: dt.time

    @field_validator("date", mode="before")
    @classmethod
    def coerce_date(cls, value: Any) -> dt.date:
        return _as_date(value)

    @field_validator("time", mode="before")
    @classmethod
    def coerce_time(cls, value: Any) -> dt.time:
        return _as_time(value)

    @property
    def starts_at(self) -> dt.datetime:
        return dt.datetime.combine(self.date, self.time)


class Appointment(BaseModel):
    """A booked appointment."""

    model_config = ConfigDict(frozen=True)

    id: str
    patient_id: str
    doctor_id: str
    date: dt.date
    time: dt.time
    status: AppointmentStatus = AppointmentStatus.SCHEDULED

    @field_validator("date", mode="before")
    @classmethod
    def coerce_date(cls, value: Any) -> dt.date:
        return _as_date(value, allow_timestamp=True)

    @field_validator("time", mode="before")
    @classmethod
    def coerce_time(cls, value: Any) -> dt.time:
        return _as_time(value)

    @field_serializer("time")
    def serialize_time(self, value: dt.time) -> str:
        return format_time(value)

    @property
    def starts_at(self) -> dt.datetime:
        return dt.datetime.combine(self.date, self.time)

    @property
    def is_scheduled(self) -> bool:
        return self.status == AppointmentStatus.SCHEDULED


class DoctorUtilization(BaseModel):
    """Number of scheduled appointments held by one doctor."""

    model_config = ConfigDict(frozen=True)

    doctor: Doctor
    appointments: int


class SpecialtyStats(BaseModel):
    """The most requested specialty, or ``specialty=None`` when nothing is booked."""

    model_config = ConfigDict(frozen=True)

    specialty: str | None = None
    appointments: int = 0
