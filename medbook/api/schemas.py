from pydantic import BaseModel, ConfigDict

from medbook.domain.calendar import parse_date, parse_time
from medbook.domain.exceptions import MissingFieldError
from medbook.domain.models import AppointmentRequest

_REQUIRED_APPOINTMENT_FIELDS = ("id", "patient_id", "doctor_id", "date", "time")


class AppointmentPayload(BaseModel):
    """Raw booking body. Every field is optional so absence is reported per field."""

    model_config = ConfigDict(extra="ignore")

    id: str | None = None
    patient_id: str | None = None
    doctor_id: str | None = None
    date: str | None = None
    time: str | None = None

    def to_request(self) -> AppointmentRequest:
        """Validate presence and formats into a typed ``AppointmentRequest``.

        Raises:
            MissingFieldError: If any required field is absent or blank.
            MalformedTimeError: If ``date`` or ``time`` cannot be parsed.
        """
        missing = [
            f for f in _REQUIRED_APPOINTMENT_FIELDS if not (getattr(self, f) or "").strip()
        ]
        if missing:
            raise MissingFieldError(missing)

        return AppointmentRequest(
            id=self.id,
            patient_id=self.patient_id,
            doctor_id=self.doctor_id,
            date=parse_date(self.date),
            time=parse_time(self.time),
        )


class ErrorResponse(BaseModel):
    error: str
    message: str
