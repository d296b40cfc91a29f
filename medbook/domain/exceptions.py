from enum import Enum


class ClinicError(Exception):
    """Base exception for all booking and registry errors.

    ``kind`` is a stable identifier the transport layer maps to a status code;
    ``reason`` is the human-readable message.
    """

    kind = "ClinicError"

    def __init__(self, reason: str) -> None:
        self.reason = reason
        super().__init__(reason)


class MissingFieldError(ClinicError):
    """Raised when required input fields are absent."""

    kind = "MissingFieldError"

    def __init__(self, fields: list[str]) -> None:
        self.fields = fields
        super().__init__(f"Missing required fields: {', '.join(fields)}")


class MalformedTimeError(ClinicError):
    """Raised when a date or time-of-day cannot be parsed."""

    kind = "MalformedTimeError"

    def __init__(self, value: object, expected: str) -> None:
        self.value = value
        super().__init__(f"Invalid value '{value}'. Expected {expected}.")


class PatientNotFoundError(ClinicError):
    kind = "PatientNotFoundError"

    def __init__(self, patient_id: str) -> None:
        self.patient_id = patient_id
        super().__init__(f"Patient '{patient_id}' does not exist")


class DoctorNotFoundError(ClinicError):
    kind = "DoctorNotFoundError"

    def __init__(self, doctor_id: str) -> None:
        self.doctor_id = doctor_id
        super().__init__(f"Doctor '{doctor_id}' does not exist")


class AppointmentNotFoundError(ClinicError):
    kind = "AppointmentNotFoundError"

    def __init__(self, appointment_id: str) -> None:
        self.appointment_id = appointment_id
        super().__init__(f"Appointment '{appointment_id}' not found")


class DuplicateRecordError(ClinicError):
    """Raised when a record would break an id or email uniqueness rule."""

    kind = "DuplicateRecordError"


class PastDateTimeError(ClinicError):
    """Raised when the requested slot is not strictly in the future."""

    kind = "PastDateTimeError"

    def __init__(self) -> None:
        super().__init__("Appointment date and time must be in the future")


class UnavailabilityReason(str, Enum):
    """Why a doctor cannot take a slot."""

    WRONG_WEEKDAY = "wrong_weekday"
    OUTSIDE_WINDOW = "outside_window"


class DoctorUnavailableError(ClinicError):
    """Raised when the slot falls outside the doctor's days or hours."""

    kind = "DoctorUnavailableError"

    def __init__(self, sub_reason: UnavailabilityReason, detail: str) -> None:
        self.sub_reason = sub_reason
        super().__init__(detail)


class SlotTakenError(ClinicError):
    """Raised when the doctor already has a scheduled appointment in the slot."""

    kind = "SlotTakenError"

    def __init__(self, doctor_id: str) -> None:
        self.doctor_id = doctor_id
        super().__init__("The doctor already has an appointment at that time")


class InvalidStateTransitionError(ClinicError):
    """Raised on an illegal status change, e.g. cancelling twice."""

    kind = "InvalidStateTransitionError"

    def __init__(self, appointment_id: str, status: str) -> None:
        self.appointment_id = appointment_id
        self.status = status
        super().__init__(
            f"Only scheduled appointments can be cancelled (appointment is {status})"
        )


class StoreIOError(ClinicError):
    """Raised when the record store cannot be read or written."""

    kind = "StoreIOError"
