import datetime as dt

from fastapi import APIRouter, Depends, Query, Request

from medbook.api.schemas import AppointmentPayload
from medbook.domain.calendar import parse_date, parse_time
from medbook.domain.models import (
    Appointment,
    Doctor,
    DoctorUtilization,
    Patient,
    PatientRegistration,
    PatientUpdate,
    SpecialtyStats,
)
from medbook.records.registry import DoctorRegistry, PatientRegistry
from medbook.scheduling.engine import SchedulingEngine

patients_router = APIRouter(prefix="/patients", tags=["Patients"])
doctors_router = APIRouter(prefix="/doctors", tags=["Doctors"])
appointments_router = APIRouter(prefix="/appointments", tags=["Appointments"])
stats_router = APIRouter(prefix="/stats", tags=["Statistics"])


def get_engine(request: Request) -> SchedulingEngine:
    return request.app.state.engine


def get_patients(request: Request) -> PatientRegistry:
    return request.app.state.patients


def get_doctors(request: Request) -> DoctorRegistry:
    return request.app.state.doctors


# ------------------------------------------------------------------ patients


@patients_router.post("", status_code=201)
async def register_patient(
    registration: PatientRegistration,
    patients: PatientRegistry = Depends(get_patients),
) -> Patient:
    return await patients.register(registration)


@patients_router.get("")
async def list_patients(patients: PatientRegistry = Depends(get_patients)) -> list[Patient]:
    return await patients.list_patients()


@patients_router.get("/{patient_id}")
async def get_patient(
    patient_id: str, patients: PatientRegistry = Depends(get_patients)
) -> Patient:
    return await patients.get(patient_id)


@patients_router.put("/{patient_id}")
async def update_patient(
    patient_id: str,
    changes: PatientUpdate,
    patients: PatientRegistry = Depends(get_patients),
) -> Patient:
    return await patients.update(patient_id, changes)


@patients_router.get("/{patient_id}/history")
async def patient_history(
    patient_id: str, patients: PatientRegistry = Depends(get_patients)
) -> list[Appointment]:
    return await patients.history(patient_id)


# ------------------------------------------------------------------- doctors


@doctors_router.post("", status_code=201)
async def register_doctor(
    doctor: Doctor, doctors: DoctorRegistry = Depends(get_doctors)
) -> Doctor:
    return await doctors.register(doctor)


@doctors_router.get("")
async def list_doctors(doctors: DoctorRegistry = Depends(get_doctors)) -> list[Doctor]:
    return await doctors.list_doctors()


# Registered before "/{doctor_id}" so "available" is not read as an id.
@doctors_router.get("/available")
async def available_doctors(
    date: str | None = Query(default=None),
    time: str | None = Query(default=None),
    engine: SchedulingEngine = Depends(get_engine),
) -> list[Doctor]:
    return await engine.find_available_doctors(
        parse_date(date) if date else None,
        parse_time(time) if time else None,
    )


@doctors_router.get("/specialty/{specialty}")
async def doctors_by_specialty(
    specialty: str, doctors: DoctorRegistry = Depends(get_doctors)
) -> list[Doctor]:
    return await doctors.by_specialty(specialty)


@doctors_router.get("/{doctor_id}")
async def get_doctor(doctor_id: str, doctors: DoctorRegistry = Depends(get_doctors)) -> Doctor:
    return await doctors.get(doctor_id)


# -------------------------------------------------------------- appointments


@appointments_router.post("", status_code=201)
async def create_appointment(
    payload: AppointmentPayload, engine: SchedulingEngine = Depends(get_engine)
) -> Appointment:
    return await engine.create_appointment(payload.to_request())


@appointments_router.get("")
async def list_appointments(engine: SchedulingEngine = Depends(get_engine)) -> list[Appointment]:
    return await engine.list_appointments()


@appointments_router.get("/upcoming")
async def upcoming_appointments(
    hours: int | None = Query(default=None, gt=0),
    engine: SchedulingEngine = Depends(get_engine),
) -> list[Appointment]:
    horizon = dt.timedelta(hours=hours) if hours is not None else None
    return await engine.upcoming_appointments(horizon=horizon)


@appointments_router.get("/{appointment_id}")
async def get_appointment(
    appointment_id: str, engine: SchedulingEngine = Depends(get_engine)
) -> Appointment:
    return await engine.get_appointment(appointment_id)


@appointments_router.put("/{appointment_id}/cancel")
async def cancel_appointment(
    appointment_id: str, engine: SchedulingEngine = Depends(get_engine)
) -> Appointment:
    return await engine.cancel_appointment(appointment_id)


# ---------------------------------------------------------------- statistics


@stats_router.get("/doctors")
async def doctor_utilization(
    engine: SchedulingEngine = Depends(get_engine),
) -> list[DoctorUtilization]:
    return await engine.doctor_utilization_stats()


@stats_router.get("/specialties")
async def top_specialty(engine: SchedulingEngine = Depends(get_engine)) -> SpecialtyStats:
    return await engine.top_specialty()
