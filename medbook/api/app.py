import datetime as dt
from collections.abc import Callable

from fastapi import FastAPI
from loguru import logger

from medbook.api.errors import clinic_error_handler
from medbook.api.routes import (
    appointments_router,
    doctors_router,
    patients_router,
    stats_router,
)
from medbook.config import AppConfig
from medbook.domain.exceptions import ClinicError
from medbook.records.factory import build_record_store
from medbook.records.ports import RecordStoreProtocol
from medbook.records.registry import DoctorRegistry, PatientRegistry
from medbook.scheduling.engine import SchedulingEngine


def create_app(
    config: AppConfig | None = None,
    *,
    store: RecordStoreProtocol | None = None,
    clock: Callable[[], dt.datetime] = dt.datetime.now,
) -> FastAPI:
    """Build the HTTP API around one record store.

    ``store`` overrides the adapter selected in config; ``clock`` supplies
    "now" for the past-slot check, the upcoming window and registration dates.
    """
    config = config or AppConfig()
    store = store if store is not None else build_record_store(config)
    horizon = dt.timedelta(hours=config.scheduling.upcoming_horizon_hours)

    app = FastAPI(title="medbook", description="Medical appointment booking API")
    app.state.engine = SchedulingEngine(store, clock=clock, upcoming_horizon=horizon)
    app.state.patients = PatientRegistry(store, clock=clock)
    app.state.doctors = DoctorRegistry(store)

    app.add_exception_handler(ClinicError, clinic_error_handler)  # type: ignore[arg-type]
    for router in (patients_router, doctors_router, appointments_router, stats_router):
        app.include_router(router)

    logger.info("medbook API ready (upcoming window: {})", horizon)
    return app
