from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import Any, AsyncIterator

from fastapi import APIRouter, Depends, FastAPI, Query, Request, Response, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from sqlalchemy import Engine

from . import db, settings
from .errors import HospitalError, ValidationError, field_errors
from .models import EmployeeStatus
from .schemas import (
    DoctorDepartmentDTO,
    DoctorDTO,
    DoctorOut,
    DoctorStatusDTO,
    IsoDate,
    PatientDTO,
    PatientOut,
    PatientUpdateDTO,
)
from .seed import seed_base
from .services import DoctorService, PatientService

logger = logging.getLogger(__name__)


def configure_logging() -> None:
    logging.basicConfig(level=settings.LOG_LEVEL, format=settings.LOG_FORMAT)


# Dependencies: services are built once in create_app and kept on app.state

def get_doctor_service(request: Request) -> DoctorService:
    return request.app.state.doctor_service


def get_patient_service(request: Request) -> PatientService:
    return request.app.state.patient_service


# =========================
# Doctors
# =========================
doctors_router = APIRouter(prefix="/doctors", tags=["Doctors"])


@doctors_router.get("", response_model=list[DoctorOut])
def list_doctors(
    status_filter: EmployeeStatus | None = Query(None, alias="status"),
    department: str | None = Query(None),
    service: DoctorService = Depends(get_doctor_service),
) -> list[DoctorOut]:
    return service.list_doctors(status=status_filter, department=department)


@doctors_router.get("/{employee_id}", response_model=DoctorOut)
def get_doctor(employee_id: int, service: DoctorService = Depends(get_doctor_service)) -> DoctorOut:
    return service.get_doctor(employee_id)


@doctors_router.post("", response_model=DoctorOut, status_code=status.HTTP_201_CREATED)
def create_doctor(payload: DoctorDTO, service: DoctorService = Depends(get_doctor_service)) -> DoctorOut:
    return service.create_doctor(payload)


@doctors_router.patch("/{employee_id}/status", status_code=status.HTTP_204_NO_CONTENT)
def update_doctor_status(
    employee_id: int, payload: DoctorStatusDTO, service: DoctorService = Depends(get_doctor_service)
) -> Response:
    service.update_status(employee_id, payload)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@doctors_router.patch("/{employee_id}/department", status_code=status.HTTP_204_NO_CONTENT)
def update_doctor_department(
    employee_id: int, payload: DoctorDepartmentDTO, service: DoctorService = Depends(get_doctor_service)
) -> Response:
    service.update_department(employee_id, payload)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


# =========================
# Patients
# =========================
patients_router = APIRouter(prefix="/patients", tags=["Patients"])

# static paths first, otherwise "/{patient_id}" swallows them


@patients_router.get("", response_model=list[PatientOut])
def list_patients(service: PatientService = Depends(get_patient_service)) -> list[PatientOut]:
    return service.list_patients()


@patients_router.get("/between-date-of-birth", response_model=list[PatientOut])
def patients_between_date_of_birth(
    start: IsoDate = Query(..., description="YYYY-MM-DD"),
    end: IsoDate = Query(..., description="YYYY-MM-DD"),
    service: PatientService = Depends(get_patient_service),
) -> list[PatientOut]:
    return service.find_by_date_of_birth_range(start, end)


@patients_router.get("/doctor-department/{department}", response_model=list[PatientOut])
def patients_by_doctor_department(
    department: str, service: PatientService = Depends(get_patient_service)
) -> list[PatientOut]:
    return service.find_by_doctor_department(department)


@patients_router.get("/off-doctor", response_model=list[PatientOut])
def patients_with_off_doctor(service: PatientService = Depends(get_patient_service)) -> list[PatientOut]:
    return service.find_by_off_duty_doctors()


@patients_router.get("/{patient_id}", response_model=PatientOut)
def get_patient(patient_id: int, service: PatientService = Depends(get_patient_service)) -> PatientOut:
    return service.get_patient(patient_id)


@patients_router.post("", response_model=PatientOut, status_code=status.HTTP_201_CREATED)
def create_patient(payload: PatientDTO, service: PatientService = Depends(get_patient_service)) -> PatientOut:
    return service.create_patient(payload)


@patients_router.put("/{patient_id}", status_code=status.HTTP_204_NO_CONTENT)
def update_patient(
    patient_id: int, payload: PatientUpdateDTO, service: PatientService = Depends(get_patient_service)
) -> Response:
    service.update_patient(patient_id, payload)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


# =========================
# Error handling
# =========================
def _error_body(status_code: int, message: str, details: list[dict[str, Any]] | None = None) -> dict[str, Any]:
    body: dict[str, Any] = {"error": True, "message": message, "status_code": status_code}
    if details is not None:
        body["details"] = details
    return body


async def hospital_error_handler(request: Request, exc: HospitalError) -> JSONResponse:
    details = None
    if isinstance(exc, ValidationError):
        details = [{"field": e.field, "message": e.message} for e in exc.errors]
    logger.warning("%s %s -> %s: %s", request.method, request.url.path, exc.status_code, exc)
    return JSONResponse(status_code=exc.status_code, content=_error_body(exc.status_code, exc.message, details))


async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Body, query and path validation failures, malformed JSON included, are reported as 400."""
    details = [{"field": e.field, "message": e.message} for e in field_errors(exc.errors())]
    logger.warning("Validation error on %s: %s", request.url.path, details)
    code = status.HTTP_400_BAD_REQUEST
    return JSONResponse(status_code=code, content=_error_body(code, "Validation error", details))


async def generic_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.error("Unhandled exception on %s %s: %s", request.method, request.url.path, exc, exc_info=True)
    code = status.HTTP_500_INTERNAL_SERVER_ERROR
    return JSONResponse(status_code=code, content=_error_body(code, "Internal server error"))


# =========================
# Application
# =========================
def create_app(engine: Engine | None = None, seed: bool | None = None) -> FastAPI:
    """
    Build the API around one database engine.
    The session factory is created here and handed to the services explicitly.
    """
    bind = engine if engine is not None else db.engine
    session_factory = db.make_session_factory(bind) if engine is not None else db.SessionLocal
    seed = settings.SEED_ON_STARTUP if seed is None else seed

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        db.init_db(bind)
        if seed:
            seed_base(session_factory)
            logger.info("Reference data loaded")
        yield

    app = FastAPI(title="Hospital Records API", version="1.0.0", lifespan=lifespan)
    app.state.doctor_service = DoctorService(session_factory)
    app.state.patient_service = PatientService(session_factory)

    app.add_exception_handler(HospitalError, hospital_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)
    app.add_exception_handler(Exception, generic_exception_handler)

    app.include_router(doctors_router)
    app.include_router(patients_router)

    @app.get("/health")
    def health() -> dict[str, str]:
        return {"status": "ok"}

    return app


configure_logging()
app = create_app()
