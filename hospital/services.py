from __future__ import annotations

import logging
from datetime import date

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session, sessionmaker

from .db import db_session
from .errors import ConflictError, FieldError, NotFoundError, ValidationError
from .models import Doctor, EmployeeStatus, Patient
from .schemas import (
    DoctorDepartmentDTO,
    DoctorDTO,
    DoctorOut,
    DoctorStatusDTO,
    PatientDTO,
    PatientOut,
    PatientUpdateDTO,
)
from .stores import DoctorStore, PatientStore

logger = logging.getLogger(__name__)


def _doctor_out(d: Doctor) -> DoctorOut:
    return DoctorOut.model_validate(d)


def _patient_out(p: Patient) -> PatientOut:
    return PatientOut.model_validate(p)


# =========================
# Doctors
# =========================
class DoctorService:
    def __init__(self, session_factory: sessionmaker[Session] | None = None) -> None:
        self._sessions = session_factory

    def list_doctors(self, status: EmployeeStatus | None = None, department: str | None = None) -> list[DoctorOut]:
        with db_session(self._sessions) as s:
            store = DoctorStore(s)
            if status is not None and department is not None:
                rows = store.find_by_department_and_status(department, status)
            elif status is not None:
                rows = store.find_by_status(status)
            elif department is not None:
                rows = store.find_by_department(department)
            else:
                rows = store.find_all()
            return [_doctor_out(d) for d in rows]

    def get_doctor(self, employee_id: int) -> DoctorOut:
        with db_session(self._sessions) as s:
            d = DoctorStore(s).get(employee_id)
            if d is None:
                raise NotFoundError(f"Doctor {employee_id} not found")
            return _doctor_out(d)

    def create_doctor(self, payload: DoctorDTO) -> DoctorOut:
        conflict = f"Doctor {payload.employee_id} already exists"

        with db_session(self._sessions) as s:
            store = DoctorStore(s)
            if store.exists(payload.employee_id):
                raise ConflictError(conflict)

            try:
                d = store.add(
                    Doctor(
                        employee_id=payload.employee_id,
                        name=payload.name,
                        department=payload.department,
                        status=payload.status,
                    )
                )
            except IntegrityError as e:
                # inserted by a concurrent request after the exists() check
                raise ConflictError(conflict) from e
            logger.info("Doctor %s created (%s)", d.employee_id, d.department)
            return _doctor_out(d)

    def update_status(self, employee_id: int, payload: DoctorStatusDTO) -> None:
        with db_session(self._sessions) as s:
            d = DoctorStore(s).get(employee_id)
            if d is None:
                raise NotFoundError(f"Doctor {employee_id} not found")
            d.status = payload.status
            logger.info("Doctor %s status -> %s", employee_id, d.status.value)

    def update_department(self, employee_id: int, payload: DoctorDepartmentDTO) -> None:
        with db_session(self._sessions) as s:
            d = DoctorStore(s).get(employee_id)
            if d is None:
                raise NotFoundError(f"Doctor {employee_id} not found")
            d.department = payload.department
            logger.info("Doctor %s department -> %r", employee_id, d.department)


# =========================
# Patients
# =========================
class PatientService:
    def __init__(self, session_factory: sessionmaker[Session] | None = None) -> None:
        self._sessions = session_factory

    def list_patients(self) -> list[PatientOut]:
        with db_session(self._sessions) as s:
            return [_patient_out(p) for p in PatientStore(s).find_all()]

    def get_patient(self, patient_id: int) -> PatientOut:
        with db_session(self._sessions) as s:
            p = PatientStore(s).get(patient_id)
            if p is None:
                raise NotFoundError(f"Patient {patient_id} not found")
            return _patient_out(p)

    def find_by_date_of_birth_range(self, start: date, end: date) -> list[PatientOut]:
        with db_session(self._sessions) as s:
            rows = PatientStore(s).find_by_date_of_birth_between(start, end)
            return [_patient_out(p) for p in rows]

    def find_by_doctor_department(self, department: str) -> list[PatientOut]:
        with db_session(self._sessions) as s:
            return [_patient_out(p) for p in PatientStore(s).find_by_admitted_by_department(department)]

    def find_by_off_duty_doctors(self) -> list[PatientOut]:
        with db_session(self._sessions) as s:
            return [_patient_out(p) for p in PatientStore(s).find_by_admitted_by_status(EmployeeStatus.OFF)]

    def create_patient(self, payload: PatientDTO) -> PatientOut:
        with db_session(self._sessions) as s:
            doctor = DoctorStore(s).get(payload.doctor_id)
            if doctor is None:
                raise NotFoundError(f"Doctor {payload.doctor_id} not found")

            p = PatientStore(s).add(
                Patient(name=payload.name, date_of_birth=payload.date_of_birth, admitted_by=doctor)
            )
            logger.info("Patient %s created, admitted by doctor %s", p.patient_id, doctor.employee_id)
            return _patient_out(p)

    def update_patient(self, patient_id: int, payload: PatientUpdateDTO) -> None:
        """
        Partial update: only the fields supplied with a value change.
        An unknown doctorId here is a bad request, not a missing resource.
        """
        supplied = payload.supplied()

        with db_session(self._sessions) as s:
            p = PatientStore(s).get(patient_id)
            if p is None:
                raise NotFoundError(f"Patient {patient_id} not found")

            doctor = None
            if "doctor_id" in supplied:
                doctor = DoctorStore(s).get(payload.doctor_id)
                if doctor is None:
                    raise ValidationError([FieldError("doctorId", f"doctor {payload.doctor_id} does not exist")])

            if "name" in supplied:
                p.name = payload.name
            if "date_of_birth" in supplied:
                p.date_of_birth = payload.date_of_birth
            if doctor is not None:
                p.admitted_by = doctor
            logger.info("Patient %s updated: %s", patient_id, ", ".join(sorted(supplied)) or "no fields")
