from __future__ import annotations

from datetime import date

from sqlalchemy import delete, select
from sqlalchemy.orm import Session

from .models import MAX_ID, Doctor, EmployeeStatus, Patient


def _in_range(key: int) -> bool:
    return -MAX_ID <= key <= MAX_ID


# =========================
# Doctors
# =========================
class DoctorStore:
    """Named queries over the doctors table, bound to one session."""

    def __init__(self, session: Session) -> None:
        self.s = session

    def get(self, employee_id: int) -> Doctor | None:
        if not _in_range(employee_id):
            return None
        return self.s.get(Doctor, employee_id)

    def exists(self, employee_id: int) -> bool:
        if not _in_range(employee_id):
            return False
        return self.s.execute(select(Doctor.employee_id).where(Doctor.employee_id == employee_id)).first() is not None

    def find_all(self) -> list[Doctor]:
        return list(self.s.scalars(select(Doctor).order_by(Doctor.employee_id)))

    def find_by_status(self, status: EmployeeStatus) -> list[Doctor]:
        return list(self.s.scalars(select(Doctor).where(Doctor.status == status).order_by(Doctor.employee_id)))

    def find_by_department(self, department: str) -> list[Doctor]:
        return list(
            self.s.scalars(select(Doctor).where(Doctor.department == department).order_by(Doctor.employee_id))
        )

    def find_by_department_and_status(self, department: str, status: EmployeeStatus) -> list[Doctor]:
        q = (
            select(Doctor)
            .where(Doctor.department == department, Doctor.status == status)
            .order_by(Doctor.employee_id)
        )
        return list(self.s.scalars(q))

    def add(self, doctor: Doctor) -> Doctor:
        self.s.add(doctor)
        self.s.flush()
        return doctor

    def delete_all(self) -> None:
        self.s.execute(delete(Doctor))


# =========================
# Patients
# =========================
class PatientStore:
    """Named queries over the patients table; the admitting doctor is always joined."""

    def __init__(self, session: Session) -> None:
        self.s = session

    def get(self, patient_id: int) -> Patient | None:
        if not _in_range(patient_id):
            return None
        return self.s.get(Patient, patient_id)

    def find_all(self) -> list[Patient]:
        return list(self.s.scalars(select(Patient).order_by(Patient.patient_id)))

    def find_by_date_of_birth_between(self, start: date, end: date) -> list[Patient]:
        q = (
            select(Patient)
            .where(Patient.date_of_birth.between(start, end))
            .order_by(Patient.date_of_birth, Patient.patient_id)
        )
        return list(self.s.scalars(q))

    def find_by_admitted_by_department(self, department: str) -> list[Patient]:
        q = (
            select(Patient)
            .join(Doctor, Doctor.employee_id == Patient.admitted_by_id)
            .where(Doctor.department == department)
            .order_by(Patient.patient_id)
        )
        return list(self.s.scalars(q))

    def find_by_admitted_by_status(self, status: EmployeeStatus) -> list[Patient]:
        q = (
            select(Patient)
            .join(Doctor, Doctor.employee_id == Patient.admitted_by_id)
            .where(Doctor.status == status)
            .order_by(Patient.patient_id)
        )
        return list(self.s.scalars(q))

    def add(self, patient: Patient) -> Patient:
        self.s.add(patient)
        self.s.flush()
        return patient

    def delete_all(self) -> None:
        self.s.execute(delete(Patient))
