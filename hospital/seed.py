from __future__ import annotations

from datetime import date

from sqlalchemy import select
from sqlalchemy.orm import Session, sessionmaker

from .db import db_session
from .models import Doctor, EmployeeStatus, Patient

DOCTORS = [
    (356712, "Alonso Flores", "cardiology", EmployeeStatus.ON_CALL),
    (564134, "Sam Ortega", "immunology", EmployeeStatus.ON),
    (761527, "German Ruiz", "cardiology", EmployeeStatus.OFF),
    (166552, "Maria Lin", "pulmonary", EmployeeStatus.ON),
    (156545, "Paolo Rodriguez", "orthopaedic", EmployeeStatus.ON_CALL),
    (172456, "John Paul Armes", "psychiatric", EmployeeStatus.OFF),
]

# (name, date of birth, admitting doctor id)
PATIENTS = [
    ("Jaime Jordan", date(1984, 3, 2), 564134),
    ("Marian Garcia", date(1972, 1, 12), 564134),
    ("Julia Dusterdieck", date(1954, 6, 11), 356712),
    ("Steve McDuck", date(1931, 11, 10), 761527),
    ("Marian Garcia", date(1999, 2, 15), 172456),
]


def seed_base(session_factory: sessionmaker[Session] | None = None) -> None:
    """
    Load the reference staff and patients (idempotent):
    - doctors are matched by employee id
    - patients by name + date of birth
    """
    with db_session(session_factory) as s:
        for employee_id, name, department, status in DOCTORS:
            if s.get(Doctor, employee_id) is None:
                s.add(Doctor(employee_id=employee_id, name=name, department=department, status=status))

        s.flush()

        for name, born, doctor_id in PATIENTS:
            exists = s.execute(
                select(Patient.patient_id).where(Patient.name == name, Patient.date_of_birth == born)
            ).first()
            if exists is None:
                s.add(Patient(name=name, date_of_birth=born, admitted_by_id=doctor_id))
