from __future__ import annotations

import enum
from datetime import date

from sqlalchemy import Date, Enum, ForeignKey, Integer, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from .db import Base

# ids are stored in a 32-bit signed integer column
MAX_ID = 2**31 - 1


class EmployeeStatus(enum.Enum):
    ON = "ON"
    OFF = "OFF"
    ON_CALL = "ON_CALL"


class Doctor(Base):
    __tablename__ = "doctors"

    # assigned by the caller, never generated
    employee_id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=False)
    name: Mapped[str] = mapped_column(String(120), nullable=False)
    department: Mapped[str] = mapped_column(String(120), nullable=False, index=True)
    status: Mapped[EmployeeStatus] = mapped_column(Enum(EmployeeStatus), nullable=False, index=True)

    patients: Mapped[list["Patient"]] = relationship(back_populates="admitted_by")

    def __repr__(self) -> str:
        return f"Doctor({self.employee_id}, {self.name}, {self.department}, {self.status.value})"


class Patient(Base):
    __tablename__ = "patients"

    patient_id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(120), nullable=False)
    date_of_birth: Mapped[date] = mapped_column(Date, nullable=False, index=True)
    admitted_by_id: Mapped[int] = mapped_column(ForeignKey("doctors.employee_id"), nullable=False)

    admitted_by: Mapped["Doctor"] = relationship(back_populates="patients", lazy="joined")

    def __repr__(self) -> str:
        return f"Patient({self.patient_id}, {self.name}, {self.date_of_birth.isoformat()})"
