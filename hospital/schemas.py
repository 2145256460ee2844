from __future__ import annotations

import re
from datetime import date, datetime
from typing import Annotated, Any

from pydantic import BaseModel, BeforeValidator, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

from .models import MAX_ID, EmployeeStatus

DATE_FORMAT = "%Y-%m-%d"
_DATE_RE = re.compile(r"[0-9]{4}-[0-9]{2}-[0-9]{2}", re.ASCII)


def parse_date(value: Any) -> date:
    """Parse a strict ``YYYY-MM-DD`` date. Raises ValueError otherwise."""
    if isinstance(value, date):
        return value
    if not isinstance(value, str) or not _DATE_RE.fullmatch(value):
        raise ValueError("must be a date in YYYY-MM-DD format")
    try:
        return datetime.strptime(value, DATE_FORMAT).date()
    except ValueError:
        raise ValueError("must be a date in YYYY-MM-DD format") from None


def _not_blank(value: str | None) -> str | None:
    # checked only, stored as given
    if value is not None and not value.strip():
        raise ValueError("must not be blank")
    return value


# query parameters use the same date rule as the bodies
IsoDate = Annotated[date, BeforeValidator(parse_date)]


class CamelModel(BaseModel):
    """JSON uses camelCase keys, Python uses snake_case attributes."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, from_attributes=True)


# Input

class DoctorDTO(CamelModel):
    employee_id: int = Field(gt=0, le=MAX_ID)
    name: str
    department: str
    status: EmployeeStatus

    @field_validator("name", "department")
    @classmethod
    def non_blank(cls, v: str) -> str:
        return _not_blank(v)


class DoctorStatusDTO(CamelModel):
    status: EmployeeStatus


class DoctorDepartmentDTO(CamelModel):
    department: str

    @field_validator("department")
    @classmethod
    def non_blank(cls, v: str) -> str:
        return _not_blank(v)


class PatientDTO(CamelModel):
    name: str
    date_of_birth: date
    # any id: an unknown doctor is a 404, not a field error
    doctor_id: int

    @field_validator("name")
    @classmethod
    def non_blank(cls, v: str) -> str:
        return _not_blank(v)

    @field_validator("date_of_birth", mode="before")
    @classmethod
    def strict_date(cls, v: Any) -> date:
        return parse_date(v)


class PatientUpdateDTO(CamelModel):
    """Partial update. Fields left out, or sent as null, keep their stored value."""

    name: str | None = None
    date_of_birth: date | None = None
    doctor_id: int | None = Field(None, gt=0, le=MAX_ID)

    @field_validator("name")
    @classmethod
    def non_blank(cls, v: str | None) -> str | None:
        return _not_blank(v)

    @field_validator("date_of_birth", mode="before")
    @classmethod
    def strict_date(cls, v: Any) -> date | None:
        return None if v is None else parse_date(v)

    def supplied(self) -> set[str]:
        """Names of the fields that carry a value."""
        return {name for name in self.model_fields_set if getattr(self, name) is not None}


# Output

class DoctorOut(CamelModel):
    employee_id: int
    name: str
    department: str
    status: EmployeeStatus


class PatientOut(CamelModel):
    patient_id: int
    name: str
    date_of_birth: date
    admitted_by: DoctorOut
