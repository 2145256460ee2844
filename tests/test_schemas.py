from datetime import date

import pytest
from pydantic import ValidationError as PayloadError

from hospital.errors import FieldError, ValidationError, field_errors
from hospital.models import MAX_ID, EmployeeStatus
from hospital.schemas import DoctorDTO, DoctorStatusDTO, PatientDTO, PatientUpdateDTO, parse_date


def _fields(exc_info):
    return [e.field for e in field_errors(exc_info.value.errors())]


def test_parse_date_accepts_strict_iso_format():
    assert parse_date("1984-03-02") == date(1984, 3, 2)


@pytest.mark.parametrize(
    "raw",
    [
        "1996.04.29",
        "29-04-1996",
        "1996-4-29",
        "1996-02-30",
        "",
        None,
        "19960429",
        "١٩٨٤-03-02",
        " 1984-03-02 ",
        "1984-03-02\n",
    ],
)
def test_parse_date_rejects_other_formats(raw):
    with pytest.raises(ValueError):
        parse_date(raw)


def test_doctor_dto_reports_every_violated_field():
    with pytest.raises(PayloadError) as info:
        DoctorDTO.model_validate({"employeeId": None, "name": "", "department": " ", "status": None})

    assert _fields(info) == ["employeeId", "name", "department", "status"]


def test_doctor_dto_keeps_values_as_given():
    dto = DoctorDTO.model_validate({"employeeId": 123456, "name": " Pepe ", "department": "immunology ", "status": "OFF"})

    assert (dto.name, dto.department, dto.status) == (" Pepe ", "immunology ", EmployeeStatus.OFF)


@pytest.mark.parametrize("employee_id", [0, -5, MAX_ID + 1])
def test_doctor_dto_id_limits(employee_id):
    with pytest.raises(PayloadError) as info:
        DoctorDTO.model_validate({"employeeId": employee_id, "name": "Pepe", "department": "x", "status": "ON"})

    assert _fields(info) == ["employeeId"]


def test_doctor_dto_accepts_max_id():
    assert DoctorDTO.model_validate({"employeeId": MAX_ID, "name": "Pepe", "department": "x", "status": "ON"})


def test_status_dto_rejects_unknown_and_lowercase():
    for value in ("AWAY", "on", None):
        with pytest.raises(PayloadError):
            DoctorStatusDTO.model_validate({"status": value})


def test_patient_dto_missing_fields():
    with pytest.raises(PayloadError) as info:
        PatientDTO.model_validate({"name": " "})

    assert set(_fields(info)) == {"name", "dateOfBirth", "doctorId"}


def test_patient_dto_rejects_malformed_date():
    with pytest.raises(PayloadError) as info:
        PatientDTO.model_validate({"name": "Pepe", "dateOfBirth": "1996.04.29", "doctorId": 1})

    assert _fields(info) == ["dateOfBirth"]


def test_patient_update_dto_only_supplied_values():
    assert PatientUpdateDTO.model_validate({}).supplied() == set()
    dto = PatientUpdateDTO.model_validate({"name": "Pepe", "dateOfBirth": None, "doctorId": None})
    assert dto.supplied() == {"name"}


def test_patient_update_dto_validates_present_fields():
    with pytest.raises(PayloadError) as info:
        PatientUpdateDTO.model_validate({"dateOfBirth": "1996.04.29", "doctorId": 0})

    assert set(_fields(info)) == {"dateOfBirth", "doctorId"}


def test_field_errors_drop_request_location():
    raw = [{"loc": ("query", "status"), "msg": "bad"}, {"loc": ("body", "doctorId"), "msg": "worse"}]

    assert field_errors(raw) == [FieldError("status", "bad"), FieldError("doctorId", "worse")]


def test_validation_error_message_lists_fields():
    exc = ValidationError([FieldError("dateOfBirth", "must be a date in YYYY-MM-DD format")])

    assert exc.status_code == 400
    assert "dateOfBirth" in str(exc)
