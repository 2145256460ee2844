from datetime import date

from hospital.db import db_session
from hospital.models import Doctor, EmployeeStatus, Patient
from hospital.seed import seed_base
from hospital.stores import DoctorStore, PatientStore


def test_find_by_status(session_factory):
    with db_session(session_factory) as s:
        found = DoctorStore(s).find_by_status(EmployeeStatus.ON)

    assert [d.employee_id for d in found] == [166552, 564134]


def test_find_by_department(session_factory):
    with db_session(session_factory) as s:
        found = DoctorStore(s).find_by_department("cardiology")

    assert [d.name for d in found] == ["Alonso Flores", "German Ruiz"]


def test_find_by_department_and_status(session_factory):
    with db_session(session_factory) as s:
        store = DoctorStore(s)
        assert [d.employee_id for d in store.find_by_department_and_status("cardiology", EmployeeStatus.OFF)] == [
            761527
        ]
        assert store.find_by_department_and_status("pulmonary", EmployeeStatus.OFF) == []


def test_exists_and_get_out_of_range(session_factory):
    with db_session(session_factory) as s:
        store = DoctorStore(s)
        assert store.exists(356712)
        assert not store.exists(1)
        assert store.get(10**20) is None
        assert not store.exists(-(10**20))


def test_add_doctor(session_factory):
    with db_session(session_factory) as s:
        DoctorStore(s).add(Doctor(employee_id=1, name="Pepe", department="surgery", status=EmployeeStatus.ON))

    with db_session(session_factory) as s:
        assert DoctorStore(s).get(1).department == "surgery"


def test_find_by_date_of_birth_between(session_factory):
    with db_session(session_factory) as s:
        found = PatientStore(s).find_by_date_of_birth_between(date(1950, 1, 1), date(1985, 1, 1))

    assert [p.date_of_birth for p in found] == [date(1954, 6, 11), date(1972, 1, 12), date(1984, 3, 2)]


def test_find_by_admitted_by_department(session_factory):
    with db_session(session_factory) as s:
        found = PatientStore(s).find_by_admitted_by_department("immunology")
        doctors = {p.admitted_by.name for p in found}

    assert len(found) == 2
    assert doctors == {"Sam Ortega"}


def test_find_by_admitted_by_status(session_factory):
    with db_session(session_factory) as s:
        found = PatientStore(s).find_by_admitted_by_status(EmployeeStatus.ON_CALL)

    assert [p.name for p in found] == ["Julia Dusterdieck"]


def test_add_patient_generates_id(session_factory):
    with db_session(session_factory) as s:
        doctor = DoctorStore(s).get(166552)
        p = PatientStore(s).add(Patient(name="Pepe", date_of_birth=date(1996, 4, 29), admitted_by=doctor))
        new_id = p.patient_id

    assert new_id is not None
    with db_session(session_factory) as s:
        assert PatientStore(s).get(new_id).admitted_by_id == 166552


def test_delete_all(session_factory):
    with db_session(session_factory) as s:
        PatientStore(s).delete_all()
        DoctorStore(s).delete_all()

    with db_session(session_factory) as s:
        assert DoctorStore(s).find_all() == []
        assert PatientStore(s).find_all() == []


def test_seed_is_idempotent(session_factory):
    seed_base(session_factory)

    with db_session(session_factory) as s:
        assert len(DoctorStore(s).find_all()) == 6
        assert len(PatientStore(s).find_all()) == 5
