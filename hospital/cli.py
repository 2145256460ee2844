from __future__ import annotations

import argparse
import logging
import sys
from dataclasses import dataclass
from typing import Any, TypeVar

import uvicorn
from pydantic import BaseModel
from pydantic import ValidationError as PayloadError
from sqlalchemy.orm import Session, sessionmaker

from . import db, settings
from .errors import HospitalError, ValidationError, field_errors
from .models import EmployeeStatus
from .schemas import DoctorDepartmentDTO, DoctorDTO, DoctorStatusDTO, PatientDTO
from .seed import seed_base
from .services import DoctorService, PatientService

logger = logging.getLogger(__name__)

T = TypeVar("T", bound=BaseModel)


@dataclass
class CliContext:
    session_factory: sessionmaker[Session]
    doctors: DoctorService
    patients: PatientService


def _payload(model: type[T], **fields: Any) -> T:
    """Build a DTO from camelCase fields, the same way the API receives them."""
    try:
        return model.model_validate(fields)
    except PayloadError as e:
        raise ValidationError(field_errors(e.errors())) from e


def _status(value: str | None) -> EmployeeStatus | None:
    return EmployeeStatus(value) if value is not None else None


def cmd_init(args: argparse.Namespace, ctx: CliContext) -> None:
    # main() has already created the tables
    print(f"Database initialised: {', '.join(sorted(db.Base.metadata.tables))}")


def cmd_seed(args: argparse.Namespace, ctx: CliContext) -> None:
    seed_base(ctx.session_factory)
    print("Reference data loaded.")


def cmd_list(args: argparse.Namespace, ctx: CliContext) -> None:
    if args.entity == "doctors":
        for d in ctx.doctors.list_doctors(status=_status(args.status), department=args.department):
            print(f"{d.employee_id} | {d.name} | {d.department} | {d.status.value}")
    elif args.entity == "patients":
        for p in ctx.patients.list_patients():
            print(f"{p.patient_id} | {p.name} | {p.date_of_birth.isoformat()} | {p.admitted_by.name}")


def cmd_add_doctor(args: argparse.Namespace, ctx: CliContext) -> None:
    d = ctx.doctors.create_doctor(
        _payload(
            DoctorDTO,
            employeeId=args.employee_id,
            name=args.name,
            department=args.department,
            status=args.status,
        )
    )
    print(f"Doctor created: {d.employee_id}")


def cmd_add_patient(args: argparse.Namespace, ctx: CliContext) -> None:
    p = ctx.patients.create_patient(
        _payload(PatientDTO, name=args.name, dateOfBirth=args.date_of_birth, doctorId=args.doctor_id)
    )
    print(f"Patient created: {p.patient_id}")


def cmd_set_status(args: argparse.Namespace, ctx: CliContext) -> None:
    ctx.doctors.update_status(args.employee_id, _payload(DoctorStatusDTO, status=args.status))
    print(f"Doctor {args.employee_id} is now {args.status}.")


def cmd_set_department(args: argparse.Namespace, ctx: CliContext) -> None:
    ctx.doctors.update_department(args.employee_id, _payload(DoctorDepartmentDTO, department=args.department))
    print(f"Doctor {args.employee_id} moved to {args.department}.")


def cmd_serve(args: argparse.Namespace, ctx: CliContext) -> None:
    uvicorn.run("hospital.api_main:app", host=args.host, port=args.port)


def build_parser() -> argparse.ArgumentParser:
    statuses = [s.value for s in EmployeeStatus]

    p = argparse.ArgumentParser(prog="hospital-cli", description="Hospital records CLI")
    sub = p.add_subparsers(required=True)

    p_init = sub.add_parser("init", help="Create the database tables (no data)")
    p_init.set_defaults(func=cmd_init)

    p_seed = sub.add_parser("seed", help="Load reference doctors and patients (idempotent)")
    p_seed.set_defaults(func=cmd_seed)

    p_list = sub.add_parser("list", help="List records")
    p_list.add_argument("entity", choices=["doctors", "patients"])
    p_list.add_argument("--status", choices=statuses, default=None, help="Doctors only")
    p_list.add_argument("--department", default=None, help="Doctors only")
    p_list.set_defaults(func=cmd_list)

    p_addd = sub.add_parser("add-doctor", help="Create a doctor")
    p_addd.add_argument("--employee-id", type=int, required=True)
    p_addd.add_argument("--name", required=True)
    p_addd.add_argument("--department", required=True)
    p_addd.add_argument("--status", choices=statuses, required=True)
    p_addd.set_defaults(func=cmd_add_doctor)

    p_addp = sub.add_parser("add-patient", help="Create a patient")
    p_addp.add_argument("--name", required=True)
    p_addp.add_argument("--date-of-birth", required=True, help="YYYY-MM-DD")
    p_addp.add_argument("--doctor-id", type=int, required=True)
    p_addp.set_defaults(func=cmd_add_patient)

    p_status = sub.add_parser("set-status", help="Change a doctor's duty status")
    p_status.add_argument("--employee-id", type=int, required=True)
    p_status.add_argument("--status", choices=statuses, required=True)
    p_status.set_defaults(func=cmd_set_status)

    p_dept = sub.add_parser("set-department", help="Move a doctor to another department")
    p_dept.add_argument("--employee-id", type=int, required=True)
    p_dept.add_argument("--department", required=True)
    p_dept.set_defaults(func=cmd_set_department)

    p_serve = sub.add_parser("serve", help="Run the HTTP API")
    p_serve.add_argument("--host", default="127.0.0.1")
    p_serve.add_argument("--port", type=int, default=8000)
    p_serve.set_defaults(func=cmd_serve)

    return p


def main(argv: list[str] | None = None, session_factory: sessionmaker[Session] | None = None) -> int:
    logging.basicConfig(level=settings.LOG_LEVEL, format=settings.LOG_FORMAT)
    parser = build_parser()
    args = parser.parse_args(argv)

    factory = session_factory or db.SessionLocal
    db.init_db(factory.kw["bind"])  # tables must exist before any command
    ctx = CliContext(factory, DoctorService(factory), PatientService(factory))

    try:
        args.func(args, ctx)
    except HospitalError as e:
        logger.warning("Command failed: %s", e)
        print(f"Error: {e}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
