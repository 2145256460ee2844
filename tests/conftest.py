"""
Shared pytest fixtures.

Every test gets a fresh in-memory SQLite database loaded with the six
reference doctors and five reference patients from ``hospital.seed``.
"""

import os
from typing import Generator

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import Engine, create_engine, select
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

os.environ.setdefault("HOSPITAL_DATABASE_URL", "sqlite://")

from hospital.api_main import create_app  # noqa: E402
from hospital.db import Base, db_session, init_db, make_session_factory  # noqa: E402
from hospital.models import Patient  # noqa: E402
from hospital.seed import seed_base  # noqa: E402


@pytest.fixture
def engine() -> Generator[Engine, None, None]:
    """In-memory database shared by every connection of the test."""
    eng = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    init_db(eng)
    yield eng
    Base.metadata.drop_all(bind=eng)
    eng.dispose()


@pytest.fixture
def session_factory(engine: Engine) -> sessionmaker[Session]:
    factory = make_session_factory(engine)
    seed_base(factory)
    return factory


@pytest.fixture
def client(engine: Engine, session_factory: sessionmaker[Session]) -> Generator[TestClient, None, None]:
    app = create_app(engine, seed=False)
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def patient_ids(session_factory: sessionmaker[Session]) -> dict[str, int]:
    """Patient name + year of birth -> generated id (two reference patients share a name)."""
    with db_session(session_factory) as s:
        rows = s.scalars(select(Patient)).all()
        return {f"{p.name} {p.date_of_birth.year}": p.patient_id for p in rows}
