from __future__ import annotations

from contextlib import contextmanager
from typing import Iterator

from sqlalchemy import Engine, create_engine
from sqlalchemy.orm import DeclarativeBase, Session, sessionmaker

from .settings import DATABASE_URL, DB_ECHO


def make_engine(url: str = DATABASE_URL, **kwargs) -> Engine:
    kwargs.setdefault("echo", DB_ECHO)  # HOSPITAL_DB_ECHO=true to see the queries
    return create_engine(url, future=True, **kwargs)


def make_session_factory(bind: Engine) -> sessionmaker[Session]:
    return sessionmaker(
        bind=bind,
        autoflush=False,
        autocommit=False,
        future=True,
        expire_on_commit=False,
    )


engine = make_engine()
SessionLocal = make_session_factory(engine)


class Base(DeclarativeBase):
    """ORM base for every model."""
    pass


def init_db(bind: Engine | None = None) -> None:
    """Create the tables if they do not exist."""
    # models must be imported so their tables are registered on the metadata
    from . import models  # noqa: F401

    Base.metadata.create_all(bind=bind or engine)


@contextmanager
def db_session(factory: sessionmaker[Session] | None = None) -> Iterator[Session]:
    """
    Unit of work around one session:
    - commit if everything went fine
    - rollback on exceptions
    - always close
    """
    session: Session = (factory or SessionLocal)()
    try:
        yield session
        session.commit()
    except Exception:
        session.rollback()
        raise
    finally:
        session.close()
