"""Database setup for the user and blog tables."""

import re
import uuid
from typing import Generator

from fastapi import Request
from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, declarative_base, sessionmaker
from sqlalchemy.pool import StaticPool

Base = declarative_base()

OBJECT_ID_PATTERN = re.compile(r"^[0-9a-fA-F]{24}$")


def new_object_id() -> str:
    """Return a fresh 24 character hex identifier."""
    return uuid.uuid4().hex[:24]


def is_object_id(value: str) -> bool:
    return bool(OBJECT_ID_PATTERN.match(value or ""))


def make_engine(database_url: str) -> Engine:
    """Create an engine, sharing one connection for in-memory SQLite."""
    kwargs = {"future": True}
    if database_url.startswith("sqlite"):
        kwargs["connect_args"] = {"check_same_thread": False}
        if database_url in ("sqlite://", "sqlite:///:memory:"):
            kwargs["poolclass"] = StaticPool
    return create_engine(database_url, **kwargs)


def make_session_factory(engine: Engine) -> sessionmaker:
    return sessionmaker(bind=engine, autoflush=False, autocommit=False, future=True)


def init_db(engine: Engine) -> None:
    """Create database tables if they do not exist."""
    from . import models  # noqa: F401  registers the mappers on Base

    Base.metadata.create_all(bind=engine)


def drop_db(engine: Engine) -> None:
    from . import models  # noqa: F401

    Base.metadata.drop_all(bind=engine)


def get_db(request: Request) -> Generator[Session, None, None]:
    """Provide a transactional scope around a series of operations."""
    db = request.app.state.session_factory()
    try:
        yield db
    finally:
        db.close()
