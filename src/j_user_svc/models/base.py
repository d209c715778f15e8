from typing import Iterator

from fastapi import Request
from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import DeclarativeBase, Session, sessionmaker
from sqlalchemy.pool import StaticPool


class Base(DeclarativeBase):
    """Base class for all ORM models."""
    pass


def create_db_engine(database_url: str) -> Engine:
    """
    Create the engine for ``database_url``.

    SQLite connections are shared with FastAPI's threadpool, so thread checks
    are disabled. An in-memory SQLite database lives on a single connection
    (StaticPool), otherwise every new connection would see an empty database.
    """
    kwargs = {}
    if database_url.startswith("sqlite"):
        kwargs["connect_args"] = {"check_same_thread": False}
        if database_url in ("sqlite://", "sqlite:///:memory:"):
            kwargs["poolclass"] = StaticPool
    return create_engine(database_url, **kwargs)


def create_session_factory(engine: Engine) -> sessionmaker:
    return sessionmaker(bind=engine, autoflush=False, expire_on_commit=False)


def get_db(request: Request) -> Iterator[Session]:
    """
    Provide a database session for one request.

    Closing the session rolls back anything left uncommitted, e.g. after a
    failed insert.
    """
    db = request.app.state.session_factory()
    try:
        yield db
    finally:
        db.close()
