from __future__ import annotations

import sqlite3
from collections.abc import Generator
from contextlib import contextmanager
from pathlib import Path

from sqlalchemy.engine import Engine
from sqlalchemy.pool import NullPool
from sqlmodel import Session, SQLModel, create_engine

from ..models import db as _db_models  # noqa: F401 - ensure models register with metadata


def create_engine_for_path(path: Path, *, read_only: bool = False) -> Engine:
    """Engine bound to a single SQLite state file.

    Connections are not pooled so that disposing the engine releases the file.
    Read-only engines never create the file when it is missing.
    """
    uri = Path(path).resolve().as_uri()
    if read_only:
        uri += "?mode=ro"

    def _connect() -> sqlite3.Connection:
        return sqlite3.connect(uri, uri=True)

    return create_engine("sqlite://", creator=_connect, poolclass=NullPool, echo=False)


def init_db(engine: Engine) -> None:
    SQLModel.metadata.create_all(engine)


@contextmanager
def state_session(path: Path, *, read_only: bool = False) -> Generator[Session, None, None]:
    engine = create_engine_for_path(path, read_only=read_only)
    try:
        if not read_only:
            init_db(engine)
        with Session(engine) as session:
            yield session
    finally:
        engine.dispose()
