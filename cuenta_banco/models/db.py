from __future__ import annotations
from datetime import datetime, UTC
from typing import Optional
from sqlmodel import Field, SQLModel

class StateMeta(SQLModel, table=True):
    __tablename__ = "state_meta"

    id: int = Field(default=1, primary_key=True)
    format_version: int
    saved_at: datetime = Field(default_factory=lambda: datetime.now(UTC))

class OwnerRecord(SQLModel, table=True):
    __tablename__ = "owner"

    id: int = Field(default=1, primary_key=True)
    name: str
    identifier: str
    age: int = Field(ge=0)

class MovementRecord(SQLModel, table=True):
    __tablename__ = "movement"

    id: Optional[int] = Field(default=None, primary_key=True)
    position: int = Field(index=True, unique=True)
    kind: str
    # Exact decimal text; SQLite has no lossless decimal column.
    amount: str
    # ISO 8601 text, kept exactly as the movement's own timestamp.
    ts: str
