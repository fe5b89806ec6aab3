from __future__ import annotations

from datetime import datetime
from decimal import ROUND_HALF_UP, Decimal, localcontext
from enum import Enum
from pathlib import Path
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

DEFAULT_OWNER_NAME = "Sin nombre"
DEFAULT_OWNER_IDENTIFIER = "00000000X"
TIMESTAMP_FORMAT = "%Y-%m-%d %H:%M:%S"
# Largest amount a single movement may carry.
MAX_AMOUNT = Decimal("1000000000000.00")

_CENTS = Decimal("0.01")


def format_amount(amount: Decimal) -> str:
    """Two decimals, rounding half up."""
    with localcontext() as ctx:
        ctx.prec = max(ctx.prec, amount.adjusted() + 3)
        return str(amount.quantize(_CENTS, rounding=ROUND_HALF_UP))


def format_timestamp(value: datetime) -> str:
    return value.strftime(TIMESTAMP_FORMAT)


def current_time() -> datetime:
    return datetime.now().replace(microsecond=0)


def _or_default(value: Any, default: str) -> Any:
    if value is None:
        return default
    if isinstance(value, str):
        return value.strip() or default
    return value


class MovementKind(str, Enum):
    DEPOSIT = "INGRESO"
    WITHDRAWAL = "RETIRADA"

    @property
    def label(self) -> str:
        return "Ingreso" if self is MovementKind.DEPOSIT else "Retirada"


class Owner(BaseModel):
    model_config = ConfigDict(frozen=True)

    name: str = Field(default=DEFAULT_OWNER_NAME, description="Account holder's full name")
    identifier: str = Field(default=DEFAULT_OWNER_IDENTIFIER, description="National ID (DNI/NIF)")
    age: int = Field(default=0, description="Age in years, never negative")

    @field_validator("name", mode="before")
    @classmethod
    def _default_name(cls, value: Any) -> Any:
        return _or_default(value, DEFAULT_OWNER_NAME)

    @field_validator("identifier", mode="before")
    @classmethod
    def _default_identifier(cls, value: Any) -> Any:
        return _or_default(value, DEFAULT_OWNER_IDENTIFIER)

    @field_validator("age")
    @classmethod
    def _clamp_age(cls, value: int) -> int:
        return max(0, value)

    def __str__(self) -> str:
        return f"Cliente{{nombre='{self.name}', dni='{self.identifier}', edad={self.age}}}"


class Movement(BaseModel):
    """A single deposit or withdrawal. Only the ledger creates these."""

    model_config = ConfigDict(frozen=True)

    kind: MovementKind
    amount: Decimal = Field(
        ..., gt=0, le=MAX_AMOUNT, description="Always positive; the kind carries the sign"
    )
    timestamp: datetime = Field(default_factory=current_time)

    @field_validator("timestamp")
    @classmethod
    def _whole_seconds(cls, value: datetime) -> datetime:
        return value.replace(microsecond=0)

    @property
    def signed_amount(self) -> Decimal:
        return self.amount if self.kind is MovementKind.DEPOSIT else -self.amount

    def __str__(self) -> str:
        return (
            f"[{format_timestamp(self.timestamp)}] {self.kind.label}"
            f" -> {format_amount(self.amount)} €"
        )


class OperationResult(BaseModel):
    """Outcome of a save or export: never raised, always returned."""

    model_config = ConfigDict(frozen=True)

    ok: bool
    path: Optional[Path] = None
    detail: Optional[str] = Field(default=None, description="Human-readable failure reason")

    @classmethod
    def success(cls, path: Path) -> "OperationResult":
        return cls(ok=True, path=path)

    @classmethod
    def failure(cls, detail: str, path: Optional[Path] = None) -> "OperationResult":
        return cls(ok=False, path=path, detail=detail)
