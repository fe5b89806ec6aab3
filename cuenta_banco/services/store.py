from __future__ import annotations

import logging
import os
import sqlite3
from contextlib import suppress
from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal, InvalidOperation
from enum import Enum
from pathlib import Path
from typing import Optional, Union

from pydantic import ValidationError
from sqlalchemy.exc import SQLAlchemyError

from ..core.db import state_session
from ..core.errors import CorruptStateError
from ..models import Movement, MovementKind, OperationResult, Owner
from .ledger import Ledger
from .repository import LedgerRepository


logger = logging.getLogger(__name__)

FORMAT_VERSION = 1

PathLike = Union[str, os.PathLike]


class LoadStatus(str, Enum):
    LOADED = "loaded"
    NOT_FOUND = "not_found"
    CORRUPT = "corrupt"


@dataclass(frozen=True)
class LoadResult:
    status: LoadStatus
    ledger: Optional[Ledger] = None
    detail: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.status is LoadStatus.LOADED


class LedgerStore:
    """Saves and loads one ledger to a single SQLite state file.

    ``save`` writes a complete new file next to the target and swaps it in,
    so a failed save never leaves a half-written state behind. ``load`` tells
    a missing file apart from one that cannot be read back.
    """

    def __init__(self, format_version: int = FORMAT_VERSION) -> None:
        self.format_version = format_version

    # ------------------------------------------------------------------
    # Save
    # ------------------------------------------------------------------
    def save(self, ledger: Ledger, path: PathLike) -> OperationResult:
        target = Path(path)
        staging = target.with_name(f"{target.name}.tmp")
        try:
            if staging.exists():
                staging.unlink()
            with state_session(staging) as session:
                repository = LedgerRepository(session)
                repository.add_meta(format_version=self.format_version)
                repository.add_owner(ledger.owner)
                repository.add_movements(ledger.movements())
                session.commit()
            os.replace(staging, target)
        except (OSError, SQLAlchemyError, sqlite3.Error) as exc:
            with suppress(OSError):
                staging.unlink()
            logger.warning("store.save.failed", extra={"path": str(target), "error": str(exc)})
            return OperationResult.failure(f"no se pudo escribir {target}: {exc}", path=target)

        logger.info(
            "store.saved",
            extra={"path": str(target), "movements": len(ledger.movements())},
        )
        return OperationResult.success(target)

    # ------------------------------------------------------------------
    # Load
    # ------------------------------------------------------------------
    def load(self, path: PathLike) -> LoadResult:
        target = Path(path)
        if not target.exists():
            logger.info("store.load.not_found", extra={"path": str(target)})
            return LoadResult(LoadStatus.NOT_FOUND, detail=f"{target} no existe")

        try:
            ledger = self._read(target)
        except (
            CorruptStateError,
            SQLAlchemyError,
            sqlite3.Error,
            ValidationError,
            InvalidOperation,
            ValueError,
            OSError,
        ) as exc:
            logger.warning("store.load.corrupt", extra={"path": str(target), "error": str(exc)})
            return LoadResult(LoadStatus.CORRUPT, detail=f"{target} no es legible: {exc}")

        logger.info(
            "store.loaded",
            extra={"path": str(target), "movements": len(ledger.movements())},
        )
        return LoadResult(LoadStatus.LOADED, ledger=ledger)

    def _read(self, path: Path) -> Ledger:
        if path.is_dir():
            raise CorruptStateError(f"{path} is a directory")

        with state_session(path, read_only=True) as session:
            repository = LedgerRepository(session)

            meta = repository.get_meta()
            if meta is None:
                raise CorruptStateError("missing state metadata")
            if meta.format_version != self.format_version:
                raise CorruptStateError(
                    f"unsupported format version {meta.format_version}"
                    f" (expected {self.format_version})"
                )

            record = repository.get_owner()
            if record is None:
                raise CorruptStateError("missing owner record")
            owner = Owner(name=record.name, identifier=record.identifier, age=record.age)

            movements = [
                Movement(
                    kind=MovementKind(row.kind),
                    amount=Decimal(row.amount),
                    timestamp=datetime.fromisoformat(row.ts),
                )
                for row in repository.list_movements()
            ]

        return Ledger(owner, movements)
