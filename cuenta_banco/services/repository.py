from __future__ import annotations

from typing import Optional

from sqlmodel import Session, select

from ..models import (
    Movement,
    MovementRecordModel,
    Owner,
    OwnerRecordModel,
    StateMetaModel,
)


class LedgerRepository:
    """Thin data access layer around the SQLModel session."""

    def __init__(self, session: Session) -> None:
        self.session = session

    # State metadata -----------------------------------------------------
    def add_meta(self, *, format_version: int) -> None:
        self.session.add(StateMetaModel(format_version=format_version))

    def get_meta(self) -> Optional[StateMetaModel]:
        return self.session.get(StateMetaModel, 1)

    # Owner --------------------------------------------------------------
    def add_owner(self, owner: Owner) -> None:
        self.session.add(
            OwnerRecordModel(name=owner.name, identifier=owner.identifier, age=owner.age)
        )

    def get_owner(self) -> Optional[OwnerRecordModel]:
        return self.session.get(OwnerRecordModel, 1)

    # Movements ----------------------------------------------------------
    def add_movements(self, movements: tuple[Movement, ...]) -> None:
        for position, movement in enumerate(movements):
            self.session.add(
                MovementRecordModel(
                    position=position,
                    kind=movement.kind.value,
                    amount=str(movement.amount),
                    ts=movement.timestamp.isoformat(),
                )
            )

    def list_movements(self) -> list[MovementRecordModel]:
        stmt = select(MovementRecordModel).order_by(MovementRecordModel.position)
        return list(self.session.exec(stmt))
