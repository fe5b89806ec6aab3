from __future__ import annotations

import logging
from collections.abc import Callable, Iterable
from datetime import datetime
from decimal import Decimal, InvalidOperation
from typing import Any, Optional

from ..models import MAX_AMOUNT, Movement, MovementKind, Owner, current_time, format_amount


logger = logging.getLogger(__name__)


def to_amount(value: Any) -> Optional[Decimal]:
    """Read ``value`` as a finite decimal, or ``None`` when it is not one."""
    if isinstance(value, bool):
        return None
    if isinstance(value, float):
        value = str(value)
    try:
        amount = value if isinstance(value, Decimal) else Decimal(value)
    except (InvalidOperation, TypeError, ValueError):
        return None
    if not amount.is_finite():
        return None
    return amount


class Ledger:
    """One owner and the append-only list of their movements.

    The balance is always recomputed from the movements, so it cannot drift
    from the movement log.
    """

    def __init__(
        self,
        owner: Owner,
        movements: Iterable[Movement] = (),
        clock: Optional[Callable[[], datetime]] = None,
    ) -> None:
        self._owner = owner
        self._movements: list[Movement] = list(movements)
        self._clock = clock or current_time

    @property
    def owner(self) -> Owner:
        return self._owner

    def movements(self) -> tuple[Movement, ...]:
        return tuple(self._movements)

    def balance(self) -> Decimal:
        return sum((m.signed_amount for m in self._movements), Decimal("0"))

    def _append(self, kind: MovementKind, amount: Decimal) -> Movement:
        movement = Movement(kind=kind, amount=amount, timestamp=self._clock())
        self._movements.append(movement)
        return movement

    def deposit(self, amount: Any) -> None:
        value = to_amount(amount)
        if value is None or value <= 0 or value > MAX_AMOUNT:
            logger.debug("account.deposit.rejected", extra={"amount": str(amount)})
            return

        self._append(MovementKind.DEPOSIT, value)
        logger.info(
            "account.deposit",
            extra={"amount": str(value), "balance": str(self.balance())},
        )

    def withdraw(self, amount: Any) -> bool:
        value = to_amount(amount)
        if value is None or value <= 0 or value > MAX_AMOUNT:
            logger.debug("account.withdraw.rejected", extra={"amount": str(amount), "reason": "invalid"})
            return False

        balance = self.balance()
        if value > balance:
            logger.info(
                "account.withdraw.rejected",
                extra={"amount": str(value), "balance": str(balance), "reason": "insufficient_funds"},
            )
            return False

        self._append(MovementKind.WITHDRAWAL, value)
        logger.info(
            "account.withdraw",
            extra={"amount": str(value), "balance": str(self.balance())},
        )
        return True

    def __str__(self) -> str:
        return f"Cuenta{{titular={self._owner}, saldo={format_amount(self.balance())}€}}"
