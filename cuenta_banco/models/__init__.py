from .db import MovementRecord as MovementRecordModel
from .db import OwnerRecord as OwnerRecordModel
from .db import StateMeta as StateMetaModel
from .schemas import (
    DEFAULT_OWNER_IDENTIFIER,
    DEFAULT_OWNER_NAME,
    MAX_AMOUNT,
    Movement,
    MovementKind,
    OperationResult,
    Owner,
    current_time,
    format_amount,
    format_timestamp,
)

__all__ = [
    "DEFAULT_OWNER_IDENTIFIER",
    "DEFAULT_OWNER_NAME",
    "MAX_AMOUNT",
    "Movement",
    "MovementKind",
    "OperationResult",
    "Owner",
    "current_time",
    "format_amount",
    "format_timestamp",
    "MovementRecordModel",
    "OwnerRecordModel",
    "StateMetaModel",
]
