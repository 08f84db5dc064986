"""Domain models for pari_account — pure dataclasses."""

from dataclasses import dataclass
from datetime import datetime

from src.pari_common.enums import LedgerEntryType


@dataclass
class User:
    id: str
    username: str
    balance: int             # cents, never negative
    created_at: datetime


@dataclass(frozen=True)
class LedgerEntry:
    user_id: str
    entry_type: LedgerEntryType
    amount: int                      # cents, positive=income negative=expense
    balance_after: int               # cents, balance snapshot after op
    reference_id: str | None
    created_at: datetime
