"""Domain models for pari_market — pure dataclasses, no business logic."""

from dataclasses import dataclass
from datetime import datetime

from src.pari_common.enums import MarketStatus, Side


@dataclass
class Market:
    id: str
    question: str
    creator_id: str
    creator_name: str
    created_at: datetime
    close_at: datetime               # advisory only, bets are accepted after it
    status: MarketStatus = MarketStatus.OPEN
    outcome: Side | None = None
    resolved_at: datetime | None = None
    yes_pool: int = 0                # tokens
    no_pool: int = 0                 # tokens
    yes_shares: int = 0              # 1 share per token wagered
    no_shares: int = 0
    unclaimed_cents: int = 0         # pool left without winners at resolution

    @property
    def total_pool(self) -> int:
        return self.yes_pool + self.no_pool

    @property
    def is_resolved(self) -> bool:
        return self.status == MarketStatus.RESOLVED

    def pool_for(self, side: Side) -> int:
        return self.yes_pool if side == Side.YES else self.no_pool


@dataclass(frozen=True)
class Bet:
    id: str
    market_id: str
    user_id: str
    username: str
    side: Side
    amount: int                      # tokens, > 0
    shares: int                      # always == amount
    created_at: datetime
