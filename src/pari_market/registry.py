"""MarketRegistry — market_id -> Market, the only writer of pools and status."""

from datetime import datetime

from src.pari_common.enums import MarketStatus, Side
from src.pari_common.errors import MarketNotFoundError, MarketResolvedError
from src.pari_common.id_generator import PrefixedIdGenerator
from src.pari_market.domain.models import Market


class MarketRegistry:
    def __init__(self, ids: PrefixedIdGenerator | None = None) -> None:
        self._ids = ids or PrefixedIdGenerator("market")
        self._markets: dict[str, Market] = {}

    def __len__(self) -> int:
        return len(self._markets)

    def create(
        self,
        question: str,
        creator_id: str,
        creator_name: str,
        created_at: datetime,
        close_at: datetime,
    ) -> Market:
        market = Market(
            id=self._ids.next_id(),
            question=question,
            creator_id=creator_id,
            creator_name=creator_name,
            created_at=created_at,
            close_at=close_at,
        )
        self._markets[market.id] = market
        return market

    def get(self, market_id: str) -> Market | None:
        return self._markets.get(market_id)

    def require(self, market_id: str) -> Market:
        market = self._markets.get(market_id)
        if market is None:
            raise MarketNotFoundError(market_id)
        return market

    def list_markets(self) -> list[Market]:
        """All markets in creation order."""
        return list(self._markets.values())

    def apply_bet(self, market: Market, side: Side, amount: int) -> None:
        """Add ``amount`` tokens (and as many shares) to one side's pool."""
        if market.is_resolved:
            raise MarketResolvedError(market.id)
        if amount <= 0:
            raise ValueError(f"Pool increments must be positive, got {amount}")
        if side == Side.YES:
            market.yes_pool += amount
            market.yes_shares += amount
        else:
            market.no_pool += amount
            market.no_shares += amount

    def mark_resolved(self, market: Market, outcome: Side, resolved_at: datetime) -> None:
        """Lock the outcome. One-shot: a second call raises MarketResolvedError."""
        if market.is_resolved:
            raise MarketResolvedError(market.id)
        market.status = MarketStatus.RESOLVED
        market.outcome = outcome
        market.resolved_at = resolved_at

    def open_pool_total(self) -> int:
        """Tokens still held in unresolved markets."""
        return sum(m.total_pool for m in self._markets.values() if not m.is_resolved)

    def unclaimed_total(self) -> int:
        return sum(m.unclaimed_cents for m in self._markets.values())
