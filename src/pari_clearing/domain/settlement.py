"""Market settlement — lock the outcome, then redistribute the pool to winners.

Pari-mutuel payout: with ``total = yes_pool + no_pool`` and ``winning`` the
pool of the chosen outcome, each winning bet receives
``bet.amount / winning * total`` tokens. Payouts are computed in cents with
``allocate_pro_rata`` so they sum to exactly ``total * 100``.

An empty winning pool pays nobody. The market still resolves and its whole pool
is recorded on the market as ``unclaimed_cents``.
"""

import logging
from dataclasses import dataclass, field
from datetime import datetime

from src.pari_account.ledger import Ledger
from src.pari_common.cents import allocate_pro_rata, tokens_to_cents
from src.pari_common.enums import LedgerEntryType, Side
from src.pari_market.domain.models import Bet, Market
from src.pari_market.registry import MarketRegistry

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Payout:
    bet_id: str
    user_id: str
    amount: int  # cents


@dataclass
class SettlementSummary:
    market_id: str
    outcome: Side
    total_pool: int          # tokens
    winning_pool: int        # tokens
    payouts: list[Payout] = field(default_factory=list)
    unclaimed_cents: int = 0

    @property
    def total_payout(self) -> int:
        return sum(p.amount for p in self.payouts)


def compute_payouts(market: Market, bets: list[Bet], outcome: Side) -> SettlementSummary:
    """Pure: derive per-bet payouts from the market's pools. Mutates nothing."""
    total_pool = market.total_pool
    winning_pool = market.pool_for(outcome)
    summary = SettlementSummary(
        market_id=market.id,
        outcome=outcome,
        total_pool=total_pool,
        winning_pool=winning_pool,
    )
    if winning_pool == 0:
        summary.unclaimed_cents = tokens_to_cents(total_pool)
        return summary

    winners = [b for b in bets if b.market_id == market.id and b.side == outcome]
    # Weights sum to winning_pool as long as the pool invariant holds.
    amounts = allocate_pro_rata(tokens_to_cents(total_pool), [b.amount for b in winners])
    summary.payouts = [
        Payout(bet_id=bet.id, user_id=bet.user_id, amount=amount)
        for bet, amount in zip(winners, amounts)
    ]
    return summary


def settle_market(
    market: Market,
    bets: list[Bet],
    outcome: Side,
    resolved_at: datetime,
    registry: MarketRegistry,
    ledger: Ledger,
) -> SettlementSummary:
    """Mark resolved first, then pay winners. Raises MarketResolvedError on a second call."""
    registry.mark_resolved(market, outcome, resolved_at)

    summary = compute_payouts(market, bets, outcome)
    market.unclaimed_cents = summary.unclaimed_cents
    for payout in summary.payouts:
        ledger.credit(
            payout.user_id,
            payout.amount,
            LedgerEntryType.SETTLEMENT_PAYOUT,
            reference_id=market.id,
        )

    if summary.unclaimed_cents:
        logger.warning(
            "Market %s resolved %s with an empty winning pool: %d cents unclaimed",
            market.id,
            outcome.value,
            summary.unclaimed_cents,
        )
    return summary
