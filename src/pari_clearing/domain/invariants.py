"""Market invariant verification after each bet and resolution."""

import logging

from src.pari_common.enums import Side
from src.pari_market.domain.models import Bet, Market

logger = logging.getLogger(__name__)


def verify_market_invariants(market: Market, bets: list[Bet]) -> list[str]:
    """Check a market against its bets. Returns violation strings (empty = OK).

    - pool total == sum of bet amounts on the market
    - each side's pool == sum of that side's bets
    - shares == pool on each side (1:1 share model)
    """
    violations: list[str] = []
    market_bets = [b for b in bets if b.market_id == market.id]
    yes_sum = sum(b.amount for b in market_bets if b.side == Side.YES)
    no_sum = sum(b.amount for b in market_bets if b.side == Side.NO)

    if market.total_pool != yes_sum + no_sum:
        violations.append(
            f"Pool total violated on {market.id}: yes_pool({market.yes_pool}) + "
            f"no_pool({market.no_pool}) != sum(bets)={yes_sum + no_sum}"
        )
    if market.yes_pool != yes_sum or market.no_pool != no_sum:
        violations.append(
            f"Side pools violated on {market.id}: pools=({market.yes_pool}, "
            f"{market.no_pool}) bets=({yes_sum}, {no_sum})"
        )
    if market.yes_shares != market.yes_pool or market.no_shares != market.no_pool:
        violations.append(
            f"Share parity violated on {market.id}: shares=({market.yes_shares}, "
            f"{market.no_shares}) pools=({market.yes_pool}, {market.no_pool})"
        )

    for msg in violations:
        logger.error(msg)
    if not violations:
        logger.debug(
            "Invariants OK: market=%s, yes=%d, no=%d", market.id, market.yes_pool, market.no_pool
        )
    return violations
