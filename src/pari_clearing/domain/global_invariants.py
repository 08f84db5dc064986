"""Global token conservation check.

Tokens enter only as starting balances and never leave, so at any moment:

    sum(user balances) + open market pools + unclaimed pools == total granted
"""

import logging

from src.pari_account.domain.models import LedgerEntry
from src.pari_account.ledger import Ledger
from src.pari_common.cents import tokens_to_cents
from src.pari_common.enums import LedgerEntryType
from src.pari_market.registry import MarketRegistry

logger = logging.getLogger(__name__)


def _granted(entries: list[LedgerEntry]) -> int:
    return sum(e.amount for e in entries if e.entry_type == LedgerEntryType.STARTING_BALANCE)


def verify_global_invariants(ledger: Ledger, registry: MarketRegistry) -> list[str]:
    """Returns list of violation strings (empty = OK)."""
    violations: list[str] = []
    user_bal = ledger.total_balance()
    open_pools = tokens_to_cents(registry.open_pool_total())
    unclaimed = registry.unclaimed_total()
    granted = sum(_granted(ledger.entries_for(u.id)) for u in ledger.users())

    total_assets = user_bal + open_pools + unclaimed
    if total_assets != granted:
        msg = (
            f"Conservation violated: user_balances({user_bal}) + "
            f"open_pools({open_pools}) + unclaimed({unclaimed}) "
            f"= {total_assets} != granted={granted}"
        )
        violations.append(msg)
        logger.error(msg)

    negative = [u.id for u in ledger.users() if u.balance < 0]
    if negative:
        msg = f"Negative balances: {', '.join(negative)}"
        violations.append(msg)
        logger.error(msg)
    return violations
