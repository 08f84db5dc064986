"""Implied prices for display. Never used to compute shares (1 token = 1 share)."""

from src.pari_market.domain.models import Market

_EMPTY_POOL_PRICE = 0.5


def implied_yes_price(market: Market) -> float:
    """yes_pool / total, rounded to 4 places. 0.5 while nothing is wagered."""
    total = market.total_pool
    if total == 0:
        return _EMPTY_POOL_PRICE
    return round(market.yes_pool / total, 4)


def implied_prices(market: Market) -> tuple[float, float]:
    yes_price = implied_yes_price(market)
    return yes_price, round(1 - yes_price, 4)
