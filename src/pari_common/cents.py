"""Integer arithmetic utilities for token balances.

Bet amounts and pools are whole tokens. Balances and payouts are token cents
(1 token = 100 cents) so pari-mutuel payouts stay exact integers. No float,
no Decimal, except at the wire boundary (``cents_to_tokens``).
"""

CENTS_PER_TOKEN = 100


def tokens_to_cents(tokens: int) -> int:
    return tokens * CENTS_PER_TOKEN


def cents_to_tokens(cents: int) -> float:
    """Wire representation of a balance: 133333 -> 1333.33."""
    return cents / CENTS_PER_TOKEN


def cents_to_display(cents: int) -> str:
    """Convert cents to display string: 6500 -> '65.00', -123456 -> '-1,234.56'."""
    if cents < 0:
        abs_cents = -cents
        return f"-{abs_cents // 100:,}.{abs_cents % 100:02d}"
    return f"{cents // 100:,}.{cents % 100:02d}"


def allocate_pro_rata(total: int, weights: list[int]) -> list[int]:
    """Split ``total`` across ``weights`` proportionally (largest-remainder method).

    Every share starts at floor(total * weight / sum(weights)). The units lost
    to flooring (always fewer than len(weights)) go one each to the largest
    remainders, lower index first on ties. The result always sums to ``total``.
    """
    denominator = sum(weights)
    if denominator <= 0:
        raise ValueError(f"Weights must sum to a positive number, got {denominator}")
    if any(w < 0 for w in weights):
        raise ValueError("Weights must be non-negative")

    shares: list[int] = []
    remainders: list[tuple[int, int]] = []
    for index, weight in enumerate(weights):
        quotient, remainder = divmod(total * weight, denominator)
        shares.append(quotient)
        remainders.append((remainder, index))

    leftover = total - sum(shares)
    for _, index in sorted(remainders, key=lambda r: (-r[0], r[1]))[:leftover]:
        shares[index] += 1
    return shares
