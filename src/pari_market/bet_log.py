"""BetLog — append-only bet records, indexed by market and by user."""

from collections import defaultdict
from collections.abc import Iterator
from datetime import datetime

from src.pari_common.enums import Side
from src.pari_common.id_generator import PrefixedIdGenerator
from src.pari_market.domain.models import Bet


class BetLog:
    def __init__(self, ids: PrefixedIdGenerator | None = None) -> None:
        self._ids = ids or PrefixedIdGenerator("bet")
        self._bets: list[Bet] = []
        self._by_market: dict[str, list[Bet]] = defaultdict(list)
        self._by_user: dict[str, list[Bet]] = defaultdict(list)

    def __len__(self) -> int:
        return len(self._bets)

    def __iter__(self) -> Iterator[Bet]:
        return iter(self._bets)

    def append(
        self,
        market_id: str,
        user_id: str,
        username: str,
        side: Side,
        amount: int,
        created_at: datetime,
    ) -> Bet:
        bet = Bet(
            id=self._ids.next_id(),
            market_id=market_id,
            user_id=user_id,
            username=username,
            side=side,
            amount=amount,
            shares=amount,
            created_at=created_at,
        )
        self._bets.append(bet)
        self._by_market[market_id].append(bet)
        self._by_user[user_id].append(bet)
        return bet

    def for_market(self, market_id: str) -> list[Bet]:
        return list(self._by_market.get(market_id, ()))

    def for_user(self, user_id: str) -> list[Bet]:
        return list(self._by_user.get(user_id, ()))
