"""Pydantic server->client message schemas.

Field names are snake_case in Python and camelCase on the wire (``by_alias``).
Timestamps are epoch milliseconds; balances are token numbers with two
decimals, converted from integer cents only here.
"""

from typing import Literal

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

from src.pari_account.domain.models import User
from src.pari_chat.chat_log import ChatMessage
from src.pari_clearing.domain.pricing import implied_prices
from src.pari_common.cents import cents_to_tokens
from src.pari_common.datetime_utils import to_epoch_ms
from src.pari_common.errors import AppError
from src.pari_market.domain.models import Bet, Market


class WireModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    def to_wire(self) -> dict[str, object]:
        return self.model_dump(mode="json", by_alias=True)


# --- Views of domain objects ---

class UserView(WireModel):
    user_id: str
    username: str
    balance: float

    @classmethod
    def from_domain(cls, user: User) -> "UserView":
        return cls(user_id=user.id, username=user.username, balance=cents_to_tokens(user.balance))


class MarketView(WireModel):
    id: str
    question: str
    creator_id: str
    creator_name: str
    close_date: int
    created_at: int
    resolved: bool
    outcome: str | None
    resolved_at: int | None
    yes_pool: int
    no_pool: int
    yes_shares: int
    no_shares: int
    yes_price: float
    no_price: float

    @classmethod
    def from_domain(cls, market: Market) -> "MarketView":
        yes_price, no_price = implied_prices(market)
        return cls(
            id=market.id,
            question=market.question,
            creator_id=market.creator_id,
            creator_name=market.creator_name,
            close_date=to_epoch_ms(market.close_at),
            created_at=to_epoch_ms(market.created_at),
            resolved=market.is_resolved,
            outcome=market.outcome.value if market.outcome else None,
            resolved_at=to_epoch_ms(market.resolved_at) if market.resolved_at else None,
            yes_pool=market.yes_pool,
            no_pool=market.no_pool,
            yes_shares=market.yes_shares,
            no_shares=market.no_shares,
            yes_price=yes_price,
            no_price=no_price,
        )


class BetView(WireModel):
    id: str
    market_id: str
    user_id: str
    username: str
    side: str
    amount: int
    shares: int
    timestamp: int

    @classmethod
    def from_domain(cls, bet: Bet) -> "BetView":
        return cls(
            id=bet.id,
            market_id=bet.market_id,
            user_id=bet.user_id,
            username=bet.username,
            side=bet.side.value,
            amount=bet.amount,
            shares=bet.shares,
            timestamp=to_epoch_ms(bet.created_at),
        )


class ChatMessageView(WireModel):
    username: str
    message: str
    timestamp: int

    @classmethod
    def from_domain(cls, chat_message: ChatMessage) -> "ChatMessageView":
        return cls(
            username=chat_message.username,
            message=chat_message.message,
            timestamp=to_epoch_ms(chat_message.created_at),
        )


# --- Messages ---

class SessionMessage(WireModel):
    """Reply to register/login, sent to the caller only."""

    type: Literal["registered", "loggedIn"]
    session_id: str
    user_id: str
    username: str
    balance: float


class ErrorMessage(WireModel):
    type: Literal["error"] = "error"
    code: int
    error: str
    message: str

    @classmethod
    def from_error(cls, exc: AppError) -> "ErrorMessage":
        return cls(code=exc.code, error=exc.error_name, message=exc.message)


class StateMessage(WireModel):
    type: Literal["state"] = "state"
    user: UserView
    markets: list[MarketView]
    user_bets: list[BetView]
    chat_messages: list[ChatMessageView]


class MarketCreatedMessage(WireModel):
    type: Literal["marketCreated"] = "marketCreated"
    market: MarketView


class BetPlacedMessage(WireModel):
    type: Literal["betPlaced"] = "betPlaced"
    bet: BetView
    market: MarketView
    user_id: str
    new_balance: float


class MarketResolvedMessage(WireModel):
    """Carries the resolved market only; clients refetch state for balances."""

    type: Literal["marketResolved"] = "marketResolved"
    market: MarketView


class ChatMessageEvent(WireModel):
    type: Literal["chatMessage"] = "chatMessage"
    chat_message: ChatMessageView


class PresenceMessage(WireModel):
    type: Literal["userJoined", "userLeft"]
    username: str
    timestamp: int
