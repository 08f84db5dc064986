"""ExchangeService — applies client commands to the ExchangeStore.

Every command runs under one asyncio.Lock, so commands are applied in a strict
total order and none observes another half-applied. Inside the lock a command
validates the session, runs all of its checks, mutates, and builds its event
payload; the checks come before the first mutation, so a command either applies
fully or raises an AppError having changed nothing. Events are published right
after the lock is released, with no await in between, so the order of frames
on every connection matches the order in which commands were applied.
"""

import asyncio
import logging
from datetime import datetime, timedelta

from config.settings import Settings
from src.pari_account.domain.models import User
from src.pari_broadcast.hub import Connection, ConnectionHub
from src.pari_chat.chat_log import ChatMessage
from src.pari_clearing.domain.global_invariants import verify_global_invariants
from src.pari_clearing.domain.invariants import verify_market_invariants
from src.pari_clearing.domain.settlement import SettlementSummary, settle_market
from src.pari_common.cents import cents_to_display, cents_to_tokens, tokens_to_cents
from src.pari_common.datetime_utils import Clock, from_epoch_ms, to_epoch_ms, utc_now
from src.pari_common.enums import ServerMessageType, Side
from src.pari_common.errors import (
    InsufficientBalanceError,
    InvalidAmountError,
    InvalidInputError,
    InvalidInviteError,
    InvalidOutcomeError,
    MarketResolvedError,
    NotCreatorError,
    UserNotFoundError,
)
from src.pari_exchange.schemas import (
    BetPlacedMessage,
    BetView,
    ChatMessageEvent,
    ChatMessageView,
    MarketCreatedMessage,
    MarketResolvedMessage,
    MarketView,
    PresenceMessage,
    SessionMessage,
    StateMessage,
    UserView,
)
from src.pari_exchange.store import ExchangeStore
from src.pari_market.domain.models import Bet, Market

logger = logging.getLogger(__name__)


def _normalize_choice(value: object) -> str | None:
    return value.strip().lower() if isinstance(value, str) else None


def _parse_side(side: object) -> Side:
    try:
        return Side(_normalize_choice(side))
    except ValueError:
        raise InvalidInputError(f"Invalid side: {side!r}. Expected 'yes' or 'no'") from None


def _parse_outcome(outcome: object) -> Side:
    try:
        return Side(_normalize_choice(outcome))
    except ValueError:
        raise InvalidOutcomeError(outcome) from None


def _parse_amount(amount: object) -> int:
    """Whole tokens only: rejects bools, floats, zero and negatives."""
    if isinstance(amount, bool) or not isinstance(amount, int) or amount <= 0:
        raise InvalidAmountError(amount)
    return amount


class ExchangeService:
    def __init__(
        self,
        store: ExchangeStore,
        hub: ConnectionHub,
        settings: Settings,
        clock: Clock = utc_now,
    ) -> None:
        self._store = store
        self._hub = hub
        self._settings = settings
        self._clock = clock
        self._lock = asyncio.Lock()
        self._invite_codes = settings.invite_codes
        self._starting_balance = tokens_to_cents(settings.STARTING_BALANCE)

    @property
    def store(self) -> ExchangeStore:
        return self._store

    # --- Identity ---

    async def register(
        self,
        username: str,
        invite_code: str,
        connection_id: str | None = None,
    ) -> SessionMessage:
        async with self._lock:
            username = username.strip()
            invite_code = invite_code.strip()
            if not username or not invite_code:
                raise InvalidInputError("Username and invite code required")
            if invite_code not in self._invite_codes:
                raise InvalidInviteError()

            user = self._store.ledger.open_account(username, self._starting_balance)
            reply = self._open_session(user, ServerMessageType.REGISTERED, connection_id)
            joined = self._presence(ServerMessageType.USER_JOINED, user.username)

        self._hub.publish(joined, exclude=connection_id)
        logger.info("Registered %s as %s", user.username, user.id)
        return reply

    async def login(self, username: str, connection_id: str | None = None) -> SessionMessage:
        """Name-only login: no credential is checked."""
        async with self._lock:
            username = username.strip()
            if not username:
                raise InvalidInputError("Username required")
            user = self._store.ledger.find_by_username(username)
            if user is None:
                raise UserNotFoundError(username)

            reply = self._open_session(user, ServerMessageType.LOGGED_IN, connection_id)
            joined = self._presence(ServerMessageType.USER_JOINED, user.username)

        self._hub.publish(joined, exclude=connection_id)
        logger.info("Logged in %s (%s)", user.username, user.id)
        return reply

    def disconnect(self, connection: Connection) -> None:
        """Forget a closed connection and tell the others, if it was signed in."""
        self._hub.unregister(connection.id)
        if connection.username is not None:
            self._hub.publish(self._presence(ServerMessageType.USER_LEFT, connection.username))

    # --- Markets ---

    async def create_market(
        self,
        token: str | None,
        question: str,
        close_date: object = None,
        connection_id: str | None = None,
    ) -> Market:
        async with self._lock:
            user = self._authenticate(token, connection_id)
            text = question.strip()
            if not text:
                raise InvalidInputError("Question is required")
            if len(text) > self._settings.MAX_QUESTION_LENGTH:
                raise InvalidInputError(
                    f"Question must be at most {self._settings.MAX_QUESTION_LENGTH} characters"
                )
            now = self._clock()
            close_at = self._close_at(close_date, now)

            market = self._store.markets.create(
                question=text,
                creator_id=user.id,
                creator_name=user.username,
                created_at=now,
                close_at=close_at,
            )
            event = MarketCreatedMessage(market=MarketView.from_domain(market))

        self._hub.publish(event)
        logger.info("Market %s created by %s: %r", market.id, user.id, market.question)
        return market

    async def place_bet(
        self,
        token: str | None,
        market_id: str,
        side: object,
        amount: object,
        connection_id: str | None = None,
    ) -> Bet:
        """Debit the caller and grow one side's pool, 1 share per token.

        Check order: session, market exists, market open, side, amount, balance.
        """
        async with self._lock:
            user = self._authenticate(token, connection_id)
            market = self._store.markets.require(market_id)
            if market.is_resolved:
                raise MarketResolvedError(market.id)
            bet_side = _parse_side(side)
            tokens = _parse_amount(amount)
            cost = tokens_to_cents(tokens)
            if cost > user.balance:
                raise InsufficientBalanceError(required=cost, available=user.balance)

            bet = self._store.bets.append(
                market_id=market.id,
                user_id=user.id,
                username=user.username,
                side=bet_side,
                amount=tokens,
                created_at=self._clock(),
            )
            self._store.markets.apply_bet(market, bet_side, tokens)
            self._store.ledger.debit(user.id, cost, reference_id=bet.id)
            self._check_invariants(market)

            event = BetPlacedMessage(
                bet=BetView.from_domain(bet),
                market=MarketView.from_domain(market),
                user_id=user.id,
                new_balance=cents_to_tokens(user.balance),
            )

        self._hub.publish(event)
        logger.info(
            "Bet %s: %s %d on %s in %s (yes=%d, no=%d)",
            bet.id, user.id, tokens, bet_side.value, market.id, market.yes_pool, market.no_pool,
        )
        return bet

    async def resolve_market(
        self,
        token: str | None,
        market_id: str,
        outcome: object,
        connection_id: str | None = None,
    ) -> SettlementSummary:
        """Creator-only, one-shot settlement.

        Check order: session, market exists, caller is creator, not yet
        resolved, outcome valid. Payouts are not broadcast; clients learn
        their balances from their next ``getState``.
        """
        async with self._lock:
            user = self._authenticate(token, connection_id)
            market = self._store.markets.require(market_id)
            if market.creator_id != user.id:
                raise NotCreatorError()
            if market.is_resolved:
                raise MarketResolvedError(market.id)
            winning_side = _parse_outcome(outcome)

            summary = settle_market(
                market=market,
                bets=self._store.bets.for_market(market.id),
                outcome=winning_side,
                resolved_at=self._clock(),
                registry=self._store.markets,
                ledger=self._store.ledger,
            )
            self._check_invariants(market)
            event = MarketResolvedMessage(market=MarketView.from_domain(market))

        self._hub.publish(event)
        logger.info(
            "Market %s resolved %s: %d winning bets, paid %s tokens",
            market.id,
            winning_side.value,
            len(summary.payouts),
            cents_to_display(summary.total_payout),
        )
        return summary

    # --- Chat ---

    async def send_message(
        self,
        token: str | None,
        message: str,
        connection_id: str | None = None,
    ) -> ChatMessage:
        async with self._lock:
            user = self._authenticate(token, connection_id)
            chat_message = self._store.chat.append(user.username, message, self._clock())
            event = ChatMessageEvent(chat_message=ChatMessageView.from_domain(chat_message))

        self._hub.publish(event)
        return chat_message

    # --- Queries ---

    async def get_state(self, token: str | None, connection_id: str | None = None) -> StateMessage:
        """Full resync for one client: every market, the caller's bets, recent chat."""
        async with self._lock:
            user = self._authenticate(token, connection_id)
            return StateMessage(
                user=UserView.from_domain(user),
                markets=[MarketView.from_domain(m) for m in self._store.markets.list_markets()],
                user_bets=[BetView.from_domain(b) for b in self._store.bets.for_user(user.id)],
                chat_messages=[
                    ChatMessageView.from_domain(m)
                    for m in self._store.chat.recent(self._settings.CHAT_STATE_LIMIT)
                ],
            )

    # --- Internals ---

    def _authenticate(self, token: str | None, connection_id: str | None) -> User:
        """Validate the session; (re)bind the connection so it receives broadcasts."""
        user_id = self._store.sessions.validate(token)
        user = self._store.ledger.require(user_id)
        if connection_id is not None and token is not None:
            self._hub.bind(connection_id, token, user.id, user.username)
        return user

    def _open_session(
        self,
        user: User,
        reply_type: ServerMessageType,
        connection_id: str | None,
    ) -> SessionMessage:
        session = self._store.sessions.create_session(user.id)
        if connection_id is not None:
            self._hub.bind(connection_id, session.token, user.id, user.username)
        return SessionMessage(
            type=reply_type.value,
            session_id=session.token,
            user_id=user.id,
            username=user.username,
            balance=cents_to_tokens(user.balance),
        )

    def _presence(self, kind: ServerMessageType, username: str) -> PresenceMessage:
        return PresenceMessage(
            type=kind.value, username=username, timestamp=to_epoch_ms(self._clock())
        )

    def _close_at(self, close_date: object, now: datetime) -> datetime:
        if close_date is None:
            return now + timedelta(days=self._settings.DEFAULT_MARKET_DAYS)
        if isinstance(close_date, bool) or not isinstance(close_date, (int, float)):
            raise InvalidInputError(f"Invalid close date: {close_date!r}")
        try:
            return from_epoch_ms(close_date)
        except ValueError:
            raise InvalidInputError(f"Invalid close date: {close_date!r}") from None

    def _check_invariants(self, market: Market) -> None:
        """Log-only: the verifiers log every violation at ERROR; none reaches the client."""
        verify_market_invariants(market, self._store.bets.for_market(market.id))
        if self._settings.DEBUG:
            verify_global_invariants(self._store.ledger, self._store.markets)
