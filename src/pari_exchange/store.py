"""ExchangeStore — the single owner of all exchange state.

Nothing here is module-level: every store is built explicitly, so tests (or
several apps in one process) each get an independent instance.
"""

from dataclasses import dataclass
from datetime import timedelta

from config.settings import Settings
from src.pari_account.ledger import Ledger
from src.pari_chat.chat_log import ChatLog
from src.pari_common.datetime_utils import Clock, utc_now
from src.pari_market.bet_log import BetLog
from src.pari_market.registry import MarketRegistry
from src.pari_session.store import SessionStore


@dataclass
class ExchangeStore:
    sessions: SessionStore
    ledger: Ledger
    markets: MarketRegistry
    bets: BetLog
    chat: ChatLog

    @classmethod
    def from_settings(cls, settings: Settings, clock: Clock = utc_now) -> "ExchangeStore":
        return cls(
            sessions=SessionStore(timedelta(hours=settings.SESSION_TTL_HOURS), clock=clock),
            ledger=Ledger(clock=clock),
            markets=MarketRegistry(),
            bets=BetLog(),
            chat=ChatLog(capacity=settings.CHAT_HISTORY_LIMIT),
        )
