"""Ledger — user accounts, balances and their history.

Balances move only through ``open_account``, ``debit`` and ``credit``. Each of
them appends exactly one LedgerEntry carrying the balance after the change, so
a user's current balance always equals the sum of their entries.
"""

import logging
from collections import defaultdict

from src.pari_account.domain.models import LedgerEntry, User
from src.pari_common.datetime_utils import Clock, utc_now
from src.pari_common.enums import LedgerEntryType
from src.pari_common.errors import (
    AccountNotFoundError,
    InsufficientBalanceError,
    UsernameTakenError,
)
from src.pari_common.id_generator import PrefixedIdGenerator

logger = logging.getLogger(__name__)


def _username_key(username: str) -> str:
    return username.casefold()


class Ledger:
    def __init__(
        self,
        clock: Clock = utc_now,
        ids: PrefixedIdGenerator | None = None,
    ) -> None:
        self._clock = clock
        self._ids = ids or PrefixedIdGenerator("user")
        self._users: dict[str, User] = {}
        self._by_username: dict[str, str] = {}
        self._entries: dict[str, list[LedgerEntry]] = defaultdict(list)

    def open_account(self, username: str, starting_balance: int) -> User:
        """Create a user holding ``starting_balance`` cents.

        Raises:
            UsernameTakenError: a user with the same name (case-insensitive) exists.
        """
        key = _username_key(username)
        if key in self._by_username:
            raise UsernameTakenError(username)
        if starting_balance < 0:
            raise ValueError(f"Starting balance must be >= 0, got {starting_balance}")

        user = User(
            id=self._ids.next_id(),
            username=username,
            balance=starting_balance,
            created_at=self._clock(),
        )
        self._users[user.id] = user
        self._by_username[key] = user.id
        self._append(user, LedgerEntryType.STARTING_BALANCE, starting_balance, None)
        logger.info("Opened account %s (%s)", user.id, username)
        return user

    def get(self, user_id: str) -> User | None:
        return self._users.get(user_id)

    def require(self, user_id: str) -> User:
        user = self._users.get(user_id)
        if user is None:
            raise AccountNotFoundError(user_id)
        return user

    def find_by_username(self, username: str) -> User | None:
        user_id = self._by_username.get(_username_key(username))
        return self._users[user_id] if user_id is not None else None

    def users(self) -> list[User]:
        return list(self._users.values())

    def total_balance(self) -> int:
        return sum(u.balance for u in self._users.values())

    def debit(self, user_id: str, amount: int, reference_id: str) -> User:
        """Take ``amount`` cents from the user.

        Raises:
            InsufficientBalanceError: amount exceeds the current balance.
        """
        if amount <= 0:
            raise ValueError(f"Debit amount must be positive, got {amount}")
        user = self.require(user_id)
        if amount > user.balance:
            raise InsufficientBalanceError(required=amount, available=user.balance)
        user.balance -= amount
        self._append(user, LedgerEntryType.BET_DEBIT, -amount, reference_id)
        return user

    def credit(
        self,
        user_id: str,
        amount: int,
        entry_type: LedgerEntryType,
        reference_id: str,
    ) -> User:
        if amount < 0:
            raise ValueError(f"Credit amount must be >= 0, got {amount}")
        user = self.require(user_id)
        user.balance += amount
        self._append(user, entry_type, amount, reference_id)
        return user

    def entries_for(self, user_id: str) -> list[LedgerEntry]:
        return list(self._entries.get(user_id, ()))

    def _append(
        self,
        user: User,
        entry_type: LedgerEntryType,
        amount: int,
        reference_id: str | None,
    ) -> None:
        self._entries[user.id].append(
            LedgerEntry(
                user_id=user.id,
                entry_type=entry_type,
                amount=amount,
                balance_after=user.balance,
                reference_id=reference_id,
                created_at=self._clock(),
            )
        )
