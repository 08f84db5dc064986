"""Unit tests for pari_account.ledger.Ledger."""

import pytest

from conftest import FakeClock
from src.pari_account.ledger import Ledger
from src.pari_common.enums import LedgerEntryType
from src.pari_common.errors import (
    AccountNotFoundError,
    InsufficientBalanceError,
    UsernameTakenError,
)


@pytest.fixture
def ledger(clock: FakeClock) -> Ledger:
    return Ledger(clock=clock)


class TestOpenAccount:
    def test_sequential_ids(self, ledger: Ledger) -> None:
        alice = ledger.open_account("alice", 100000)
        bob = ledger.open_account("bob", 100000)
        assert (alice.id, bob.id) == ("user1", "user2")

    def test_starting_balance_entry(self, ledger: Ledger, clock: FakeClock) -> None:
        user = ledger.open_account("alice", 100000)
        assert user.balance == 100000
        assert user.created_at == clock.now
        [entry] = ledger.entries_for(user.id)
        assert entry.entry_type == LedgerEntryType.STARTING_BALANCE
        assert entry.amount == 100000
        assert entry.balance_after == 100000
        assert entry.reference_id is None

    def test_username_taken_case_insensitive(self, ledger: Ledger) -> None:
        ledger.open_account("Alice", 100000)
        with pytest.raises(UsernameTakenError):
            ledger.open_account("alice", 100000)
        assert len(ledger.users()) == 1

    def test_keeps_original_casing(self, ledger: Ledger) -> None:
        ledger.open_account("Alice", 100000)
        found = ledger.find_by_username("ALICE")
        assert found is not None
        assert found.username == "Alice"

    def test_negative_starting_balance_rejected(self, ledger: Ledger) -> None:
        with pytest.raises(ValueError):
            ledger.open_account("alice", -1)


class TestLookup:
    def test_get_unknown(self, ledger: Ledger) -> None:
        assert ledger.get("user99") is None
        assert ledger.find_by_username("nobody") is None

    def test_require_unknown_reports_account_id(self, ledger: Ledger) -> None:
        with pytest.raises(AccountNotFoundError) as exc_info:
            ledger.require("user99")
        assert exc_info.value.message == "Account not found: user99"
        assert "register" not in exc_info.value.message


class TestDebitCredit:
    def test_debit(self, ledger: Ledger) -> None:
        user = ledger.open_account("alice", 100000)
        ledger.debit(user.id, 10000, reference_id="bet1")
        assert user.balance == 90000
        entry = ledger.entries_for(user.id)[-1]
        assert entry.entry_type == LedgerEntryType.BET_DEBIT
        assert entry.amount == -10000
        assert entry.balance_after == 90000
        assert entry.reference_id == "bet1"

    def test_debit_whole_balance(self, ledger: Ledger) -> None:
        user = ledger.open_account("alice", 100000)
        ledger.debit(user.id, 100000, reference_id="bet1")
        assert user.balance == 0

    def test_debit_insufficient(self, ledger: Ledger) -> None:
        user = ledger.open_account("alice", 100000)
        with pytest.raises(InsufficientBalanceError):
            ledger.debit(user.id, 100001, reference_id="bet1")
        assert user.balance == 100000
        assert len(ledger.entries_for(user.id)) == 1

    @pytest.mark.parametrize("amount", [0, -100])
    def test_debit_non_positive(self, ledger: Ledger, amount: int) -> None:
        user = ledger.open_account("alice", 100000)
        with pytest.raises(ValueError):
            ledger.debit(user.id, amount, reference_id="bet1")

    def test_credit_payout(self, ledger: Ledger) -> None:
        user = ledger.open_account("alice", 0)
        ledger.credit(user.id, 33333, LedgerEntryType.SETTLEMENT_PAYOUT, reference_id="market1")
        assert user.balance == 33333
        assert ledger.entries_for(user.id)[-1].entry_type == LedgerEntryType.SETTLEMENT_PAYOUT

    def test_credit_negative_rejected(self, ledger: Ledger) -> None:
        user = ledger.open_account("alice", 0)
        with pytest.raises(ValueError):
            ledger.credit(user.id, -1, LedgerEntryType.SETTLEMENT_PAYOUT, reference_id="market1")

    def test_balance_equals_sum_of_entries(self, ledger: Ledger) -> None:
        user = ledger.open_account("alice", 100000)
        ledger.debit(user.id, 2500, reference_id="bet1")
        ledger.debit(user.id, 700, reference_id="bet2")
        ledger.credit(user.id, 4100, LedgerEntryType.SETTLEMENT_PAYOUT, reference_id="market1")
        assert user.balance == sum(e.amount for e in ledger.entries_for(user.id))

    def test_total_balance(self, ledger: Ledger) -> None:
        ledger.open_account("alice", 100000)
        bob = ledger.open_account("bob", 100000)
        ledger.debit(bob.id, 500, reference_id="bet1")
        assert ledger.total_balance() == 199500
