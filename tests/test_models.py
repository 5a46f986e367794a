import sys
import os
from decimal import Decimal

sys.path.insert(0, os.path.join(os.path.dirname(__file__), "..", "src"))

from models import (
    MAX_AMOUNT,
    AccountSnapshot,
    ClientAccount,
    DisputableRecord,
    DisputeState,
    ProcessingResult,
    ProcessingStats,
    Transaction,
    TransactionType,
)


class TestTransaction:
    def test_create_deposit(self):
        transaction = Transaction(
            transaction_type=TransactionType.DEPOSIT,
            client_id=1,
            transaction_id=1,
            amount=Decimal("100.0"),
        )
        assert transaction.transaction_type == TransactionType.DEPOSIT
        assert transaction.client_id == 1
        assert transaction.transaction_id == 1
        assert transaction.amount == Decimal("100.0")

    def test_create_dispute_no_amount(self):
        transaction = Transaction(
            transaction_type=TransactionType.DISPUTE,
            client_id=1,
            transaction_id=1,
        )
        assert transaction.amount is None

    def test_only_deposit_and_withdrawal_carry_amount(self):
        assert TransactionType.DEPOSIT.carries_amount
        assert TransactionType.WITHDRAWAL.carries_amount
        assert not TransactionType.DISPUTE.carries_amount
        assert not TransactionType.RESOLVE.carries_amount
        assert not TransactionType.CHARGEBACK.carries_amount


class TestClientAccount:
    def test_default_values(self):
        account = ClientAccount(client_id=1)
        assert account.available == Decimal("0")
        assert account.held == Decimal("0")
        assert account.locked is False

    def test_total_property(self):
        account = ClientAccount(
            client_id=1,
            available=Decimal("100"),
            held=Decimal("50"),
        )
        assert account.total == Decimal("150")

    def test_hold_and_release_deposit_keep_total(self):
        account = ClientAccount(client_id=1, available=Decimal("10"))
        account.hold_deposit(Decimal("4"))
        assert account.available == Decimal("6")
        assert account.held == Decimal("4")
        assert account.total == Decimal("10")

        account.release_deposit(Decimal("4"))
        assert account.available == Decimal("10")
        assert account.held == Decimal("0")

    def test_charge_back_withdrawal_returns_funds(self):
        account = ClientAccount(client_id=1, available=Decimal("60"))
        account.hold_withdrawal(Decimal("40"))
        assert account.available == Decimal("60")
        assert account.held == Decimal("40")

        account.charge_back_withdrawal(Decimal("40"))
        assert account.available == Decimal("100")
        assert account.held == Decimal("0")

    def test_arithmetic_is_exact_beyond_default_precision(self):
        amount = Decimal("12345678901234567890123456789.1234")
        account = ClientAccount(client_id=1)
        account.credit(amount)
        account.credit(amount)
        assert account.available == Decimal("24691357802469135780246913578.2468")
        account.debit(amount)
        account.debit(amount)
        assert account.available == Decimal("0")

    def test_snapshot_of_large_balance(self):
        account = ClientAccount(client_id=1, available=MAX_AMOUNT, held=MAX_AMOUNT)
        snapshot = account.to_snapshot()
        assert snapshot.total == Decimal("158456325028528675187087900670.0000")
        assert str(snapshot.available) == "79228162514264337593543950335.0000"

    def test_snapshot_has_four_decimal_places(self):
        account = ClientAccount(client_id=7, available=Decimal("1.5"), held=Decimal("0.25"))
        snapshot = account.to_snapshot()
        assert snapshot == AccountSnapshot(
            client_id=7,
            available=Decimal("1.5000"),
            held=Decimal("0.2500"),
            total=Decimal("1.7500"),
            locked=False,
        )
        assert str(snapshot.total) == "1.7500"


class TestDisputableRecord:
    def test_defaults_to_undisputed_deposit(self):
        record = DisputableRecord(transaction_id=1, client_id=1, amount=Decimal("5"))
        assert record.transaction_type == TransactionType.DEPOSIT
        assert record.dispute_state == DisputeState.NONE
        assert not record.is_disputed


class TestProcessingStats:
    def test_record_result(self):
        stats = ProcessingStats()
        stats.record_result(ProcessingResult.APPLIED)
        stats.record_result(ProcessingResult.IGNORED)
        stats.record_result(ProcessingResult.IGNORED)
        assert stats.applied == 1
        assert stats.ignored == 2
