import logging
from typing import List, Optional

from models import (
    AccountSnapshot,
    DisputableRecord,
    DisputeState,
    ProcessingResult,
    Transaction,
    TransactionType,
)
from state_manager import LedgerStore, StateManager

logger = logging.getLogger(__name__)


class AccountLedger:
    """
    Applies validated transactions to client accounts, strictly in input order.

    Business-rule violations (insufficient funds, unknown or foreign tx,
    double dispute, locked account) never raise: the transaction is dropped
    and IGNORED is returned, leaving state untouched.

    Policy switches:
        allow_withdrawal_disputes: retain withdrawals as disputable records.
            Off by default, only deposits can be disputed.
        allow_disputes_on_locked: let dispute/resolve/chargeback act on a
            locked account. Off by default, a locked account is fully frozen.
    """

    def __init__(
        self,
        state: Optional[LedgerStore] = None,
        allow_withdrawal_disputes: bool = False,
        allow_disputes_on_locked: bool = False,
    ):
        self._state = state if state is not None else StateManager()
        self._allow_withdrawal_disputes = allow_withdrawal_disputes
        self._allow_disputes_on_locked = allow_disputes_on_locked

    def apply(self, transaction: Transaction) -> ProcessingResult:
        """
        Apply a single transaction.

        Returns:
            APPLIED: state was mutated
            IGNORED: transaction dropped, state unchanged
        """
        match transaction.transaction_type:
            case TransactionType.DEPOSIT:
                return self._handle_deposit(transaction)
            case TransactionType.WITHDRAWAL:
                return self._handle_withdrawal(transaction)
            case TransactionType.DISPUTE:
                return self._handle_dispute(transaction)
            case TransactionType.RESOLVE:
                return self._handle_resolve(transaction)
            case TransactionType.CHARGEBACK:
                return self._handle_chargeback(transaction)
        return ProcessingResult.IGNORED

    def snapshot(self) -> List[AccountSnapshot]:
        """All known accounts ordered by client id, balances at four decimal places."""
        accounts = self._state.get_all_accounts()
        return [accounts[client_id].to_snapshot() for client_id in sorted(accounts)]

    def _handle_deposit(self, transaction: Transaction) -> ProcessingResult:
        account = self._state.get_or_create_account(transaction.client_id)

        if account.locked:
            logger.info(f"Deposit tx {transaction.transaction_id}: account {account.client_id} is locked")
            return ProcessingResult.IGNORED

        if self._state.has_transaction(transaction.transaction_id):
            logger.warning(f"Deposit tx {transaction.transaction_id}: duplicate transaction id, skipping")
            return ProcessingResult.IGNORED

        account.credit(transaction.amount)
        self._state.insert_record(
            DisputableRecord(
                transaction_id=transaction.transaction_id,
                client_id=transaction.client_id,
                amount=transaction.amount,
            )
        )
        return ProcessingResult.APPLIED

    def _handle_withdrawal(self, transaction: Transaction) -> ProcessingResult:
        # Only a deposit opens an account, there is nothing to withdraw from otherwise
        account = self._state.get_account(transaction.client_id)
        if account is None:
            logger.info(f"Withdrawal tx {transaction.transaction_id}: unknown client {transaction.client_id}")
            return ProcessingResult.IGNORED

        if account.locked:
            logger.info(f"Withdrawal tx {transaction.transaction_id}: account {account.client_id} is locked")
            return ProcessingResult.IGNORED

        if self._state.has_transaction(transaction.transaction_id):
            logger.warning(f"Withdrawal tx {transaction.transaction_id}: duplicate transaction id, skipping")
            return ProcessingResult.IGNORED

        if account.available < transaction.amount:
            logger.info(f"Withdrawal tx {transaction.transaction_id}: insufficient funds ({account.available} < {transaction.amount})")
            return ProcessingResult.IGNORED

        account.debit(transaction.amount)
        if self._allow_withdrawal_disputes:
            self._state.insert_record(
                DisputableRecord(
                    transaction_id=transaction.transaction_id,
                    client_id=transaction.client_id,
                    amount=transaction.amount,
                    transaction_type=TransactionType.WITHDRAWAL,
                )
            )
        else:
            self._state.mark_transaction_seen(transaction.transaction_id)
        return ProcessingResult.APPLIED

    def _handle_dispute(self, transaction: Transaction) -> ProcessingResult:
        found = self._find_disputed_target(transaction, DisputeState.NONE)
        if found is None:
            return ProcessingResult.IGNORED
        account, record = found

        if record.transaction_type == TransactionType.WITHDRAWAL:
            account.hold_withdrawal(record.amount)
        else:
            # Holding more than is available would drive the available balance negative
            if account.available < record.amount:
                logger.info(f"Dispute for tx {transaction.transaction_id}: insufficient available funds to hold {record.amount}")
                return ProcessingResult.IGNORED
            account.hold_deposit(record.amount)

        record.dispute_state = DisputeState.DISPUTED
        return ProcessingResult.APPLIED

    def _handle_resolve(self, transaction: Transaction) -> ProcessingResult:
        found = self._find_disputed_target(transaction, DisputeState.DISPUTED)
        if found is None:
            return ProcessingResult.IGNORED
        account, record = found

        if record.transaction_type == TransactionType.WITHDRAWAL:
            account.release_withdrawal(record.amount)
        else:
            account.release_deposit(record.amount)
        record.dispute_state = DisputeState.NONE
        return ProcessingResult.APPLIED

    def _handle_chargeback(self, transaction: Transaction) -> ProcessingResult:
        found = self._find_disputed_target(transaction, DisputeState.DISPUTED)
        if found is None:
            return ProcessingResult.IGNORED
        account, record = found

        # A charged-back withdrawal returns the funds, a charged-back deposit removes them
        if record.transaction_type == TransactionType.WITHDRAWAL:
            account.charge_back_withdrawal(record.amount)
        else:
            account.charge_back_deposit(record.amount)
        account.lock()
        record.dispute_state = DisputeState.CHARGED_BACK
        return ProcessingResult.APPLIED

    def _find_disputed_target(self, transaction: Transaction, expected_state: DisputeState):
        """
        Look up the record a dispute/resolve/chargeback refers to.
        Returns (account, record), or None when the transaction must be ignored.
        """
        kind = transaction.transaction_type.value.capitalize()
        record = self._state.get_record(transaction.transaction_id)

        if record is None:
            logger.info(f"{kind} for tx {transaction.transaction_id}: no disputable transaction with that id")
            return None

        if record.client_id != transaction.client_id:
            logger.warning(f"{kind} for tx {transaction.transaction_id}: client mismatch (expected {record.client_id}, got {transaction.client_id})")
            return None

        if record.dispute_state != expected_state:
            logger.info(f"{kind} for tx {transaction.transaction_id}: transaction is {record.dispute_state.value}")
            return None

        account = self._state.get_account(record.client_id)
        if account is None:
            logger.warning(f"{kind} for tx {transaction.transaction_id}: no account for client {record.client_id}")
            return None

        if account.locked and not self._allow_disputes_on_locked:
            logger.info(f"{kind} for tx {transaction.transaction_id}: account {account.client_id} is locked")
            return None

        return account, record
