from dataclasses import dataclass
from decimal import Context, Decimal
from enum import Enum
from typing import Optional

FOUR_PLACES = Decimal("0.0001")

# Largest accepted amount: 2**96 - 1, with up to four fractional digits.
MAX_AMOUNT = Decimal(2**96 - 1)

# Balances are sums of amounts up to MAX_AMOUNT (29 integer digits + 4
# fractional), so 64 digits keeps every sum exact.
LEDGER_CONTEXT = Context(prec=64)


class TransactionType(Enum):
    DEPOSIT = "deposit"
    WITHDRAWAL = "withdrawal"
    DISPUTE = "dispute"
    RESOLVE = "resolve"
    CHARGEBACK = "chargeback"

    @property
    def carries_amount(self) -> bool:
        return self in (TransactionType.DEPOSIT, TransactionType.WITHDRAWAL)


class ProcessingResult(Enum):
    APPLIED = "applied"
    IGNORED = "ignored"


class DisputeState(Enum):
    NONE = "none"
    DISPUTED = "disputed"
    CHARGED_BACK = "charged_back"


@dataclass(frozen=True)
class Transaction:
    transaction_type: TransactionType
    client_id: int
    transaction_id: int
    amount: Optional[Decimal] = None

    def __repr__(self) -> str:
        amount = "" if self.amount is None else f" {self.amount}"
        return f"<{self.transaction_type.value} client={self.client_id} tx={self.transaction_id}{amount}>"


@dataclass
class DisputableRecord:
    """A deposit (or, by policy, a withdrawal) kept around so it can be disputed later."""

    transaction_id: int
    client_id: int
    amount: Decimal
    transaction_type: TransactionType = TransactionType.DEPOSIT
    dispute_state: DisputeState = DisputeState.NONE

    @property
    def is_disputed(self) -> bool:
        return self.dispute_state == DisputeState.DISPUTED


@dataclass
class ClientAccount:
    """
    Balances of one client. All arithmetic runs in LEDGER_CONTEXT, so no
    balance is ever rounded.

    A disputed deposit moves funds from available to held. A disputed
    withdrawal has already left the account: the amount is re-credited into
    held while the dispute is open, then either dropped (resolve) or released
    to available (chargeback).
    """

    client_id: int
    available: Decimal = Decimal("0")
    held: Decimal = Decimal("0")
    locked: bool = False

    @property
    def total(self) -> Decimal:
        return LEDGER_CONTEXT.add(self.available, self.held)

    def _move(self, available_delta: Decimal = Decimal("0"), held_delta: Decimal = Decimal("0")) -> None:
        self.available = LEDGER_CONTEXT.add(self.available, available_delta)
        self.held = LEDGER_CONTEXT.add(self.held, held_delta)

    def credit(self, amount: Decimal) -> None:
        self._move(available_delta=amount)

    def debit(self, amount: Decimal) -> None:
        self._move(available_delta=LEDGER_CONTEXT.minus(amount))

    def hold_deposit(self, amount: Decimal) -> None:
        self._move(available_delta=LEDGER_CONTEXT.minus(amount), held_delta=amount)

    def release_deposit(self, amount: Decimal) -> None:
        self._move(available_delta=amount, held_delta=LEDGER_CONTEXT.minus(amount))

    def charge_back_deposit(self, amount: Decimal) -> None:
        self._move(held_delta=LEDGER_CONTEXT.minus(amount))

    def hold_withdrawal(self, amount: Decimal) -> None:
        self._move(held_delta=amount)

    def release_withdrawal(self, amount: Decimal) -> None:
        self._move(held_delta=LEDGER_CONTEXT.minus(amount))

    def charge_back_withdrawal(self, amount: Decimal) -> None:
        self._move(available_delta=amount, held_delta=LEDGER_CONTEXT.minus(amount))

    def lock(self) -> None:
        self.locked = True

    def to_snapshot(self) -> "AccountSnapshot":
        available, held, total = (
            value.quantize(FOUR_PLACES, context=LEDGER_CONTEXT)
            for value in (self.available, self.held, self.total)
        )
        return AccountSnapshot(self.client_id, available, held, total, self.locked)


@dataclass(frozen=True)
class AccountSnapshot:
    """Read-only view of an account, balances fixed at four decimal places."""

    client_id: int
    available: Decimal
    held: Decimal
    total: Decimal
    locked: bool


class ProcessingStats:
    """Counters for tracking processing statistics."""

    def __init__(self):
        self.parsed = 0
        self.rejected = 0
        self.applied = 0
        self.ignored = 0

    def record_parsed(self):
        self.parsed += 1

    def record_rejected(self):
        self.rejected += 1

    def record_result(self, result: ProcessingResult):
        if result == ProcessingResult.APPLIED:
            self.applied += 1
        else:
            self.ignored += 1
