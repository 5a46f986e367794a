"""
Parsing and validation of raw transaction rows.

A row is a mapping of field name to string, as produced by csv.DictReader.
parse_record either returns a well-typed Transaction or raises RecordRejected;
it never touches ledger state.
"""
from decimal import Decimal, InvalidOperation
from typing import Mapping, Optional

from models import MAX_AMOUNT, Transaction, TransactionType

MAX_CLIENT_ID = 2**16 - 1
MAX_TRANSACTION_ID = 2**32 - 1
MAX_FRACTIONAL_DIGITS = 4


class PaymentsError(Exception):
    """Base class for errors raised by the payments engine."""


class RecordRejected(PaymentsError, ValueError):
    def __init__(self, reason: str, row: Optional[Mapping] = None):
        self.reason = reason
        self.row = row
        super().__init__(reason)


def parse_record(row: Mapping[str, Optional[str]]) -> Transaction:
    """
    Parse one raw row into a Transaction.

    Raises:
        RecordRejected: unknown type, missing or malformed ids, or an amount
            that is missing, negative, out of range, unparsable, too precise, or present on
            a dispute/resolve/chargeback.
    """
    # Extra columns on an overlong row arrive as a list under the None key; they are ignored
    normalized = {
        (key or "").strip(): (value or "").strip()
        for key, value in row.items()
        if not isinstance(value, list)
    }

    type_str = normalized.get("type", "")
    try:
        transaction_type = TransactionType(type_str)
    except ValueError:
        raise RecordRejected(f"unknown transaction type {type_str!r}", row) from None

    client_id = _parse_unsigned(normalized, "client", MAX_CLIENT_ID, row)
    transaction_id = _parse_unsigned(normalized, "tx", MAX_TRANSACTION_ID, row)

    amount_str = normalized.get("amount", "")
    if transaction_type.carries_amount:
        if not amount_str:
            raise RecordRejected(f"{type_str} tx {transaction_id}: amount is required", row)
        amount = parse_amount(amount_str, row)
    else:
        if amount_str:
            raise RecordRejected(f"{type_str} tx {transaction_id}: amount not allowed, got {amount_str!r}", row)
        amount = None

    return Transaction(
        transaction_type=transaction_type,
        client_id=client_id,
        transaction_id=transaction_id,
        amount=amount,
    )


def parse_amount(value: str, row: Optional[Mapping] = None) -> Decimal:
    """Parse a non-negative, finite decimal with at most four fractional digits."""
    try:
        amount = Decimal(value)
    except InvalidOperation:
        raise RecordRejected(f"amount {value!r} is not a decimal", row) from None

    if not amount.is_finite():
        raise RecordRejected(f"amount {value!r} is not finite", row)
    if amount < 0:
        raise RecordRejected(f"amount {value!r} is negative", row)
    if amount > MAX_AMOUNT:
        raise RecordRejected(f"amount {value!r} exceeds the maximum of {MAX_AMOUNT}", row)
    if _fractional_digits(amount) > MAX_FRACTIONAL_DIGITS:
        raise RecordRejected(f"amount {value!r} has more than {MAX_FRACTIONAL_DIGITS} decimal places", row)
    return amount


def _fractional_digits(amount: Decimal) -> int:
    # Trailing zeros don't count: "1.50000" is exactly 1.5
    _, digits, exponent = amount.as_tuple()
    if not any(digits):
        return 0
    while exponent < 0 and len(digits) > 1 and digits[-1] == 0:
        digits = digits[:-1]
        exponent += 1
    return max(-exponent, 0)


def _parse_unsigned(normalized: Mapping[str, str], field: str, maximum: int, row: Mapping) -> int:
    value = normalized.get(field, "")
    if not value:
        raise RecordRejected(f"{field} is required", row)
    if not (value.isascii() and value.isdigit()):
        raise RecordRejected(f"{field} {value!r} is not an unsigned integer", row)
    number = int(value)
    if number > maximum:
        raise RecordRejected(f"{field} {value!r} is out of range (max {maximum})", row)
    return number
