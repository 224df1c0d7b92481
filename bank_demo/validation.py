"""
Input Validation Module

Amount normalisation and the input checks shared by every store, so that the
in-memory and document-backed variants fail the same way in the same order.
"""

from decimal import Decimal, InvalidOperation
from typing import Any, Union

from .errors import (
    EmptyOwnerError, NegativeInitialBalanceError, ZeroOrNegativeAmountError,
    InvalidAmountError, InvalidTransactionTypeError, SameSourceDestinationError
)
from .models import TransactionType


AmountLike = Union[Decimal, int, float, str]


def to_amount(value: AmountLike) -> Decimal:
    """
    Convert a caller-supplied amount to Decimal.

    Floats go through str() so 0.1 becomes Decimal('0.1') rather than its
    binary expansion. NaN, infinities, booleans and non-numeric values are
    rejected.
    """
    if isinstance(value, bool):
        raise InvalidAmountError(value)
    if isinstance(value, Decimal):
        amount = value
    else:
        try:
            amount = Decimal(str(value).strip())
        except (InvalidOperation, ValueError):
            raise InvalidAmountError(value) from None
    if not amount.is_finite():
        raise InvalidAmountError(value)
    return amount


def to_transaction_type(value: Union[TransactionType, str]) -> TransactionType:
    """Resolve a transaction type from its enum member or string value"""
    if isinstance(value, TransactionType):
        return value
    try:
        return TransactionType(value)
    except ValueError:
        raise InvalidTransactionTypeError(value) from None


def validate_account_input(owner: str, initial_balance: AmountLike) -> Decimal:
    """Check account creation input and return the normalised balance"""
    if not owner:
        raise EmptyOwnerError(owner)
    balance = to_amount(initial_balance)
    if balance < 0:
        raise NegativeInitialBalanceError(balance)
    return balance


def validate_transaction(transaction_type: Union[TransactionType, str],
                         amount: AmountLike) -> tuple:
    """
    Check a deposit/withdrawal request.

    The type is checked before the amount.

    Returns:
        (TransactionType, Decimal amount)
    """
    tx_type = to_transaction_type(transaction_type)
    value = to_amount(amount)
    if value <= 0:
        raise ZeroOrNegativeAmountError(value)
    return tx_type, value


def validate_transfer(from_account_id: str, to_account_id: str, amount: AmountLike) -> Decimal:
    """Check a transfer request; the amount is checked before the account pair"""
    value = to_amount(amount)
    if value <= 0:
        raise ZeroOrNegativeAmountError(value)
    if from_account_id == to_account_id:
        raise SameSourceDestinationError(from_account_id)
    return value
