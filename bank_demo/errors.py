"""
Bank Error Module

Exception classes for every expected failure of the ledger engine. All of them
derive from BankError and fall into three groups: validation errors (bad input,
detected before any mutation), not-found errors (referenced entity absent) and
business-rule errors (detected before any partial mutation is committed).
"""

from decimal import Decimal
from typing import Any, Optional


def _format_amount(value: Any) -> str:
    """Render an amount with two decimals when it is numeric"""
    try:
        return f"{Decimal(str(value)):.2f}"
    except (ArithmeticError, ValueError):
        return str(value)


class BankError(Exception):
    """Base class for all bank errors"""

    def __init__(self, message: str, account_id: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.account_id = account_id


class BankValidationError(BankError):
    """Caller supplied malformed input"""


class BankNotFoundError(BankError):
    """Referenced entity does not exist"""


class BusinessRuleError(BankError):
    """Operation violates a balance rule"""


# Validation errors

class EmptyOwnerError(BankValidationError):
    def __init__(self, owner: str = ""):
        super().__init__("owner name cannot be empty")
        self.owner = owner


class NegativeInitialBalanceError(BankValidationError):
    def __init__(self, initial_balance: Any):
        super().__init__(
            f"initial balance cannot be negative: initial balance {_format_amount(initial_balance)}"
        )
        self.initial_balance = initial_balance


class ZeroOrNegativeAmountError(BankValidationError):
    def __init__(self, amount: Any):
        super().__init__(
            f"transaction amount must be greater than zero: amount {_format_amount(amount)}"
        )
        self.amount = amount


class InvalidAmountError(BankValidationError):
    """Amount is not a finite number"""

    def __init__(self, amount: Any):
        super().__init__(f"amount must be a finite number: {amount!r}")
        self.amount = amount


class InvalidTransactionTypeError(BankValidationError):
    def __init__(self, transaction_type: Any):
        super().__init__(f"invalid transaction type: transaction type {transaction_type}")
        self.transaction_type = transaction_type


class SameSourceDestinationError(BankValidationError):
    def __init__(self, account_id: str):
        super().__init__(
            f"source and destination account cannot be the same: account ID {account_id}",
            account_id=account_id
        )


# Not-found errors

class AccountNotFoundError(BankNotFoundError):
    def __init__(self, account_id: str):
        super().__init__(f"account not found: account ID {account_id}", account_id=account_id)


class TransferSourceNotFoundError(BankNotFoundError):
    def __init__(self, account_id: str):
        super().__init__(
            f"transfer source account not found: account ID {account_id}",
            account_id=account_id
        )


class TransferDestinationNotFoundError(BankNotFoundError):
    def __init__(self, account_id: str):
        super().__init__(
            f"transfer destination account not found: account ID {account_id}",
            account_id=account_id
        )


class NoTransactionsForAccountError(BankNotFoundError):
    def __init__(self, account_id: str):
        super().__init__(
            f"no transactions found in provided account: account ID {account_id}",
            account_id=account_id
        )


# Business-rule errors

class InsufficientFundsError(BusinessRuleError):
    def __init__(self, account_id: str, balance: Decimal, amount: Decimal):
        super().__init__(
            f"insufficient funds: account ID {account_id}, "
            f"balance {_format_amount(balance)}, attempted {_format_amount(amount)}",
            account_id=account_id
        )
        self.balance = balance
        self.amount = amount
