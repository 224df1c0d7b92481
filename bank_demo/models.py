"""
Domain Models Module

Account and Transaction records shared by every store implementation.
All monetary values are Decimal and are serialised as strings.
"""

from dataclasses import dataclass, replace
from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import Any, Dict

from .errors import InsufficientFundsError, InvalidTransactionTypeError


class TransactionType(Enum):
    """Balance-affecting operations"""
    DEPOSIT = "deposit"
    WITHDRAWAL = "withdrawal"


@dataclass
class Account:
    """
    Named balance-holding entity.

    Balance changes only go through deposit/withdraw/apply, and withdraw
    refuses to take the balance below zero.
    """
    id: str
    owner: str
    balance: Decimal

    def deposit(self, amount: Decimal) -> None:
        self.balance += amount

    def withdraw(self, amount: Decimal) -> None:
        if self.balance < amount:
            raise InsufficientFundsError(self.id, self.balance, amount)
        self.balance -= amount

    def apply(self, transaction_type: TransactionType, amount: Decimal) -> None:
        """Apply a deposit or withdrawal to this account"""
        if transaction_type == TransactionType.DEPOSIT:
            self.deposit(amount)
        elif transaction_type == TransactionType.WITHDRAWAL:
            self.withdraw(amount)
        else:
            raise InvalidTransactionTypeError(transaction_type)

    def copy(self) -> 'Account':
        return replace(self)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "owner": self.owner,
            "balance": str(self.balance),
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'Account':
        return cls(
            id=data["id"],
            owner=data["owner"],
            balance=Decimal(data["balance"]),
        )


@dataclass(frozen=True)
class Transaction:
    """Immutable record of one deposit or withdrawal on one account"""
    id: str
    account_id: str
    transaction_type: TransactionType
    amount: Decimal
    timestamp: datetime

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "account_id": self.account_id,
            "type": self.transaction_type.value,
            "amount": str(self.amount),
            "timestamp": self.timestamp.isoformat(),
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'Transaction':
        return cls(
            id=data["id"],
            account_id=data["account_id"],
            transaction_type=TransactionType(data["type"]),
            amount=Decimal(data["amount"]),
            timestamp=datetime.fromisoformat(data["timestamp"]),
        )
