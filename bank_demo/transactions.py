"""
Transaction Journal Module

Append-only per-account history of deposits and withdrawals. The journal only
records; checking that the account exists is left to the caller.
"""

from datetime import datetime, timezone
from typing import Dict, List, Union
import uuid

from .errors import NoTransactionsForAccountError
from .locks import ReadWriteLock
from .models import Transaction, TransactionType
from .validation import AmountLike, validate_transaction


class TransactionJournal:
    """In-memory transaction journal keyed by account id"""

    def __init__(self):
        self._transactions: Dict[str, List[Transaction]] = {}
        self._lock = ReadWriteLock()

    def create_transaction(
        self,
        account_id: str,
        transaction_type: Union[TransactionType, str],
        amount: AmountLike
    ) -> Transaction:
        """Record a transaction and return it"""
        tx_type, value = validate_transaction(transaction_type, amount)

        transaction = Transaction(
            id=str(uuid.uuid4()),
            account_id=account_id,
            transaction_type=tx_type,
            amount=value,
            timestamp=datetime.now(timezone.utc)
        )

        with self._lock.write_locked():
            self._transactions.setdefault(account_id, []).append(transaction)

        return transaction

    def get_transactions_by_account_id(self, account_id: str) -> List[Transaction]:
        """
        Get an account's transactions in insertion order.

        Raises NoTransactionsForAccountError when nothing was recorded,
        whether or not the account exists.
        """
        with self._lock.read_locked():
            transactions = self._transactions.get(account_id)
            if not transactions:
                raise NoTransactionsForAccountError(account_id)
            return list(transactions)
