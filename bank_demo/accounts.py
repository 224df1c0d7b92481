"""
Account Ledger Module

Owns account records and their balances. Balance changes are applied under an
exclusive lock so concurrent callers never lose updates, and transfers move
funds between two accounts as a single all-or-nothing step.
"""

from decimal import Decimal
from typing import Dict, List, Union
import uuid

from .errors import (
    AccountNotFoundError, TransferSourceNotFoundError, TransferDestinationNotFoundError
)
from .locks import ReadWriteLock
from .logging_config import get_logger
from .models import Account, TransactionType
from .validation import (
    AmountLike, validate_account_input, validate_transaction, validate_transfer
)


class AccountLedger:
    """
    In-memory account ledger.

    Every read returns a copy so callers cannot change stored balances
    without going through the ledger's own operations.
    """

    def __init__(self):
        self._accounts: Dict[str, Account] = {}
        self._lock = ReadWriteLock()
        self.logger = get_logger("bank_demo.ledger")

    def create_account(self, owner: str, initial_balance: AmountLike) -> Account:
        """
        Create a new account

        Args:
            owner: Display name of the account owner, must not be empty
            initial_balance: Opening balance, must not be negative

        Returns:
            Copy of the created Account
        """
        balance = validate_account_input(owner, initial_balance)
        account = Account(id=str(uuid.uuid4()), owner=owner, balance=balance)

        with self._lock.write_locked():
            self._accounts[account.id] = account

        self.logger.debug("Account %s created for %s", account.id, owner)
        return account.copy()

    def get_account_by_id(self, account_id: str) -> Account:
        """Get a copy of an account, raising AccountNotFoundError if absent"""
        with self._lock.read_locked():
            account = self._accounts.get(account_id)
            if account is None:
                raise AccountNotFoundError(account_id)
            return account.copy()

    def list_accounts(self) -> List[Account]:
        """Snapshot of all accounts; order is not defined"""
        with self._lock.read_locked():
            return [account.copy() for account in self._accounts.values()]

    def perform_transaction(
        self,
        account: Account,
        transaction_type: Union[TransactionType, str],
        amount: AmountLike
    ) -> None:
        """
        Apply a deposit or withdrawal to an account.

        The stored record is re-read under the exclusive lock, so the balance
        the caller fetched earlier is never written back over a newer one.
        On success the caller's account object carries the new balance.
        """
        tx_type, value = validate_transaction(transaction_type, amount)

        with self._lock.write_locked():
            stored = self._accounts.get(account.id)
            if stored is None:
                raise AccountNotFoundError(account.id)

            updated = stored.copy()
            updated.apply(tx_type, value)
            self._accounts[account.id] = updated

        account.balance = updated.balance

    def transfer_between_accounts(
        self,
        from_account_id: str,
        to_account_id: str,
        amount: AmountLike
    ) -> None:
        """
        Move funds from one account to another.

        Both legs run under one exclusive lock acquisition and are computed on
        copies; nothing is written unless both succeed.
        """
        value = validate_transfer(from_account_id, to_account_id, amount)

        with self._lock.write_locked():
            source = self._accounts.get(from_account_id)
            if source is None:
                raise TransferSourceNotFoundError(from_account_id)

            destination = self._accounts.get(to_account_id)
            if destination is None:
                raise TransferDestinationNotFoundError(to_account_id)

            new_source = source.copy()
            new_destination = destination.copy()
            new_source.withdraw(value)
            new_destination.deposit(value)

            self._accounts[from_account_id] = new_source
            self._accounts[to_account_id] = new_destination

        self.logger.debug(
            "Transferred %s from %s to %s", value, from_account_id, to_account_id
        )
