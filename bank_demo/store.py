"""
Bank Store Module

The BankStore contract consumed by the HTTP layer, and its two variants:
InMemoryBankStore, composing an AccountLedger and a TransactionJournal, and
DocumentBankStore, the same contract over a document storage backend. Both
variants share the validation helpers and error classes, so callers cannot
tell them apart by their failures.
"""

from abc import ABC, abstractmethod
from datetime import datetime, timezone
from typing import List, Optional, Union
import threading
import uuid

from .accounts import AccountLedger
from .config import BankDemoConfig
from .errors import (
    AccountNotFoundError, NoTransactionsForAccountError,
    TransferSourceNotFoundError, TransferDestinationNotFoundError
)
from .logging_config import get_logger, log_action
from .models import Account, Transaction, TransactionType
from .storage import StorageInterface, SQLiteStorage
from .transactions import TransactionJournal
from .validation import (
    AmountLike, validate_account_input, validate_transaction, validate_transfer
)


class BankStore(ABC):
    """Accounts, transactions and transfers behind one interface"""

    backend_name = "abstract"

    @abstractmethod
    def create_account(self, owner: str, initial_balance: AmountLike) -> Account:
        pass

    @abstractmethod
    def get_account_by_id(self, account_id: str) -> Account:
        pass

    @abstractmethod
    def list_accounts(self) -> List[Account]:
        pass

    @abstractmethod
    def perform_transaction(
        self,
        account_id: str,
        transaction_type: Union[TransactionType, str],
        amount: AmountLike
    ) -> Transaction:
        pass

    @abstractmethod
    def get_transactions_by_account_id(self, account_id: str) -> List[Transaction]:
        pass

    @abstractmethod
    def transfer_funds(self, from_account_id: str, to_account_id: str, amount: AmountLike) -> None:
        pass

    def close(self) -> None:
        """Release resources (default no-op)"""


class InMemoryBankStore(BankStore):
    """
    Facade over an in-memory ledger and journal.

    A transaction record is created if and only if the matching balance
    change succeeded. Transfers are not journaled.
    """

    backend_name = "memory"

    def __init__(
        self,
        ledger: Optional[AccountLedger] = None,
        journal: Optional[TransactionJournal] = None
    ):
        self.ledger = ledger if ledger is not None else AccountLedger()
        self.journal = journal if journal is not None else TransactionJournal()
        self.logger = get_logger("bank_demo.store")

    def create_account(self, owner: str, initial_balance: AmountLike) -> Account:
        account = self.ledger.create_account(owner, initial_balance)
        log_action(
            self.logger, "info", "Account created",
            action="create_account", resource=f"account:{account.id}",
            extra={"owner": account.owner, "balance": str(account.balance)}
        )
        return account

    def get_account_by_id(self, account_id: str) -> Account:
        return self.ledger.get_account_by_id(account_id)

    def list_accounts(self) -> List[Account]:
        return self.ledger.list_accounts()

    def perform_transaction(
        self,
        account_id: str,
        transaction_type: Union[TransactionType, str],
        amount: AmountLike
    ) -> Transaction:
        """
        Apply a deposit or withdrawal and journal it.

        Args:
            account_id: Account to change
            transaction_type: deposit or withdrawal
            amount: Positive amount

        Returns:
            The journaled Transaction
        """
        account = self.ledger.get_account_by_id(account_id)
        self.ledger.perform_transaction(account, transaction_type, amount)
        transaction = self.journal.create_transaction(account_id, transaction_type, amount)

        log_action(
            self.logger, "info", f"Transaction performed: {transaction.transaction_type.value}",
            action="perform_transaction", resource=f"transaction:{transaction.id}",
            extra={
                "account_id": account_id,
                "amount": str(transaction.amount),
                "balance": str(account.balance)
            }
        )
        return transaction

    def get_transactions_by_account_id(self, account_id: str) -> List[Transaction]:
        return self.journal.get_transactions_by_account_id(account_id)

    def transfer_funds(self, from_account_id: str, to_account_id: str, amount: AmountLike) -> None:
        self.ledger.transfer_between_accounts(from_account_id, to_account_id, amount)
        log_action(
            self.logger, "info", "Funds transferred",
            action="transfer_funds", resource=f"account:{from_account_id}",
            extra={"to_account_id": to_account_id, "amount": str(amount)}
        )


class DocumentBankStore(BankStore):
    """
    Bank store persisted as documents in a StorageInterface backend.

    Mutations are serialised by a store lock and run inside storage.atomic(),
    so a transfer writes both accounts or neither, and a deposit or
    withdrawal writes the balance and its transaction record together.
    """

    backend_name = "document"
    accounts_collection = "accounts"
    transactions_collection = "transactions"

    def __init__(self, storage: StorageInterface):
        self.storage = storage
        self._lock = threading.RLock()
        self.logger = get_logger("bank_demo.store")

    def _load_account(self, account_id: str) -> Optional[Account]:
        data = self.storage.load(self.accounts_collection, account_id)
        return Account.from_dict(data) if data else None

    def _save_account(self, account: Account) -> None:
        self.storage.save(self.accounts_collection, account.id, account.to_dict())

    def create_account(self, owner: str, initial_balance: AmountLike) -> Account:
        balance = validate_account_input(owner, initial_balance)
        account = Account(id=str(uuid.uuid4()), owner=owner, balance=balance)

        with self._lock:
            self._save_account(account)

        log_action(
            self.logger, "info", "Account created",
            action="create_account", resource=f"account:{account.id}",
            extra={"owner": account.owner, "balance": str(account.balance)}
        )
        return account

    def get_account_by_id(self, account_id: str) -> Account:
        account = self._load_account(account_id)
        if account is None:
            raise AccountNotFoundError(account_id)
        return account

    def list_accounts(self) -> List[Account]:
        return [Account.from_dict(data) for data in self.storage.load_all(self.accounts_collection)]

    def perform_transaction(
        self,
        account_id: str,
        transaction_type: Union[TransactionType, str],
        amount: AmountLike
    ) -> Transaction:
        self.get_account_by_id(account_id)
        tx_type, value = validate_transaction(transaction_type, amount)

        with self._lock, self.storage.atomic():
            account = self._load_account(account_id)
            if account is None:
                raise AccountNotFoundError(account_id)
            account.apply(tx_type, value)

            transaction = Transaction(
                id=str(uuid.uuid4()),
                account_id=account_id,
                transaction_type=tx_type,
                amount=value,
                timestamp=datetime.now(timezone.utc)
            )
            self._save_account(account)
            self.storage.save(self.transactions_collection, transaction.id, transaction.to_dict())

        log_action(
            self.logger, "info", f"Transaction performed: {tx_type.value}",
            action="perform_transaction", resource=f"transaction:{transaction.id}",
            extra={"account_id": account_id, "amount": str(value), "balance": str(account.balance)}
        )
        return transaction

    def get_transactions_by_account_id(self, account_id: str) -> List[Transaction]:
        documents = self.storage.find(self.transactions_collection, {"account_id": account_id})
        if not documents:
            raise NoTransactionsForAccountError(account_id)
        return [Transaction.from_dict(data) for data in documents]

    def transfer_funds(self, from_account_id: str, to_account_id: str, amount: AmountLike) -> None:
        value = validate_transfer(from_account_id, to_account_id, amount)

        with self._lock, self.storage.atomic():
            source = self._load_account(from_account_id)
            if source is None:
                raise TransferSourceNotFoundError(from_account_id)

            destination = self._load_account(to_account_id)
            if destination is None:
                raise TransferDestinationNotFoundError(to_account_id)

            source.withdraw(value)
            destination.deposit(value)
            self._save_account(source)
            self._save_account(destination)

        log_action(
            self.logger, "info", "Funds transferred",
            action="transfer_funds", resource=f"account:{from_account_id}",
            extra={"to_account_id": to_account_id, "amount": str(value)}
        )

    def close(self) -> None:
        self.storage.close()


def create_bank_store(config: BankDemoConfig) -> BankStore:
    """Build the store selected by configuration"""
    backend = config.storage_backend.lower()
    if backend == "memory":
        return InMemoryBankStore()
    if backend == "sqlite":
        return DocumentBankStore(SQLiteStorage(config.database_path))
    raise ValueError(f"Unknown storage backend: {config.storage_backend}")
