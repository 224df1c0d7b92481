"""
Account and transaction endpoints
"""

from fastapi import APIRouter, Depends, status

from .dependencies import get_bank_store, http_error
from .schemas import CreateAccountRequest, CreateTransactionRequest
from ..errors import BankError
from ..logging_config import get_logger, log_action
from ..store import BankStore


router = APIRouter()
logger = get_logger("bank_demo.api")


@router.post("", status_code=status.HTTP_201_CREATED)
def create_account(
    request: CreateAccountRequest,
    store: BankStore = Depends(get_bank_store)
):
    """Create a new account with an initial balance"""
    log_action(
        logger, "info", "Creating account", action="create_account",
        extra={"owner": request.owner, "initial_balance": str(request.initial_balance)}
    )
    try:
        account = store.create_account(request.owner, request.initial_balance)
    except BankError as e:
        logger.warning("Failed to create account: %s", e)
        raise http_error(e)

    return account.to_dict()


@router.get("")
def list_accounts(store: BankStore = Depends(get_bank_store)):
    """List all accounts"""
    accounts = store.list_accounts()
    logger.info("Listed %d accounts", len(accounts))
    return [account.to_dict() for account in accounts]


@router.get("/{account_id}")
def get_account(
    account_id: str,
    store: BankStore = Depends(get_bank_store)
):
    """Get account details"""
    try:
        account = store.get_account_by_id(account_id)
    except BankError as e:
        logger.warning("Account lookup failed: %s", e)
        raise http_error(e)

    return account.to_dict()


@router.post("/{account_id}/transactions", status_code=status.HTTP_201_CREATED)
def create_transaction(
    account_id: str,
    request: CreateTransactionRequest,
    store: BankStore = Depends(get_bank_store)
):
    """Make a deposit or withdrawal on an account"""
    log_action(
        logger, "info", "Creating transaction", action="perform_transaction",
        resource=f"account:{account_id}",
        extra={"transaction_type": request.type, "amount": str(request.amount)}
    )
    try:
        transaction = store.perform_transaction(account_id, request.type, request.amount)
    except BankError as e:
        logger.warning("Failed to create transaction on %s: %s", account_id, e)
        raise http_error(e)

    return transaction.to_dict()


@router.get("/{account_id}/transactions")
def get_account_transactions(
    account_id: str,
    store: BankStore = Depends(get_bank_store)
):
    """Get transaction history for an account"""
    try:
        transactions = store.get_transactions_by_account_id(account_id)
    except BankError as e:
        logger.warning("Transactions not found: %s", e)
        raise http_error(e)

    return [txn.to_dict() for txn in transactions]
