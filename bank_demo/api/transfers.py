"""
Transfer endpoints
"""

from fastapi import APIRouter, Depends

from .dependencies import get_bank_store, http_error
from .schemas import TransferRequest
from ..errors import BankError
from ..logging_config import get_logger, log_action
from ..store import BankStore


router = APIRouter()
logger = get_logger("bank_demo.api")


@router.post("/transfer")
def transfer(
    request: TransferRequest,
    store: BankStore = Depends(get_bank_store)
):
    """Transfer funds from one account to another"""
    log_action(
        logger, "info", "Initiating fund transfer", action="transfer_funds",
        extra={
            "from_account_id": request.from_account_id,
            "to_account_id": request.to_account_id,
            "amount": str(request.amount)
        }
    )
    try:
        store.transfer_funds(request.from_account_id, request.to_account_id, request.amount)
    except BankError as e:
        logger.warning("Failed to transfer funds: %s", e)
        raise http_error(e)

    return {"message": "Transfer successful"}
