"""
Shared API dependencies
"""

from fastapi import HTTPException, Request, status

from ..errors import BankError, BankNotFoundError, BankValidationError
from ..store import BankStore


def get_bank_store(request: Request) -> BankStore:
    """Bank store attached to the running application"""
    return request.app.state.bank_store


def http_error(error: BankError) -> HTTPException:
    """Map a bank error onto an HTTP error response"""
    if isinstance(error, BankNotFoundError):
        code = status.HTTP_404_NOT_FOUND
    elif isinstance(error, BankValidationError):
        code = status.HTTP_400_BAD_REQUEST
    else:
        code = status.HTTP_500_INTERNAL_SERVER_ERROR
    return HTTPException(status_code=code, detail=error.message)
