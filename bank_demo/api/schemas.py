"""
Pydantic schemas for API requests

Missing fields fall back to empty values so that the ledger reports the
validation error (empty owner, zero amount, ...) instead of the request
being rejected as unparseable.
"""

from decimal import Decimal
from pydantic import BaseModel, Field


class CreateAccountRequest(BaseModel):
    owner: str = ""
    initial_balance: Decimal = Field(Decimal("0"), description="Opening balance, number or numeric string")


class CreateTransactionRequest(BaseModel):
    type: str = Field("", description="Transaction type (deposit, withdrawal)")
    amount: Decimal = Field(Decimal("0"), description="Positive amount, number or numeric string")


class TransferRequest(BaseModel):
    from_account_id: str = ""
    to_account_id: str = ""
    amount: Decimal = Field(Decimal("0"), description="Positive amount, number or numeric string")
