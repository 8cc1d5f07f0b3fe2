"""
PayDesk - Transaction Schemas

Pydantic schemas for payroll transactions (advances, loans, bonuses and
deductions). Transaction dates are exposed as ``date`` on the wire.
"""

import datetime as dt
from decimal import Decimal
from typing import List, Optional

from pydantic import AliasChoices, BaseModel, Field, field_validator

from app.models.payroll import TransactionStatus, TransactionType


class TransactionCreate(BaseModel):
    """Create transaction request."""
    employee_id: str = Field(
        ...,
        min_length=1,
        validation_alias=AliasChoices("employee_id", "employeeId"),
    )
    date: dt.date
    type: TransactionType
    amount: Decimal = Field(..., gt=0, max_digits=15, decimal_places=2)
    description: str = Field(..., min_length=1, max_length=500)
    status: TransactionStatus = TransactionStatus.PENDING

    @field_validator("description")
    @classmethod
    def _strip_description(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("must not be blank")
        return v


class TransactionUpdate(BaseModel):
    """Partial transaction update. Any status may be set."""
    date: Optional[dt.date] = None
    type: Optional[TransactionType] = None
    amount: Optional[Decimal] = Field(None, gt=0, max_digits=15, decimal_places=2)
    description: Optional[str] = Field(None, min_length=1, max_length=500)
    status: Optional[TransactionStatus] = None


class TransactionResponse(BaseModel):
    """Transaction response with the employee name resolved by join."""
    id: str
    company_id: str
    employee_id: str
    employee_name: str
    date: dt.date
    type: TransactionType
    amount: Decimal
    description: str
    status: TransactionStatus


class TransactionListResponse(BaseModel):
    """Transaction list response."""
    transactions: List[TransactionResponse]
    total: int
