"""
PayDesk - Transactions Router

API endpoints for payroll transactions (advances, loans, bonuses and
deductions).
"""

from typing import Optional

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.database import get_async_session
from app.dependencies import get_current_user, require_staff_manager
from app.models.payroll import TransactionStatus, TransactionType
from app.models.user import User
from app.schemas.transaction import (
    TransactionCreate,
    TransactionListResponse,
    TransactionResponse,
    TransactionUpdate,
)
from app.services.transaction_service import TransactionService, transaction_to_dict


router = APIRouter()


@router.post(
    "",
    response_model=TransactionResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Record a transaction",
)
async def create_transaction(
    data: TransactionCreate,
    current_user: User = Depends(require_staff_manager),
    db: AsyncSession = Depends(get_async_session),
):
    transaction = await TransactionService(db).create_transaction(
        company_id=current_user.company_id,
        employee_id=data.employee_id,
        transaction_date=data.date,
        transaction_type=data.type,
        amount=data.amount,
        description=data.description,
        status=data.status,
        created_by_id=current_user.id,
    )
    return transaction_to_dict(transaction)


@router.get("", response_model=TransactionListResponse, summary="List transactions")
async def list_transactions(
    employee_id: Optional[str] = Query(None),
    type: Optional[TransactionType] = Query(None),
    status: Optional[TransactionStatus] = Query(None),
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_async_session),
):
    """Newest first. Employees only see their own transactions."""
    transactions = await TransactionService(db).list_transactions(
        current_user,
        employee_id=employee_id,
        transaction_type=type,
        status=status,
    )
    return TransactionListResponse(
        transactions=[transaction_to_dict(t) for t in transactions],
        total=len(transactions),
    )


@router.get("/{transaction_id}", response_model=TransactionResponse, summary="Get a transaction")
async def get_transaction(
    transaction_id: str,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_async_session),
):
    transaction = await TransactionService(db).get_transaction(current_user, transaction_id)
    return transaction_to_dict(transaction)


@router.patch("/{transaction_id}", response_model=TransactionResponse, summary="Update a transaction")
async def update_transaction(
    transaction_id: str,
    data: TransactionUpdate,
    current_user: User = Depends(require_staff_manager),
    db: AsyncSession = Depends(get_async_session),
):
    transaction = await TransactionService(db).update_transaction(
        current_user.company_id,
        transaction_id,
        updated_by_id=current_user.id,
        **data.model_dump(exclude_unset=True),
    )
    return transaction_to_dict(transaction)


@router.delete(
    "/{transaction_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete a transaction",
)
async def delete_transaction(
    transaction_id: str,
    current_user: User = Depends(require_staff_manager),
    db: AsyncSession = Depends(get_async_session),
):
    await TransactionService(db).delete_transaction(current_user.company_id, transaction_id)
