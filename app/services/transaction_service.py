"""
PayDesk - Transaction Service

Payroll transaction CRUD scoped to a company. Every read joins the employee
so the employee name and business id are always current.
"""

import logging
from datetime import date
from decimal import Decimal
from typing import Any, Dict, List, Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import joinedload

from app.models.payroll import (
    Employee,
    PayrollTransaction,
    TransactionStatus,
    TransactionType,
)
from app.models.user import User
from app.services.change_feed import ChangeAction, Collection, publish_change
from app.services.employee_service import EmployeeService
from app.utils.error_handling import (
    AuthorizationException,
    TransactionNotFoundException,
    validate_amount,
)

logger = logging.getLogger(__name__)


def transaction_to_dict(transaction: PayrollTransaction) -> Dict[str, Any]:
    """Wire representation; expects the employee to be loaded."""
    return {
        "id": transaction.id,
        "company_id": transaction.company_id,
        "employee_id": transaction.employee_id,
        "employee_name": transaction.employee_name,
        "date": transaction.transaction_date,
        "type": TransactionType(transaction.type),
        "amount": transaction.amount,
        "description": transaction.description,
        "status": TransactionStatus(transaction.status),
    }


def _event_payload(transaction: PayrollTransaction) -> Dict[str, Any]:
    data = transaction_to_dict(transaction)
    data["date"] = data["date"].isoformat()
    data["type"] = data["type"].value
    data["status"] = data["status"].value
    data["amount"] = str(data["amount"])
    return data


class TransactionService:
    """Service for payroll transaction operations."""

    def __init__(self, db: AsyncSession):
        self.db = db
        self.employee_service = EmployeeService(db)

    def _base_query(self, company_id: str):
        return (
            select(PayrollTransaction)
            .join(Employee, PayrollTransaction.employee_ref_id == Employee.id)
            .options(joinedload(PayrollTransaction.employee))
            .where(PayrollTransaction.company_id == company_id)
        )

    async def _load(self, company_id: str, transaction_id: str) -> PayrollTransaction:
        result = await self.db.execute(
            self._base_query(company_id)
            .where(PayrollTransaction.id == transaction_id)
            .execution_options(populate_existing=True)
        )
        transaction = result.scalar_one_or_none()
        if not transaction:
            raise TransactionNotFoundException(transaction_id)
        return transaction

    # ===========================================
    # READS
    # ===========================================

    async def list_transactions(
        self,
        principal: User,
        employee_id: Optional[str] = None,
        transaction_type: Optional[TransactionType] = None,
        status: Optional[TransactionStatus] = None,
    ) -> List[PayrollTransaction]:
        """
        Transactions of the principal's company, newest first.

        Employee-role principals only get their own transactions.
        """
        if not principal.can_manage_staff:
            if employee_id and employee_id != principal.employee_id:
                raise AuthorizationException("You can only view your own transactions")
            employee_id = principal.employee_id

        query = self._base_query(principal.company_id)
        if employee_id:
            query = query.where(Employee.employee_id == employee_id)
        if transaction_type:
            query = query.where(PayrollTransaction.type == transaction_type)
        if status:
            query = query.where(PayrollTransaction.status == status)

        result = await self.db.execute(
            query.order_by(
                PayrollTransaction.transaction_date.desc(),
                PayrollTransaction.id,
            )
        )
        return list(result.scalars().all())

    async def get_transaction(self, principal: User, transaction_id: str) -> PayrollTransaction:
        transaction = await self._load(principal.company_id, transaction_id)
        if not principal.can_manage_staff and transaction.employee_id != principal.employee_id:
            raise AuthorizationException("You can only view your own transactions")
        return transaction

    async def get_employee_transactions(
        self,
        company_id: str,
        employee_id: str,
    ) -> List[PayrollTransaction]:
        """All transactions of one employee regardless of date or status."""
        result = await self.db.execute(
            self._base_query(company_id)
            .where(Employee.employee_id == employee_id)
            .order_by(PayrollTransaction.transaction_date, PayrollTransaction.id)
        )
        return list(result.scalars().all())

    # ===========================================
    # WRITES
    # ===========================================

    async def create_transaction(
        self,
        company_id: str,
        employee_id: str,
        transaction_date: date,
        transaction_type: TransactionType,
        amount: Decimal,
        description: str,
        status: TransactionStatus = TransactionStatus.PENDING,
        created_by_id: Optional[str] = None,
    ) -> PayrollTransaction:
        """Record a transaction against an employee of the company."""
        employee = await self.employee_service.get_by_employee_id(company_id, employee_id)

        transaction = PayrollTransaction(
            company_id=company_id,
            employee_ref_id=employee.id,
            transaction_date=transaction_date,
            type=transaction_type,
            amount=validate_amount(amount),
            description=description,
            status=status,
            created_by_id=created_by_id,
        )
        self.db.add(transaction)
        await self.db.commit()

        transaction = await self._load(company_id, transaction.id)
        logger.info(
            f"Recorded {transaction_type.value} {transaction.id} for employee {employee_id}"
        )
        await self._publish(transaction, ChangeAction.CREATED)
        return transaction

    async def update_transaction(
        self,
        company_id: str,
        transaction_id: str,
        updated_by_id: Optional[str] = None,
        **kwargs,
    ) -> PayrollTransaction:
        """Update date, type, amount, description and/or status."""
        transaction = await self._load(company_id, transaction_id)

        if kwargs.get("date") is not None:
            transaction.transaction_date = kwargs["date"]
        if kwargs.get("type") is not None:
            transaction.type = kwargs["type"]
        if kwargs.get("amount") is not None:
            transaction.amount = validate_amount(kwargs["amount"])
        if kwargs.get("description") is not None:
            transaction.description = kwargs["description"]
        if kwargs.get("status") is not None:
            transaction.status = kwargs["status"]
        transaction.updated_by_id = updated_by_id

        await self.db.commit()
        transaction = await self._load(company_id, transaction_id)
        await self._publish(transaction, ChangeAction.UPDATED)
        return transaction

    async def delete_transaction(self, company_id: str, transaction_id: str) -> None:
        transaction = await self._load(company_id, transaction_id)
        employee_id = transaction.employee_id

        await self.db.delete(transaction)
        await self.db.commit()

        await publish_change(
            Collection.TRANSACTIONS,
            ChangeAction.DELETED,
            company_id,
            transaction_id,
            employee_id=employee_id,
        )

    async def _publish(self, transaction: PayrollTransaction, action: ChangeAction) -> None:
        await publish_change(
            Collection.TRANSACTIONS,
            action,
            transaction.company_id,
            transaction.id,
            data=_event_payload(transaction),
            employee_id=transaction.employee_id,
        )
