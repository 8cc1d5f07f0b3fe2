"""
PayDesk - Payslip Service

Loads a point-in-time snapshot (employee, company and all of the employee's
transactions) and runs it through the aggregator and formatter.

Transactions are queried by employee only; period and status filtering
happen inside the aggregator.
"""

import logging
from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from typing import Optional

from sqlalchemy.ext.asyncio import AsyncSession

from app.models.user import User
from app.services.company_service import CompanyService
from app.services.employee_service import EmployeeService
from app.services.payroll_aggregator import (
    CompanySnapshot,
    EmployeeSnapshot,
    PayPeriod,
    PayslipInput,
    TransactionSnapshot,
    aggregate_payslip,
)
from app.services.payslip_formatter import format_payslip_text
from app.services.transaction_service import TransactionService
from app.utils.error_handling import AuthorizationException

logger = logging.getLogger(__name__)


@dataclass
class GeneratedPayslip:
    payslip: PayslipInput
    text: str


class PayslipService:
    """Service for payslip generation."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def load_payslip_input(
        self,
        principal: User,
        employee_id: str,
        period: Optional[PayPeriod] = None,
        days_worked: Optional[Decimal] = None,
        reference_date: Optional[date] = None,
    ) -> PayslipInput:
        """
        Build the structured payslip for one employee and period.

        The period defaults to the month of reference_date (today).
        Employee-role principals may only request their own payslip.
        """
        if not principal.can_manage_staff and principal.employee_id != employee_id:
            raise AuthorizationException("You can only generate your own payslip")

        period = period or PayPeriod.current(reference_date)
        company_id = principal.company_id

        company = await CompanyService(self.db).get_company(company_id)
        employee = await EmployeeService(self.db).get_by_employee_id(company_id, employee_id)
        transactions = await TransactionService(self.db).get_employee_transactions(
            company_id, employee_id
        )

        payslip = aggregate_payslip(
            EmployeeSnapshot.from_model(employee),
            CompanySnapshot.from_model(company),
            [TransactionSnapshot.from_model(t, employee_id=employee_id) for t in transactions],
            period,
            days_worked=days_worked,
        )
        logger.info(
            f"Computed payslip for {employee_id} ({period.label}): "
            f"{len(transactions)} transactions on file"
        )
        return payslip

    async def generate(
        self,
        principal: User,
        employee_id: str,
        period: Optional[PayPeriod] = None,
        days_worked: Optional[Decimal] = None,
        reference_date: Optional[date] = None,
    ) -> GeneratedPayslip:
        """Structured payslip plus its deterministic text."""
        payslip = await self.load_payslip_input(
            principal, employee_id, period, days_worked, reference_date
        )
        return GeneratedPayslip(payslip=payslip, text=format_payslip_text(payslip))
