"""
PayDesk - Payslip Schemas

Pydantic schemas for payslip generation requests and responses.
"""

from decimal import Decimal
from typing import Dict, Literal, Optional

from pydantic import AliasChoices, BaseModel, Field


class PayslipRequest(BaseModel):
    """
    Generate a payslip for one employee.

    month/year default to the current month. days_worked only applies to
    daily-rate employees.
    """
    employee_id: str = Field(
        ...,
        min_length=1,
        validation_alias=AliasChoices("employee_id", "employeeId"),
    )
    month: Optional[int] = Field(None, ge=1, le=12)
    year: Optional[int] = Field(None, ge=1900, le=9999)
    days_worked: Optional[Decimal] = Field(
        None,
        ge=0,
        le=31,
        validation_alias=AliasChoices("days_worked", "daysWorked"),
    )


class PayslipData(BaseModel):
    """Structured payslip (aggregator output)."""
    company_name: str
    company_tagline: str
    company_contact: str
    employee_name: str
    employee_id: str
    job_title: str
    pay_period: str
    gross_pay: Decimal
    allowances: Dict[str, Decimal]
    deductions: Dict[str, Decimal]
    taxes: Decimal
    net_pay: Decimal
    bank_name: str
    account_number: str
    recurring_contributions: Dict[str, Decimal]
    currency: str
    currency_symbol: str

    class Config:
        from_attributes = True


class PayslipResponse(BaseModel):
    """Payslip preview response."""
    payslip: PayslipData
    text: str
    filename: str


class PayslipNarrativeResponse(BaseModel):
    """Narrated payslip response."""
    payslip: PayslipData
    text: str
    source: Literal["ai", "template"]
