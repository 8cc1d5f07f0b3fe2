"""
PayDesk - Company Schemas

Pydantic schemas for company settings and recurring contributions.
"""

from decimal import Decimal
from typing import List, Optional

from pydantic import BaseModel, Field, field_validator

from app.models.company import Currency


class ContributionSchema(BaseModel):
    """Recurring contribution entry."""
    id: str
    name: str
    percentage: Decimal


class ContributionCreate(BaseModel):
    """Add a recurring contribution."""
    name: str = Field(..., min_length=1, max_length=100)
    percentage: Decimal = Field(..., ge=0, le=100)


class ContributionUpdate(BaseModel):
    """Edit a recurring contribution."""
    name: Optional[str] = Field(None, min_length=1, max_length=100)
    percentage: Optional[Decimal] = Field(None, ge=0, le=100)


class CompanyUpdate(BaseModel):
    """
    Partial settings update.

    Send ``flat_tax_amount: null`` to clear the flat tax override.
    """
    name: Optional[str] = Field(None, min_length=1, max_length=255)
    currency: Optional[Currency] = None
    tax_rate: Optional[Decimal] = Field(None, ge=0, le=100)
    flat_tax_amount: Optional[Decimal] = Field(None, ge=0)
    payslip_company_name: Optional[str] = Field(None, max_length=255)
    payslip_company_tagline: Optional[str] = Field(None, max_length=255)
    payslip_company_contact: Optional[str] = Field(None, max_length=255)


class CompanyResponse(BaseModel):
    """Company settings response."""
    id: str
    name: str
    currency: Currency
    currency_symbol: str
    tax_rate: Decimal
    flat_tax_amount: Optional[Decimal] = None
    recurring_contributions: List[ContributionSchema]
    payslip_company_name: str
    payslip_company_tagline: str
    payslip_company_contact: str

    @field_validator("recurring_contributions", mode="before")
    @classmethod
    def _contributions(cls, v):
        return list(v or [])
