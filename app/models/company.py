"""
PayDesk - Company Model

Tenant-level configuration: currency, tax policy, recurring contributions
and payslip branding. Every employee and transaction is partitioned by
company_id.
"""

from decimal import Decimal
from enum import Enum
from typing import Any, Dict, List, Optional

from sqlalchemy import JSON, Numeric, String, Enum as SQLEnum
from sqlalchemy.orm import Mapped, mapped_column

from app.models.base import BaseModel


class Currency(str, Enum):
    """Supported company currencies."""
    USD = "USD"
    RWF = "RWF"


class Company(BaseModel):
    """
    Company (tenant) configuration.

    recurring_contributions is an ordered list of
    {"id": str, "name": str, "percentage": number}; ids are unique within
    the list.
    """

    __tablename__ = "companies"

    name: Mapped[str] = mapped_column(String(255), nullable=False)
    currency: Mapped[Currency] = mapped_column(
        SQLEnum(Currency),
        default=Currency.USD,
        nullable=False,
    )

    # Tax policy
    tax_rate: Mapped[Decimal] = mapped_column(
        Numeric(precision=7, scale=4),
        default=Decimal("20"),
        nullable=False,
        comment="Flat tax percentage applied to gross pay",
    )
    flat_tax_amount: Mapped[Optional[Decimal]] = mapped_column(
        Numeric(precision=15, scale=2),
        nullable=True,
        comment="Fixed tax per payslip, overrides tax_rate when set",
    )

    recurring_contributions: Mapped[List[Dict[str, Any]]] = mapped_column(
        JSON,
        default=list,
        nullable=False,
    )

    # Payslip branding
    payslip_company_name: Mapped[str] = mapped_column(String(255), nullable=False)
    payslip_company_tagline: Mapped[str] = mapped_column(String(255), default="", nullable=False)
    payslip_company_contact: Mapped[str] = mapped_column(String(255), default="", nullable=False)
